"""GitHub Actions REST adapter implementation for workflow dispatch and run lookup."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Final

import httpx

from workflow_dispatch.config.logging_config import get_logger
from workflow_dispatch.domain import DefinitionPage, JobDefinition, RunInstance

from .github_errors import GitHubAdapterConnectionError, GitHubAdapterTimeoutError, GitHubApiResponseError
from .interfaces import WorkflowApiPort

logger = get_logger(__name__)


class GitHubActionsAdapter(WorkflowApiPort):
    """Adapter implementation for the GitHub Actions workflows and runs endpoints.

    One pooled `httpx.AsyncClient` is shared by every call of an invocation;
    use the adapter as an async context manager or call `adapter_close()`.
    """

    _USER_AGENT: Final[str] = "workflow-dispatch/1.0 (Python/httpx)"
    _API_VERSION: Final[str] = "2022-11-28"
    _PAGE_SIZE: Final[int] = 100
    _DISPATCH_EVENT: Final[str] = "workflow_dispatch"

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        request_timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize GitHub REST adapter.

        Args:
            token: GitHub token sent as bearer credential.
            base_url: REST API root URL.
            request_timeout_seconds: HTTP request timeout in seconds.
            transport: Optional httpx transport override.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_token = token.strip()
        normalized_base_url = base_url.strip()

        if not normalized_token:
            raise ValueError("token must not be blank")
        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._client = httpx.AsyncClient(
            base_url=normalized_base_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {normalized_token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": self._API_VERSION,
                "User-Agent": self._USER_AGENT,
            },
            timeout=request_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> GitHubActionsAdapter:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.adapter_close()

    async def adapter_close(self) -> None:
        """Close the pooled HTTP client."""

        await self._client.aclose()

    async def adapter_list_workflows_page(self, owner_scope: str, page: int) -> DefinitionPage:
        """Fetch one page of repository workflows.

        Args:
            owner_scope: Repository scope in `owner/repo` form.
            page: One-based page number.

        Returns:
            DefinitionPage: Workflows and the next page number taken from the `Link` header.

        Raises:
            GitHubAdapterConnectionError: Raised for transport failures.
            GitHubAdapterTimeoutError: Raised when the request timed out.
            GitHubApiResponseError: Raised for error statuses or malformed payloads.
        """

        if page < 1:
            raise ValueError("page must be >= 1")

        response = await self._adapter_request(
            "GET",
            f"/repos/{owner_scope}/actions/workflows",
            params={"per_page": self._PAGE_SIZE, "page": page},
        )
        payload = self._adapter_json_object(response, context_label="list_workflows")
        raw_workflows = payload.get("workflows")
        if not isinstance(raw_workflows, list):
            raise GitHubApiResponseError("GitHub workflow listing response missing `workflows`")

        definitions = tuple(self._adapter_parse_workflow(item) for item in raw_workflows)
        logger.debug(
            "workflow_page_listed",
            owner_scope=owner_scope,
            page=page,
            workflows=[{"id": item.id, "name": item.name} for item in definitions],
        )
        return DefinitionPage(definitions=definitions, next_page=self._adapter_next_page(response, page))

    async def adapter_dispatch_workflow(
        self,
        owner_scope: str,
        workflow_id: int,
        revision: str,
        parameters: dict[str, str],
    ) -> int:
        """Submit one `workflow_dispatch` event and return the raw status code.

        Non-success statuses are returned rather than raised so the caller can
        decide acceptance. The request is never retried here.

        Raises:
            GitHubAdapterConnectionError: Raised for transport failures.
            GitHubAdapterTimeoutError: Raised when the request timed out.
        """

        response = await self._adapter_send(
            "POST",
            f"/repos/{owner_scope}/actions/workflows/{workflow_id}/dispatches",
            json={"ref": revision, "inputs": parameters},
        )
        if response.status_code >= 400:
            logger.warning(
                "workflow_dispatch_rejected",
                workflow_id=workflow_id,
                status_code=response.status_code,
                body=response.text[:500],
            )
        return response.status_code

    async def adapter_list_dispatched_runs(
        self,
        owner_scope: str,
        workflow_id: int,
        status: str,
    ) -> list[RunInstance]:
        """List `workflow_dispatch` runs of one workflow with the given status.

        Raises:
            GitHubAdapterConnectionError: Raised for transport failures.
            GitHubAdapterTimeoutError: Raised when the request timed out.
            GitHubApiResponseError: Raised for error statuses or malformed payloads.
        """

        response = await self._adapter_request(
            "GET",
            f"/repos/{owner_scope}/actions/workflows/{workflow_id}/runs",
            params={"event": self._DISPATCH_EVENT, "status": status},
        )
        payload = self._adapter_json_object(response, context_label="list_runs")
        raw_runs = payload.get("workflow_runs")
        if not isinstance(raw_runs, list):
            raise GitHubApiResponseError("GitHub run listing response missing `workflow_runs`")
        return [self._adapter_parse_run(item) for item in raw_runs]

    async def adapter_get_run(self, owner_scope: str, run_id: int) -> RunInstance:
        """Fetch a fresh snapshot of one workflow run.

        Raises:
            GitHubAdapterConnectionError: Raised for transport failures.
            GitHubAdapterTimeoutError: Raised when the request timed out.
            GitHubApiResponseError: Raised for error statuses or malformed payloads.
        """

        response = await self._adapter_request("GET", f"/repos/{owner_scope}/actions/runs/{run_id}")
        return self._adapter_parse_run(self._adapter_json_object(response, context_label="get_run"))

    async def _adapter_request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request and raise for error statuses.

        Raises:
            GitHubApiResponseError: Raised when upstream returns HTTP status >= 400.
        """

        response = await self._adapter_send(method, url, **kwargs)
        if response.status_code >= 400:
            raise GitHubApiResponseError(
                f"GitHub API {method} {url} returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response

    async def _adapter_send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request and map transport failures to typed adapter errors.

        Raises:
            GitHubAdapterTimeoutError: Raised when the request timed out.
            GitHubAdapterConnectionError: Raised for other transport, protocol or decoding failures.
        """

        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as error:
            raise GitHubAdapterTimeoutError(f"GitHub API {method} {url} timed out") from error
        except httpx.HTTPError as error:
            raise GitHubAdapterConnectionError(f"GitHub API {method} {url} failed: {error}") from error

    def _adapter_json_object(self, response: httpx.Response, context_label: str) -> dict[str, Any]:
        """Decode a JSON object response body.

        Raises:
            GitHubApiResponseError: Raised when the body is not a JSON object.
        """

        try:
            payload = response.json()
        except ValueError as error:
            raise GitHubApiResponseError(f"GitHub JSON parse failed for context={context_label}") from error
        if not isinstance(payload, dict):
            raise GitHubApiResponseError(f"GitHub response for context={context_label} is not a JSON object")
        return payload

    def _adapter_next_page(self, response: httpx.Response, page: int) -> int | None:
        """Return next page number from the `Link` header, or None on the last page."""

        next_link = response.links.get("next")
        if not next_link or not next_link.get("url"):
            return None
        next_page_value = httpx.URL(next_link["url"]).params.get("page")
        if next_page_value is None or not next_page_value.isdigit():
            return page + 1
        return int(next_page_value)

    def _adapter_parse_workflow(self, item: Any) -> JobDefinition:
        """Parse one workflow listing entry.

        Raises:
            GitHubApiResponseError: Raised when required fields are missing.
        """

        if not isinstance(item, dict) or not isinstance(item.get("id"), int):
            raise GitHubApiResponseError("GitHub workflow entry missing integer `id`")
        return JobDefinition(
            id=item["id"],
            name=str(item.get("name") or ""),
            path=item.get("path"),
            state=item.get("state"),
        )

    def _adapter_parse_run(self, item: Any) -> RunInstance:
        """Parse one workflow run payload.

        Raises:
            GitHubApiResponseError: Raised when required fields are missing.
        """

        if not isinstance(item, dict) or not isinstance(item.get("id"), int):
            raise GitHubApiResponseError("GitHub workflow run missing integer `id`")
        return RunInstance(
            id=item["id"],
            status=str(item.get("status") or ""),
            conclusion=item.get("conclusion"),
            url=str(item.get("html_url") or ""),
            created_at_utc=self._adapter_parse_timestamp(item.get("created_at")),
        )

    def _adapter_parse_timestamp(self, value: Any) -> datetime | None:
        """Parse an ISO-8601 GitHub timestamp, returning None when absent or invalid."""

        if not isinstance(value, str) or not value.strip():
            return None
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed
