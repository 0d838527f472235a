"""Single-shot workflow dispatch submission."""

from __future__ import annotations

from datetime import datetime, timezone

from workflow_dispatch.adapters import WorkflowApiPort
from workflow_dispatch.config.logging_config import get_logger
from workflow_dispatch.domain import DispatchReceipt, DispatchRequest, JobDefinition

from .errors import DispatchRejectedError

logger = get_logger(__name__)


class WorkflowDispatcher:
    """Submit exactly one dispatch request per call.

    The remote endpoint is not idempotent, so nothing here retries: a retry
    could create a second workflow run.
    """

    def __init__(self, api: WorkflowApiPort):
        if api is None:
            raise ValueError("api must not be None")
        self._api = api

    async def job_dispatch(self, request: DispatchRequest, definition: JobDefinition) -> DispatchReceipt:
        """Dispatch the resolved workflow with the request's revision and parameters.

        Args:
            request: Decoded dispatch request.
            definition: Resolved workflow definition.

        Returns:
            DispatchReceipt: Acceptance status and the instant the dispatch was sent.

        Raises:
            DispatchRejectedError: Raised when the endpoint answers with a non-2xx status.
            ConnectionError: Raised when upstream connection fails.
            TimeoutError: Raised when request exceeds timeout.
        """

        dispatched_at_utc = datetime.now(timezone.utc)
        status_code = await self._api.adapter_dispatch_workflow(
            owner_scope=request.owner_scope,
            workflow_id=definition.id,
            revision=request.revision,
            parameters=dict(request.parameters),
        )
        if not 200 <= status_code < 300:
            raise DispatchRejectedError(
                f"Workflow dispatch for '{definition.name}' ({definition.id}) rejected with HTTP {status_code}",
                status_code=status_code,
            )

        logger.info("workflow_dispatched", workflow_id=definition.id, revision=request.revision, status_code=status_code)
        return DispatchReceipt(status_code=status_code, dispatched_at_utc=dispatched_at_utc)
