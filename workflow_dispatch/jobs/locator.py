"""Workflow lookup by name or id across the paginated workflow listing."""

from __future__ import annotations

from workflow_dispatch.adapters import WorkflowApiPort
from workflow_dispatch.config.logging_config import get_logger
from workflow_dispatch.domain import JobDefinition

from .errors import NotFoundError

logger = get_logger(__name__)


class WorkflowLocator:
    """Resolve a human-supplied workflow reference to a `JobDefinition`."""

    def __init__(self, api: WorkflowApiPort):
        if api is None:
            raise ValueError("api must not be None")
        self._api = api

    async def job_list_definitions(self, owner_scope: str) -> list[JobDefinition]:
        """Return every workflow of the repository, following pagination until exhausted.

        Raises:
            ConnectionError: Raised when upstream connection fails.
            TimeoutError: Raised when a page request exceeds timeout.
        """

        definitions: list[JobDefinition] = []
        page: int | None = 1
        while page is not None:
            definition_page = await self._api.adapter_list_workflows_page(owner_scope=owner_scope, page=page)
            definitions.extend(definition_page.definitions)
            if definition_page.next_page is not None and definition_page.next_page <= page:
                raise RuntimeError(f"workflow listing pagination did not advance past page {page}")
            page = definition_page.next_page
        return definitions

    async def job_locate(self, owner_scope: str, definition_ref: str) -> JobDefinition:
        """Return the first workflow whose name or stringified id equals the reference.

        Args:
            owner_scope: Repository scope in `owner/repo` form.
            definition_ref: Workflow name or numeric id.

        Returns:
            JobDefinition: Matched workflow.

        Raises:
            NotFoundError: Raised when no workflow matches after the full listing is consumed.
        """

        definitions = await self.job_list_definitions(owner_scope=owner_scope)
        logger.debug("workflows_listed", owner_scope=owner_scope, workflow_count=len(definitions))

        for definition in definitions:
            if definition.definition_matches(definition_ref):
                logger.info("workflow_located", workflow_id=definition.id, workflow_name=definition.name)
                return definition

        raise NotFoundError(f"Unable to find workflow '{definition_ref}' in {owner_scope}")
