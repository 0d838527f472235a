"""Typed interfaces for adapter-layer responsibilities."""

from typing import Protocol

from workflow_dispatch.domain import DefinitionPage, RunInstance


class WorkflowApiPort(Protocol):
    """Port definition for the remote workflow API surface."""

    async def adapter_list_workflows_page(self, owner_scope: str, page: int) -> DefinitionPage:
        """Fetch one page of workflow definitions for a repository.

        Args:
            owner_scope: Repository scope in `owner/repo` form.
            page: One-based page number.

        Returns:
            DefinitionPage: Page contents and next page marker.

        Raises:
            ConnectionError: Raised when upstream connection fails.
            TimeoutError: Raised when request exceeds timeout.
        """

    async def adapter_dispatch_workflow(
        self,
        owner_scope: str,
        workflow_id: int,
        revision: str,
        parameters: dict[str, str],
    ) -> int:
        """Submit one workflow dispatch request.

        Args:
            owner_scope: Repository scope in `owner/repo` form.
            workflow_id: Target workflow id.
            revision: Git ref to run the workflow on.
            parameters: Workflow inputs.

        Returns:
            int: Raw HTTP status code of the dispatch response.

        Raises:
            ConnectionError: Raised when upstream connection fails.
            TimeoutError: Raised when request exceeds timeout.
        """

    async def adapter_list_dispatched_runs(
        self,
        owner_scope: str,
        workflow_id: int,
        status: str,
    ) -> list[RunInstance]:
        """List dispatch-triggered runs of one workflow filtered by status.

        Returns:
            list[RunInstance]: Matching runs as reported upstream.

        Raises:
            ConnectionError: Raised when upstream connection fails.
            TimeoutError: Raised when request exceeds timeout.
        """

    async def adapter_get_run(self, owner_scope: str, run_id: int) -> RunInstance:
        """Fetch a fresh snapshot of one workflow run.

        Returns:
            RunInstance: Current run snapshot.

        Raises:
            ConnectionError: Raised when upstream connection fails.
            TimeoutError: Raised when request exceeds timeout.
        """
