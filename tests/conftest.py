"""Shared in-memory stubs for job-layer tests."""

from __future__ import annotations

import pytest

from workflow_dispatch.domain import DefinitionPage, JobDefinition, RunInstance


class WorkflowApiStub:
    """In-memory workflow API recording every call in order."""

    def __init__(
        self,
        pages: list[list[JobDefinition]] | None = None,
        dispatch_status: int = 204,
        queued_run_batches: list[list[RunInstance]] | None = None,
        run_snapshots: list[RunInstance] | None = None,
    ):
        """Initialize stub responses.

        Args:
            pages: Workflow listing pages, page one first.
            dispatch_status: Status code returned by dispatch.
            queued_run_batches: Queued run listings returned per call; the last batch repeats.
            run_snapshots: Run snapshots returned per call; the last snapshot repeats.
        """

        self.pages = pages if pages is not None else [[]]
        self.dispatch_status = dispatch_status
        self.queued_run_batches = list(queued_run_batches or [[]])
        self.run_snapshots = list(run_snapshots or [])
        self.calls: list[tuple[object, ...]] = []

    def call_names(self) -> list[str]:
        """Return recorded call names in order."""

        return [str(call[0]) for call in self.calls]

    async def adapter_list_workflows_page(self, owner_scope: str, page: int) -> DefinitionPage:
        self.calls.append(("list_workflows", owner_scope, page))
        next_page = page + 1 if page < len(self.pages) else None
        return DefinitionPage(definitions=tuple(self.pages[page - 1]), next_page=next_page)

    async def adapter_dispatch_workflow(
        self,
        owner_scope: str,
        workflow_id: int,
        revision: str,
        parameters: dict[str, str],
    ) -> int:
        self.calls.append(("dispatch", owner_scope, workflow_id, revision, parameters))
        return self.dispatch_status

    async def adapter_list_dispatched_runs(self, owner_scope: str, workflow_id: int, status: str) -> list[RunInstance]:
        self.calls.append(("list_runs", owner_scope, workflow_id, status))
        if len(self.queued_run_batches) > 1:
            return self.queued_run_batches.pop(0)
        return self.queued_run_batches[0]

    async def adapter_get_run(self, owner_scope: str, run_id: int) -> RunInstance:
        self.calls.append(("get_run", owner_scope, run_id))
        if len(self.run_snapshots) > 1:
            return self.run_snapshots.pop(0)
        return self.run_snapshots[0]


class SleepRecorder:
    """Suspension stub that records requested intervals without waiting."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def workflow_api_stub_factory() -> type[WorkflowApiStub]:
    """Return the workflow API stub class for per-test construction."""

    return WorkflowApiStub


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    """Return a fresh suspension recorder."""

    return SleepRecorder()
