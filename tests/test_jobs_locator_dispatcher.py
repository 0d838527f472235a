"""Regression tests for workflow lookup pagination and single-shot dispatch."""

from __future__ import annotations

import asyncio

import pytest

from workflow_dispatch.domain import DispatchRequest, JobDefinition
from workflow_dispatch.jobs import DispatchRejectedError, NotFoundError, WorkflowDispatcher, WorkflowLocator


def test_jobs_locator_finds_workflow_on_later_page(workflow_api_stub_factory) -> None:
    """Return a workflow that only appears on the last listing page.

    Args:
        workflow_api_stub_factory: Workflow API stub class fixture.

    Returns:
        None: Assertions validate pagination exhaustiveness.

    Raises:
        AssertionError: Raised when later pages are not consumed.
    """

    api = workflow_api_stub_factory(
        pages=[
            [JobDefinition(id=1, name="lint"), JobDefinition(id=2, name="docs")],
            [JobDefinition(id=3, name="release")],
            [JobDefinition(id=42, name="build")],
        ]
    )

    definition = asyncio.run(WorkflowLocator(api=api).job_locate(owner_scope="octo/repo", definition_ref="build"))

    assert definition == JobDefinition(id=42, name="build")
    assert [call[2] for call in api.calls] == [1, 2, 3]


def test_jobs_locator_matches_stringified_id_and_consumes_all_pages(workflow_api_stub_factory) -> None:
    """Match by numeric id and still read every page before matching.

    Args:
        workflow_api_stub_factory: Workflow API stub class fixture.

    Returns:
        None: Assertions validate id matching and full listing consumption.

    Raises:
        AssertionError: Raised when pagination stops early.
    """

    api = workflow_api_stub_factory(
        pages=[[JobDefinition(id=42, name="build")], [JobDefinition(id=43, name="42")]],
    )

    definition = asyncio.run(WorkflowLocator(api=api).job_locate(owner_scope="octo/repo", definition_ref="42"))

    assert definition.id == 42
    assert len(api.calls) == 2


def test_jobs_locator_raises_not_found_without_substring_match(workflow_api_stub_factory) -> None:
    """Raise NotFoundError when only partial name matches exist.

    Args:
        workflow_api_stub_factory: Workflow API stub class fixture.

    Returns:
        None: Assertions validate exact matching semantics.

    Raises:
        AssertionError: Raised when a substring match is accepted.
    """

    api = workflow_api_stub_factory(
        pages=[[JobDefinition(id=1, name="build-and-test")], [JobDefinition(id=2, name="prebuild")]],
    )

    with pytest.raises(NotFoundError, match="Unable to find workflow 'build' in octo/repo"):
        asyncio.run(WorkflowLocator(api=api).job_locate(owner_scope="octo/repo", definition_ref="build"))

    assert len(api.calls) == 2


def test_jobs_dispatcher_sends_one_request_and_returns_receipt(workflow_api_stub_factory) -> None:
    """Send exactly one dispatch carrying revision and parameters.

    Args:
        workflow_api_stub_factory: Workflow API stub class fixture.

    Returns:
        None: Assertions validate request payload and receipt.

    Raises:
        AssertionError: Raised when dispatch payload is wrong.
    """

    api = workflow_api_stub_factory(dispatch_status=204)
    request = DispatchRequest(
        owner_scope="octo/repo",
        definition_ref="build",
        revision="refs/heads/main",
        parameters={"environment": "staging"},
    )

    receipt = asyncio.run(
        WorkflowDispatcher(api=api).job_dispatch(request=request, definition=JobDefinition(id=42, name="build"))
    )

    assert receipt.status_code == 204
    assert receipt.dispatched_at_utc.tzinfo is not None
    assert api.calls == [("dispatch", "octo/repo", 42, "refs/heads/main", {"environment": "staging"})]


@pytest.mark.parametrize("status_code", [404, 422, 500])
def test_jobs_dispatcher_rejects_non_acceptance_status_without_retry(
    workflow_api_stub_factory,
    status_code: int,
) -> None:
    """Raise DispatchRejectedError carrying the raw status and never retry.

    Args:
        workflow_api_stub_factory: Workflow API stub class fixture.
        status_code: Non-acceptance HTTP status.

    Returns:
        None: Assertions validate typed rejection and single call.

    Raises:
        AssertionError: Raised when rejection is not surfaced or dispatch is repeated.
    """

    api = workflow_api_stub_factory(dispatch_status=status_code)
    request = DispatchRequest(owner_scope="octo/repo", definition_ref="build", revision="main")

    with pytest.raises(DispatchRejectedError, match=f"HTTP {status_code}") as error_info:
        asyncio.run(WorkflowDispatcher(api=api).job_dispatch(request=request, definition=JobDefinition(id=42, name="build")))

    assert error_info.value.status_code == status_code
    assert api.call_names() == ["dispatch"]
