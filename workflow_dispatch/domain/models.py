"""Typed domain models shared across runtime layers.

This module provides immutable data contracts for workflow definitions,
dispatch requests, workflow runs and polling policies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Final, Literal

RUN_STATUS_QUEUED: Final[str] = "queued"
RUN_STATUS_COMPLETED: Final[str] = "completed"
RUN_CONCLUSION_SUCCESS: Final[str] = "success"

ExhaustionMode = Literal["raise", "return_last"]


@dataclass(frozen=True)
class JobDefinition:
    """Workflow definition resolved from the remote listing.

    Attributes:
        id: Workflow identifier, unique within a repository.
        name: Workflow display name.
        path: Workflow file path inside the repository.
        state: Workflow state reported upstream (`active`, `disabled_manually`, ...).
    """

    id: int
    name: str
    path: str | None = None
    state: str | None = None

    def definition_matches(self, definition_ref: str) -> bool:
        """Return whether a name or stringified id reference selects this workflow."""

        return self.name == definition_ref or str(self.id) == definition_ref


@dataclass(frozen=True)
class DefinitionPage:
    """One page of the workflow listing.

    Attributes:
        definitions: Workflows contained in the page.
        next_page: Next page number, or None when the listing is exhausted.
    """

    definitions: tuple[JobDefinition, ...]
    next_page: int | None


@dataclass(frozen=True)
class DispatchRequest:
    """Decoded dispatch request built once per invocation.

    Attributes:
        owner_scope: Repository scope in `owner/repo` form.
        definition_ref: Workflow name or numeric id as supplied by the caller.
        revision: Git ref the workflow run is dispatched against.
        parameters: Flat string mapping forwarded as workflow inputs.
    """

    owner_scope: str
    definition_ref: str
    revision: str
    parameters: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DispatchInputs:
    """Raw invocation inputs handed to the orchestrator before decoding.

    Attributes:
        owner_scope: Repository scope in `owner/repo` form.
        definition_ref: Workflow name or numeric id.
        revision: Git ref to dispatch against.
        parameters_json: JSON-encoded workflow inputs, blank for none.
        wait: Whether to wait for the run to complete.
    """

    owner_scope: str
    definition_ref: str
    revision: str
    parameters_json: str = ""
    wait: bool = False


@dataclass(frozen=True)
class DispatchReceipt:
    """Acceptance signal returned by the dispatch endpoint.

    Attributes:
        status_code: Raw HTTP status of the dispatch call.
        dispatched_at_utc: Instant taken immediately before the dispatch call.
    """

    status_code: int
    dispatched_at_utc: datetime


@dataclass(frozen=True)
class RunInstance:
    """Snapshot of one workflow run.

    Attributes:
        id: Run identifier.
        status: Run status (`queued`, `in_progress`, `completed`, ...).
        conclusion: Run conclusion, meaningful only once completed.
        url: Browser URL of the run.
        created_at_utc: Creation instant reported upstream, when present.
    """

    id: int
    status: str
    conclusion: str | None
    url: str
    created_at_utc: datetime | None = None

    def run_is_terminal(self) -> bool:
        """Return whether the run reached its terminal `completed` status."""

        return self.status == RUN_STATUS_COMPLETED

    def run_succeeded(self) -> bool:
        """Return whether the run completed with a `success` conclusion."""

        return self.run_is_terminal() and self.conclusion == RUN_CONCLUSION_SUCCESS


@dataclass(frozen=True)
class PollPolicy:
    """Bounded polling policy.

    Attributes:
        interval_seconds: Suspension between consecutive fetch attempts.
        max_attempts: Attempt budget, `0` means unbounded.
        exhaustion_mode: `raise` fails on exhaustion, `return_last` resolves with the last result.
    """

    interval_seconds: float
    max_attempts: int
    exhaustion_mode: ExhaustionMode = "raise"

    def __post_init__(self) -> None:
        if self.interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")
        if self.max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")
        if self.exhaustion_mode not in ("raise", "return_last"):
            raise ValueError(f"unsupported exhaustion_mode={self.exhaustion_mode}")

    def policy_is_bounded(self) -> bool:
        """Return whether the policy caps the number of attempts."""

        return self.max_attempts > 0
