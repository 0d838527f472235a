"""Typed interfaces for job-layer orchestration responsibilities."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Protocol


class OrchestratorState(str, enum.Enum):
    """Linear orchestration states; any failure moves directly to `FAILED`."""

    IDLE = "idle"
    LOCATED = "located"
    DISPATCHED = "dispatched"
    CORRELATED = "correlated"
    POLLED = "polled"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class DispatchExecutionResult:
    """Result contract for one dispatch invocation.

    Attributes:
        job_name: Job identifier.
        status: Final execution status (`success` or `failed`).
        state: Final orchestration state.
        waited: Whether completion polling was requested.
        workflow_id: Resolved workflow id, when located.
        run_id: Correlated run id, when known.
        run_url: Browser URL of the run, when known.
        conclusion: Terminal run conclusion, when known.
        error_code: Deterministic error code when failed.
        error_message: Human-readable failure message when failed.
        failed_stage: Stage that failed, when failed.
        stage_timeline: Structured stage timeline events.
    """

    job_name: str
    status: str
    state: OrchestratorState
    waited: bool = False
    workflow_id: int | None = None
    run_id: int | None = None
    run_url: str | None = None
    conclusion: str | None = None
    error_code: str | None = None
    error_message: str | None = None
    failed_stage: str | None = None
    stage_timeline: list[dict[str, object]] = field(default_factory=list)


class StatusReporterPort(Protocol):
    """Port definition for human-readable progress lines."""

    def reporter_info(self, message: str) -> None:
        """Write one status line.

        Args:
            message: Status text.

        Returns:
            None: Writes as side effect.
        """
