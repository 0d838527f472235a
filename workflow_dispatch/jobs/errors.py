"""Project-native typed exceptions for dispatch orchestration failures."""

from __future__ import annotations

from typing import Any


class WorkflowDispatchError(Exception):
    """Base exception for orchestration-level failures.

    Attributes:
        error_code: Deterministic error code reported on failure.
        stage: Orchestration stage that raised the failure.
    """

    error_code = "DISPATCH_UNEXPECTED_ERROR"
    stage = "run"

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class InputDecodeError(WorkflowDispatchError, ValueError):
    """Workflow inputs are not a valid flat JSON object."""

    error_code = "DISPATCH_INPUT_DECODE_ERROR"
    stage = "decode"


class NotFoundError(WorkflowDispatchError, LookupError):
    """Workflow reference did not match any workflow in the listing."""

    error_code = "DISPATCH_WORKFLOW_NOT_FOUND"
    stage = "locate"


class DispatchRejectedError(WorkflowDispatchError):
    """Dispatch endpoint answered with a non-acceptance status.

    Attributes:
        status_code: Raw HTTP status returned by the dispatch endpoint.
    """

    error_code = "DISPATCH_REJECTED"
    stage = "dispatch"

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class CorrelationFailedError(WorkflowDispatchError):
    """No queued run attributable to the dispatch was observed in time."""

    error_code = "DISPATCH_CORRELATION_FAILED"
    stage = "correlate"


class PollExhaustedError(WorkflowDispatchError):
    """Polling attempt budget consumed without an acceptable result.

    Attributes:
        attempts: Number of fetch attempts performed.
        max_attempts: Configured attempt budget.
        last_result: Last non-acceptable fetch result.
    """

    error_code = "DISPATCH_POLL_EXHAUSTED"
    stage = "poll"

    def __init__(self, message: str, attempts: int, max_attempts: int, last_result: Any = None):
        super().__init__(message)
        self.attempts = attempts
        self.max_attempts = max_attempts
        self.last_result = last_result


class PollCancelledError(WorkflowDispatchError):
    """Polling interrupted by the cancellation signal.

    Attributes:
        attempts: Number of fetch attempts performed before cancellation.
    """

    error_code = "DISPATCH_POLL_CANCELLED"
    stage = "poll"

    def __init__(self, message: str, attempts: int, stage: str | None = None):
        super().__init__(message, stage=stage)
        self.attempts = attempts


class RunFailedError(WorkflowDispatchError):
    """Workflow run completed with a conclusion other than success.

    Attributes:
        run_id: Workflow run identifier.
        conclusion: Terminal run conclusion.
        url: Browser URL of the run.
    """

    error_code = "DISPATCH_RUN_FAILED"
    stage = "poll"

    def __init__(self, message: str, run_id: int, conclusion: str | None, url: str):
        super().__init__(message)
        self.run_id = run_id
        self.conclusion = conclusion
        self.url = url
