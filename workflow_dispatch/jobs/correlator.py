"""Correlation of an accepted dispatch to the workflow run it created.

The dispatch endpoint returns no run id, so the run is found by listing
queued `workflow_dispatch` runs of the workflow and taking the most recent one
created inside the dispatch window. Concurrent dispatches of the same workflow
can still be confused with each other; recency is a best-effort pick.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

from workflow_dispatch.adapters import WorkflowApiPort
from workflow_dispatch.config.logging_config import get_logger
from workflow_dispatch.domain import RUN_STATUS_QUEUED, DispatchReceipt, JobDefinition, PollPolicy, RunInstance

from .errors import CorrelationFailedError, PollCancelledError, PollExhaustedError
from .polling import PollingEngine

logger = get_logger(__name__)

_EPOCH_UTC = datetime.min.replace(tzinfo=timezone.utc)


def job_select_most_recent_run(candidates: list[RunInstance]) -> RunInstance:
    """Return the most recently created run, ties broken by the higher run id.

    Raises:
        ValueError: Raised when candidates is empty.
    """

    if not candidates:
        raise ValueError("candidates must not be empty")
    return max(candidates, key=lambda run: (run.created_at_utc or _EPOCH_UTC, run.id))


class RunCorrelator:
    """Find the queued run caused by one dispatch, polling while it is not yet visible."""

    def __init__(
        self,
        api: WorkflowApiPort,
        polling_engine: PollingEngine,
        policy: PollPolicy,
        clock_skew_seconds: float = 10.0,
    ):
        """Initialize run correlator.

        Args:
            api: Remote workflow API.
            polling_engine: Shared polling engine.
            policy: Short-interval, low-attempt appearance policy.
            clock_skew_seconds: Tolerance between local and upstream clocks for the window start.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if api is None:
            raise ValueError("api must not be None")
        if polling_engine is None:
            raise ValueError("polling_engine must not be None")
        if clock_skew_seconds < 0:
            raise ValueError("clock_skew_seconds must be >= 0")

        self._api = api
        self._polling_engine = polling_engine
        self._policy = policy
        self._clock_skew = timedelta(seconds=clock_skew_seconds)

    async def job_correlate(
        self,
        owner_scope: str,
        definition: JobDefinition,
        receipt: DispatchReceipt,
        cancel_event: asyncio.Event | None = None,
    ) -> RunInstance:
        """Return the run instance created by the accepted dispatch.

        Args:
            owner_scope: Repository scope in `owner/repo` form.
            definition: Dispatched workflow.
            receipt: Dispatch acceptance receipt.
            cancel_event: Optional cancellation signal.

        Returns:
            RunInstance: Most recent queued run inside the dispatch window.

        Raises:
            CorrelationFailedError: Raised when no candidate run appears within the policy budget.
            PollCancelledError: Raised when cancelled while waiting.
        """

        window_start_utc = receipt.dispatched_at_utc - self._clock_skew

        async def _fetch_candidates() -> list[RunInstance]:
            queued_runs = await self._api.adapter_list_dispatched_runs(
                owner_scope=owner_scope,
                workflow_id=definition.id,
                status=RUN_STATUS_QUEUED,
            )
            return [
                run
                for run in queued_runs
                if run.created_at_utc is None or run.created_at_utc >= window_start_utc
            ]

        try:
            candidates = await self._polling_engine.job_poll(
                fetch=_fetch_candidates,
                is_acceptable=bool,
                policy=self._policy,
                label=f"queued run for workflow {definition.id}",
                describe=lambda runs: f"{len(runs)} candidate runs",
                cancel_event=cancel_event,
            )
        except PollExhaustedError as error:
            raise CorrelationFailedError(self._job_failure_message(owner_scope, definition, error.attempts)) from error
        except PollCancelledError as error:
            raise PollCancelledError(str(error), attempts=error.attempts, stage="correlate") from error

        if not candidates:
            raise CorrelationFailedError(
                self._job_failure_message(owner_scope, definition, self._policy.max_attempts)
            )

        run = job_select_most_recent_run(candidates)
        logger.info("workflow_run_correlated", run_id=run.id, candidate_count=len(candidates))
        return run

    def _job_failure_message(self, owner_scope: str, definition: JobDefinition, attempts: int) -> str:
        return (
            f"No queued workflow run observed for '{definition.name}' ({definition.id}) in {owner_scope} "
            f"after {attempts} attempts. The dispatch was accepted, so the run may still exist and be "
            f"running but could not be discovered."
        )
