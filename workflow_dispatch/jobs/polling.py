"""Bounded polling primitive shared by run correlation and completion waits."""

from __future__ import annotations

import asyncio
import enum
from typing import Awaitable, Callable, Generic, TypeVar

from workflow_dispatch.config.logging_config import get_logger
from workflow_dispatch.domain import PollPolicy

from .errors import PollCancelledError, PollExhaustedError

logger = get_logger(__name__)

T = TypeVar("T")


class PollDecision(enum.Enum):
    """Outcome of evaluating one poll attempt."""

    CONTINUE = "continue"
    SUCCEED = "succeed"
    EXHAUST = "exhaust"


def job_poll_decide(attempts_so_far: int, policy: PollPolicy, acceptable: bool) -> PollDecision:
    """Decide the next polling step from the attempt count and the latest evaluation.

    Args:
        attempts_so_far: Number of completed fetch attempts, including the latest.
        policy: Polling policy.
        acceptable: Whether the latest fetch result was acceptable.

    Returns:
        PollDecision: `SUCCEED` when acceptable, `EXHAUST` when the bounded budget
        is consumed, otherwise `CONTINUE`.

    Raises:
        ValueError: Raised when attempts_so_far is below one.
    """

    if attempts_so_far < 1:
        raise ValueError("attempts_so_far must be >= 1")
    if acceptable:
        return PollDecision.SUCCEED
    if policy.policy_is_bounded() and attempts_so_far >= policy.max_attempts:
        return PollDecision.EXHAUST
    return PollDecision.CONTINUE


class PollingEngine(Generic[T]):
    """Sequential fetch-evaluate-suspend loop driven by a `PollPolicy`.

    Fetches never overlap: each attempt awaits the previous fetch before the
    suspension for the next one starts.
    """

    def __init__(self, sleep: Callable[[float], Awaitable[None]] | None = None):
        """Initialize polling engine.

        Args:
            sleep: Optional suspension coroutine, defaults to `asyncio.sleep`.
        """

        self._sleep = sleep or asyncio.sleep

    async def job_poll(
        self,
        fetch: Callable[[], Awaitable[T]],
        is_acceptable: Callable[[T], bool],
        policy: PollPolicy,
        label: str = "poll",
        describe: Callable[[T], str] | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> T:
        """Poll until the fetched value is acceptable or the policy is exhausted.

        Args:
            fetch: Coroutine factory returning a fresh value per attempt.
            is_acceptable: Predicate evaluated on every fetched value.
            policy: Interval, attempt budget and exhaustion mode.
            label: Human-readable name of the awaited condition.
            describe: Optional formatter for the last observed value in messages.
            cancel_event: Optional event that interrupts a pending suspension.

        Returns:
            T: First acceptable value, or the last value when exhausted in `return_last` mode.

        Raises:
            PollExhaustedError: Raised on exhaustion in `raise` mode.
            PollCancelledError: Raised when the cancel event is set.
        """

        attempts = 0
        while True:
            self._job_raise_if_cancelled(cancel_event, attempts=attempts, label=label)
            result = await fetch()
            attempts += 1
            decision = job_poll_decide(attempts, policy, acceptable=is_acceptable(result))
            logger.debug("poll_attempt", label=label, attempt=attempts, decision=decision.value)

            if decision is PollDecision.SUCCEED:
                return result
            if decision is PollDecision.EXHAUST:
                if policy.exhaustion_mode == "return_last":
                    logger.warning("poll_exhausted_returning_last", label=label, attempts=attempts)
                    return result
                last_observed = describe(result) if describe is not None else repr(result)
                raise PollExhaustedError(
                    f"{label} not observed after {attempts} of {policy.max_attempts} attempts "
                    f"at {policy.interval_seconds:g}s interval; last observed: {last_observed}",
                    attempts=attempts,
                    max_attempts=policy.max_attempts,
                    last_result=result,
                )

            await self._job_suspend(policy.interval_seconds, cancel_event, attempts=attempts, label=label)

    async def _job_suspend(
        self,
        interval_seconds: float,
        cancel_event: asyncio.Event | None,
        attempts: int,
        label: str,
    ) -> None:
        """Suspend for one interval using the configured sleep, returning early with an error when cancelled."""

        if cancel_event is None:
            await self._sleep(interval_seconds)
            return

        self._job_raise_if_cancelled(cancel_event, attempts=attempts, label=label)
        sleep_task = asyncio.ensure_future(self._sleep(interval_seconds))
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({sleep_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sleep_task, cancel_task):
                task.cancel()
            await asyncio.gather(sleep_task, cancel_task, return_exceptions=True)

        self._job_raise_if_cancelled(cancel_event, attempts=attempts, label=label)
        if not sleep_task.cancelled():
            sleep_task.result()

    def _job_raise_if_cancelled(self, cancel_event: asyncio.Event | None, attempts: int, label: str) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise PollCancelledError(f"{label} cancelled after {attempts} attempts", attempts=attempts)
