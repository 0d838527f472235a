"""Job-layer dispatch orchestrator with deterministic stage timeline capture."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from workflow_dispatch.adapters import (
    GitHubAdapterConnectionError,
    GitHubAdapterError,
    GitHubAdapterTimeoutError,
    GitHubApiResponseError,
    WorkflowApiPort,
)
from workflow_dispatch.config.logging_config import get_logger
from workflow_dispatch.domain import DispatchInputs, PollPolicy, RunInstance, domain_build_stage_event

from .correlator import RunCorrelator
from .dispatcher import WorkflowDispatcher
from .errors import PollExhaustedError, RunFailedError, WorkflowDispatchError
from .inputs import job_build_dispatch_request
from .interfaces import DispatchExecutionResult, OrchestratorState, StatusReporterPort
from .locator import WorkflowLocator
from .polling import PollingEngine

logger = get_logger(__name__)


@dataclass(frozen=True)
class DispatchOrchestratorConfig:
    """Configuration values for dispatch orchestration.

    Attributes:
        correlation_policy: Short-interval policy for run appearance.
        completion_policy: Long-interval policy for run completion.
        clock_skew_seconds: Dispatch window tolerance used by correlation.
    """

    correlation_policy: PollPolicy = field(default_factory=lambda: PollPolicy(interval_seconds=3.0, max_attempts=10))
    completion_policy: PollPolicy = field(default_factory=lambda: PollPolicy(interval_seconds=5.0, max_attempts=100))
    clock_skew_seconds: float = 10.0


class WorkflowDispatchOrchestrator:
    """Locate, dispatch, and optionally correlate and await one workflow run."""

    _JOB_NAME = "workflow_dispatch"

    def __init__(
        self,
        api: WorkflowApiPort,
        config: DispatchOrchestratorConfig | None = None,
        polling_engine: PollingEngine | None = None,
        reporter: StatusReporterPort | None = None,
    ):
        """Initialize dispatch orchestrator dependencies.

        Args:
            api: Remote workflow API adapter.
            config: Polling configuration.
            polling_engine: Optional polling engine override.
            reporter: Optional sink for human-readable progress lines.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if api is None:
            raise ValueError("api must not be None")

        self._api = api
        self._config = config or DispatchOrchestratorConfig()
        self._polling_engine = polling_engine or PollingEngine()
        self._reporter = reporter
        self._locator = WorkflowLocator(api=api)
        self._dispatcher = WorkflowDispatcher(api=api)
        self._correlator = RunCorrelator(
            api=api,
            polling_engine=self._polling_engine,
            policy=self._config.correlation_policy,
            clock_skew_seconds=self._config.clock_skew_seconds,
        )

    async def job_execute(
        self,
        inputs: DispatchInputs,
        cancel_event: asyncio.Event | None = None,
    ) -> DispatchExecutionResult:
        """Execute one dispatch invocation and map its outcome to success or failure.

        Every failure is caught here once and converted into a failed result;
        no earlier stage is retried and an accepted dispatch is never retracted.

        Args:
            inputs: Raw invocation inputs.
            cancel_event: Optional cancellation signal threaded into polling.

        Returns:
            DispatchExecutionResult: Final execution status payload.

        Raises:
            RuntimeError: This method converts handled failures into a failed result.
        """

        timeline: list[dict[str, object]] = [domain_build_stage_event(stage="run", status="started")]
        state = OrchestratorState.IDLE
        stage = "decode"
        workflow_id: int | None = None
        run: RunInstance | None = None

        try:
            request = job_build_dispatch_request(inputs)

            stage = "locate"
            definition = await self._locator.job_locate(
                owner_scope=request.owner_scope,
                definition_ref=request.definition_ref,
            )
            workflow_id = definition.id
            state = OrchestratorState.LOCATED
            timeline.append(domain_build_stage_event(stage="locate", status="completed", details={"workflow_id": definition.id}))
            self._job_report(f"Workflow id is: {definition.id}")

            stage = "dispatch"
            receipt = await self._dispatcher.job_dispatch(request=request, definition=definition)
            state = OrchestratorState.DISPATCHED
            timeline.append(
                domain_build_stage_event(stage="dispatch", status="completed", details={"status_code": receipt.status_code})
            )
            self._job_report(f"Workflow dispatch response status: {receipt.status_code}")

            if not inputs.wait:
                return self._job_succeeded(timeline, waited=False, workflow_id=workflow_id, run=None)

            stage = "correlate"
            run = await self._correlator.job_correlate(
                owner_scope=request.owner_scope,
                definition=definition,
                receipt=receipt,
                cancel_event=cancel_event,
            )
            state = OrchestratorState.CORRELATED
            timeline.append(domain_build_stage_event(stage="correlate", status="completed", details={"run_id": run.id}))
            self._job_report(f"Workflow run id is: {run.id}")

            stage = "poll"
            run = await self._job_poll_completion(owner_scope=request.owner_scope, run=run, cancel_event=cancel_event)
            state = OrchestratorState.POLLED
            timeline.append(
                domain_build_stage_event(
                    stage="poll",
                    status="completed",
                    details={"run_id": run.id, "conclusion": run.conclusion},
                )
            )

            if not run.run_succeeded():
                raise RunFailedError(
                    f"Workflow run {run.id} completed unsuccessfully with conclusion {run.conclusion}. "
                    f"For more information check {run.url}",
                    run_id=run.id,
                    conclusion=run.conclusion,
                    url=run.url,
                )

            self._job_report(f"Run {run.id} succeeded: {run.url}")
            return self._job_succeeded(timeline, waited=True, workflow_id=workflow_id, run=run)
        except (WorkflowDispatchError, GitHubAdapterError, TimeoutError, ConnectionError, ValueError, RuntimeError) as error:
            failed_stage = error.stage if isinstance(error, WorkflowDispatchError) else stage
            error_message = f"[{failed_stage}] {error}"
            logger.error(
                "workflow_dispatch_failed",
                stage=failed_stage,
                last_state=state.value,
                error_type=type(error).__name__,
                error_message=str(error),
            )
            timeline.append(
                domain_build_stage_event(
                    stage="run",
                    status="failed",
                    details={
                        "failed_stage": failed_stage,
                        "last_state": state.value,
                        "error_type": type(error).__name__,
                        "error_message": str(error),
                    },
                )
            )
            return DispatchExecutionResult(
                job_name=self._JOB_NAME,
                status="failed",
                state=OrchestratorState.FAILED,
                waited=inputs.wait,
                workflow_id=workflow_id,
                run_id=run.id if run is not None else None,
                run_url=(run.url or None) if run is not None else None,
                conclusion=run.conclusion if run is not None else None,
                error_code=self._job_error_code_for_exception(error),
                error_message=error_message,
                failed_stage=failed_stage,
                stage_timeline=timeline,
            )

    async def _job_poll_completion(
        self,
        owner_scope: str,
        run: RunInstance,
        cancel_event: asyncio.Event | None,
    ) -> RunInstance:
        """Poll the correlated run until it reaches a terminal status.

        Raises:
            PollExhaustedError: Raised when the run is still not terminal once the budget is spent.
            PollCancelledError: Raised when cancelled while waiting.
        """

        policy = self._config.completion_policy

        async def _fetch_run() -> RunInstance:
            return await self._api.adapter_get_run(owner_scope=owner_scope, run_id=run.id)

        polled_run = await self._polling_engine.job_poll(
            fetch=_fetch_run,
            is_acceptable=RunInstance.run_is_terminal,
            policy=policy,
            label=f"completion of workflow run {run.id}",
            describe=lambda snapshot: f"status={snapshot.status} url={snapshot.url}",
            cancel_event=cancel_event,
        )
        if not polled_run.run_is_terminal():
            raise PollExhaustedError(
                f"Workflow run {polled_run.id} still {polled_run.status} after {policy.max_attempts} attempts "
                f"at {policy.interval_seconds:g}s interval. For more information check {polled_run.url}",
                attempts=policy.max_attempts,
                max_attempts=policy.max_attempts,
                last_result=polled_run,
            )
        return polled_run

    def _job_succeeded(
        self,
        timeline: list[dict[str, object]],
        waited: bool,
        workflow_id: int | None,
        run: RunInstance | None,
    ) -> DispatchExecutionResult:
        timeline.append(domain_build_stage_event(stage="run", status="success"))
        return DispatchExecutionResult(
            job_name=self._JOB_NAME,
            status="success",
            state=OrchestratorState.SUCCEEDED,
            waited=waited,
            workflow_id=workflow_id,
            run_id=run.id if run is not None else None,
            run_url=run.url if run is not None else None,
            conclusion=run.conclusion if run is not None else None,
            stage_timeline=timeline,
        )

    def _job_report(self, message: str) -> None:
        if self._reporter is not None:
            self._reporter.reporter_info(message)

    def _job_error_code_for_exception(self, error: Exception) -> str:
        """Map exception type to a deterministic failure code.

        Args:
            error: Caught workflow exception.

        Returns:
            str: Deterministic error code.
        """

        if isinstance(error, WorkflowDispatchError):
            return error.error_code
        if isinstance(error, GitHubAdapterTimeoutError):
            return "DISPATCH_TIMEOUT_ERROR"
        if isinstance(error, GitHubAdapterConnectionError):
            return "DISPATCH_CONNECTION_ERROR"
        if isinstance(error, GitHubApiResponseError):
            return "DISPATCH_API_ERROR"
        if isinstance(error, TimeoutError):
            return "DISPATCH_TIMEOUT_ERROR"
        if isinstance(error, ConnectionError):
            return "DISPATCH_CONNECTION_ERROR"
        if isinstance(error, ValueError):
            return "DISPATCH_CONTRACT_ERROR"
        return "DISPATCH_UNEXPECTED_ERROR"
