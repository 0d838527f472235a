"""Job layer package for dispatch, correlation and polling orchestration."""

from .correlator import RunCorrelator, job_select_most_recent_run
from .dispatch_orchestrator import DispatchOrchestratorConfig, WorkflowDispatchOrchestrator
from .dispatcher import WorkflowDispatcher
from .errors import (
	CorrelationFailedError,
	DispatchRejectedError,
	InputDecodeError,
	NotFoundError,
	PollCancelledError,
	PollExhaustedError,
	RunFailedError,
	WorkflowDispatchError,
)
from .inputs import job_build_dispatch_request, job_decode_parameters
from .interfaces import DispatchExecutionResult, OrchestratorState, StatusReporterPort
from .locator import WorkflowLocator
from .polling import PollDecision, PollingEngine, job_poll_decide

__all__ = [
	"CorrelationFailedError",
	"DispatchExecutionResult",
	"DispatchOrchestratorConfig",
	"DispatchRejectedError",
	"InputDecodeError",
	"NotFoundError",
	"OrchestratorState",
	"PollCancelledError",
	"PollDecision",
	"PollExhaustedError",
	"PollingEngine",
	"RunCorrelator",
	"RunFailedError",
	"StatusReporterPort",
	"WorkflowDispatchError",
	"WorkflowDispatchOrchestrator",
	"WorkflowDispatcher",
	"WorkflowLocator",
	"job_build_dispatch_request",
	"job_decode_parameters",
	"job_poll_decide",
	"job_select_most_recent_run",
]
