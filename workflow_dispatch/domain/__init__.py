"""Domain models used across application layer boundaries."""

from .models import (
    RUN_CONCLUSION_SUCCESS,
    RUN_STATUS_COMPLETED,
    RUN_STATUS_QUEUED,
    DefinitionPage,
    DispatchInputs,
    DispatchReceipt,
    DispatchRequest,
    ExhaustionMode,
    JobDefinition,
    PollPolicy,
    RunInstance,
)
from .timeline import domain_build_stage_event

__all__ = [
    "RUN_CONCLUSION_SUCCESS",
    "RUN_STATUS_COMPLETED",
    "RUN_STATUS_QUEUED",
    "DefinitionPage",
    "DispatchInputs",
    "DispatchReceipt",
    "DispatchRequest",
    "ExhaustionMode",
    "JobDefinition",
    "PollPolicy",
    "RunInstance",
    "domain_build_stage_event",
]
