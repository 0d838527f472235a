"""Application bootstrap wiring for startup validation and dependency assembly."""

from __future__ import annotations

from workflow_dispatch.adapters import ActionsConsoleReporter, GitHubActionsAdapter
from workflow_dispatch.config import AppSettings
from workflow_dispatch.domain import DispatchInputs, PollPolicy
from workflow_dispatch.jobs import DispatchOrchestratorConfig, PollingEngine, WorkflowDispatchOrchestrator


def bootstrap_create_adapter(settings: AppSettings) -> GitHubActionsAdapter:
    """Build the GitHub REST adapter from validated settings.

    Raises:
        ValueError: Raised when adapter config values are invalid.
    """

    return GitHubActionsAdapter(
        token=settings.token,
        base_url=settings.github_api_url,
        request_timeout_seconds=settings.github_request_timeout_seconds,
    )


def bootstrap_create_reporter(settings: AppSettings) -> ActionsConsoleReporter:
    """Build the runner console reporter writing step outputs to `$GITHUB_OUTPUT`."""

    return ActionsConsoleReporter(output_path=settings.github_output or None)


def bootstrap_create_orchestrator_config(settings: AppSettings) -> DispatchOrchestratorConfig:
    """Build both polling policies from settings; they share one exhaustion mode."""

    return DispatchOrchestratorConfig(
        correlation_policy=PollPolicy(
            interval_seconds=settings.dispatch_correlation_interval_seconds,
            max_attempts=settings.dispatch_correlation_max_attempts,
            exhaustion_mode=settings.dispatch_exhaustion_mode,
        ),
        completion_policy=PollPolicy(
            interval_seconds=settings.dispatch_completion_interval_seconds,
            max_attempts=settings.dispatch_completion_max_attempts,
            exhaustion_mode=settings.dispatch_exhaustion_mode,
        ),
        clock_skew_seconds=settings.dispatch_clock_skew_seconds,
    )


def bootstrap_create_orchestrator(
    settings: AppSettings,
    adapter: GitHubActionsAdapter,
    reporter: ActionsConsoleReporter | None = None,
) -> WorkflowDispatchOrchestrator:
    """Build the dispatch orchestrator around an open adapter."""

    return WorkflowDispatchOrchestrator(
        api=adapter,
        config=bootstrap_create_orchestrator_config(settings),
        polling_engine=PollingEngine(),
        reporter=reporter,
    )


def bootstrap_create_dispatch_inputs(settings: AppSettings) -> DispatchInputs:
    """Build raw invocation inputs, applying invoking-context defaults.

    Raises:
        SettingsLoadError: Raised when ref or repository cannot be resolved.
    """

    return DispatchInputs(
        owner_scope=settings.settings_resolve_owner_scope(),
        definition_ref=settings.workflow,
        revision=settings.settings_resolve_revision(),
        parameters_json=settings.inputs,
        wait=settings.wait,
    )
