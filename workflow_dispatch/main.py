"""Main module entrypoint for one workflow dispatch invocation.

Inputs come from the runner environment (`INPUT_*`, `GITHUB_*`); command-line
flags override them for local runs.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import signal
from typing import Sequence

from workflow_dispatch.adapters import ActionsConsoleReporter
from workflow_dispatch.bootstrap import (
    bootstrap_create_adapter,
    bootstrap_create_dispatch_inputs,
    bootstrap_create_orchestrator,
    bootstrap_create_reporter,
)
from workflow_dispatch.config import AppSettings, SettingsLoadError, config_load_settings, setup_logging
from workflow_dispatch.config.logging_config import bind_context, get_logger
from workflow_dispatch.jobs import DispatchExecutionResult

logger = get_logger(__name__)


def main(argv: Sequence[str] | None = None) -> None:
    """Run one dispatch invocation and exit non-zero on failure.

    Args:
        argv: Optional argument list, defaults to `sys.argv[1:]`.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SystemExit: Raised with code 1 when configuration or the invocation fails.
    """

    argument_parser = argparse.ArgumentParser(description="Trigger a GitHub Actions workflow via workflow_dispatch")
    argument_parser.add_argument("--workflow", dest="workflow", type=str, help="Workflow name or numeric id")
    argument_parser.add_argument("--ref", dest="ref", type=str, help="Git ref to run the workflow on")
    argument_parser.add_argument("--repo", dest="repo", type=str, help="Repository in `owner/repo` form")
    argument_parser.add_argument("--inputs", dest="inputs", type=str, help="JSON object of workflow inputs")
    argument_parser.add_argument(
        "--wait",
        dest="wait",
        type=str,
        choices=("true", "false"),
        help="Wait for the workflow run to complete",
    )
    parsed_arguments = argument_parser.parse_args(argv)

    reporter = ActionsConsoleReporter()
    try:
        settings = config_load_settings(
            workflow=parsed_arguments.workflow,
            ref=parsed_arguments.ref,
            repo=parsed_arguments.repo,
            inputs=parsed_arguments.inputs,
            wait=parsed_arguments.wait,
        )
        setup_logging(log_level=settings.log_level, json_logs=settings.log_json)
        reporter = bootstrap_create_reporter(settings)
        execution_result = asyncio.run(main_run_dispatch(settings=settings, reporter=reporter))
    except SettingsLoadError as error:
        reporter.reporter_set_failed(str(error))
        raise SystemExit(1) from error

    main_report_result(execution_result=execution_result, reporter=reporter)
    if execution_result.status != "success":
        raise SystemExit(1)


async def main_run_dispatch(settings: AppSettings, reporter: ActionsConsoleReporter) -> DispatchExecutionResult:
    """Wire the adapter and orchestrator, then execute with signal-driven cancellation.

    Raises:
        SettingsLoadError: Raised when ref or repository cannot be resolved.
    """

    dispatch_inputs = bootstrap_create_dispatch_inputs(settings)
    bind_context(owner_scope=dispatch_inputs.owner_scope, definition_ref=dispatch_inputs.definition_ref)

    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signal_number in (signal.SIGINT, signal.SIGTERM):
        # add_signal_handler is unavailable on Windows event loops
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(signal_number, cancel_event.set)

    async with bootstrap_create_adapter(settings) as adapter:
        orchestrator = bootstrap_create_orchestrator(settings=settings, adapter=adapter, reporter=reporter)
        return await orchestrator.job_execute(dispatch_inputs, cancel_event=cancel_event)


def main_report_result(execution_result: DispatchExecutionResult, reporter: ActionsConsoleReporter) -> None:
    """Publish step outputs, the debug timeline and the failure annotation.

    Returns:
        None: Writes to the runner console and output file as side effect.
    """

    reporter.reporter_debug(json.dumps(execution_result.stage_timeline, indent=3, default=str))
    if execution_result.run_id is not None:
        reporter.reporter_set_output("run-id", str(execution_result.run_id))
    if execution_result.run_url:
        reporter.reporter_set_output("run-url", execution_result.run_url)
    if execution_result.conclusion:
        reporter.reporter_set_output("run-conclusion", execution_result.conclusion)

    if execution_result.status == "success":
        logger.info("workflow_dispatch_succeeded", state=execution_result.state.value, run_id=execution_result.run_id)
        return
    reporter.reporter_set_failed(execution_result.error_message or "Workflow dispatch failed")


if __name__ == "__main__":
    main()
