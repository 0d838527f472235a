"""Regression tests for entrypoint result reporting and exit codes."""

from __future__ import annotations

from pathlib import Path

import pytest

import workflow_dispatch.main as main_module
from workflow_dispatch.jobs import DispatchExecutionResult, OrchestratorState


def _set_runner_environment(monkeypatch: pytest.MonkeyPatch, output_path: Path) -> None:
    monkeypatch.chdir(output_path.parent)
    for name in ("INPUT_REF", "INPUT_REPO", "INPUT_INPUTS", "INPUT_WAIT", "REF", "REPO", "WAIT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("INPUT_TOKEN", "secret-token")
    monkeypatch.setenv("INPUT_WORKFLOW", "build")
    monkeypatch.setenv("GITHUB_REF", "refs/heads/main")
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/repo")
    monkeypatch.setenv("GITHUB_OUTPUT", str(output_path))
    monkeypatch.setattr(main_module, "setup_logging", lambda log_level, json_logs: None)


def test_main_failed_run_sets_error_and_outputs(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Exit 1, annotate the error and still publish known run outputs.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        tmp_path: Pytest temporary directory fixture.
        capsys: Pytest output capture fixture.

    Returns:
        None: Assertions validate failure reporting.

    Raises:
        AssertionError: Raised when failure is not surfaced.
    """

    output_path = tmp_path / "github_output"
    _set_runner_environment(monkeypatch, output_path)
    captured_wait: list[bool] = []

    async def _fake_run_dispatch(settings, reporter) -> DispatchExecutionResult:
        captured_wait.append(settings.wait)
        return DispatchExecutionResult(
            job_name="workflow_dispatch",
            status="failed",
            state=OrchestratorState.FAILED,
            waited=True,
            run_id=900,
            run_url="https://github.com/octo/repo/actions/runs/900",
            conclusion="failure",
            error_code="DISPATCH_RUN_FAILED",
            error_message="[poll] Workflow run 900 completed unsuccessfully with conclusion failure.",
            failed_stage="poll",
        )

    monkeypatch.setattr(main_module, "main_run_dispatch", _fake_run_dispatch)

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["--wait", "true"])

    assert exit_info.value.code == 1
    assert captured_wait == [True]
    assert "::error::[poll] Workflow run 900 completed unsuccessfully" in capsys.readouterr().out
    assert output_path.read_text(encoding="utf-8").splitlines() == [
        "run-id=900",
        "run-url=https://github.com/octo/repo/actions/runs/900",
        "run-conclusion=failure",
    ]


def test_main_successful_dispatch_returns_normally(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Return without exiting when dispatch succeeds in fire-and-forget mode.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate success path.

    Raises:
        AssertionError: Raised when success exits non-zero.
    """

    output_path = tmp_path / "github_output"
    _set_runner_environment(monkeypatch, output_path)

    async def _fake_run_dispatch(settings, reporter) -> DispatchExecutionResult:
        return DispatchExecutionResult(job_name="workflow_dispatch", status="success", state=OrchestratorState.SUCCEEDED)

    monkeypatch.setattr(main_module, "main_run_dispatch", _fake_run_dispatch)

    main_module.main([])

    assert not output_path.exists()


def test_main_invalid_configuration_exits_with_error(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Exit 1 with an error annotation when settings fail validation.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        tmp_path: Pytest temporary directory fixture.
        capsys: Pytest output capture fixture.

    Returns:
        None: Assertions validate configuration failure handling.

    Raises:
        AssertionError: Raised when invalid configuration runs the dispatch.
    """

    _set_runner_environment(monkeypatch, tmp_path / "github_output")
    monkeypatch.setenv("INPUT_WAIT", "yes")

    with pytest.raises(SystemExit) as exit_info:
        main_module.main([])

    assert exit_info.value.code == 1
    assert "::error::Startup configuration validation failed" in capsys.readouterr().out
