"""Regression tests for structlog configuration."""

from __future__ import annotations

import logging

import pytest
import structlog

from workflow_dispatch.config.logging_config import add_app_context, setup_logging


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
    logging.getLogger("httpx").setLevel(logging.NOTSET)
    logging.getLogger("httpcore").setLevel(logging.NOTSET)


def test_config_logging_add_app_context_tags_entries() -> None:
    """Tag every event dictionary with the application name.

    Returns:
        None: Assertions validate the app context processor.
    """

    event_dict = add_app_context(logging.getLogger("test"), "info", {"event": "started"})

    assert event_dict == {"event": "started", "app": "workflow_dispatch"}


@pytest.mark.parametrize(
    ("json_logs", "renderer_type"),
    [(True, structlog.processors.JSONRenderer), (False, structlog.dev.ConsoleRenderer)],
)
def test_config_logging_selects_renderer_and_silences_http_clients(json_logs: bool, renderer_type: type) -> None:
    """Finish the processor chain with the requested renderer and quiet httpx.

    Args:
        json_logs: Whether JSON rendering is requested.
        renderer_type: Expected final processor type.

    Returns:
        None: Assertions validate structlog wiring.

    Raises:
        AssertionError: Raised when the renderer or library levels are wrong.
    """

    setup_logging(log_level="debug", json_logs=json_logs)

    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], renderer_type)
    assert add_app_context in processors
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
