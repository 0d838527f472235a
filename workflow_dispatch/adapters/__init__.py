"""Adapter layer package for GitHub API and runner console boundaries."""

from .actions_console import ActionsConsoleReporter
from .github_errors import (
    GitHubAdapterConnectionError,
    GitHubAdapterError,
    GitHubAdapterTimeoutError,
    GitHubApiResponseError,
)
from .github_rest import GitHubActionsAdapter
from .interfaces import WorkflowApiPort

__all__ = [
    "ActionsConsoleReporter",
    "GitHubActionsAdapter",
    "GitHubAdapterConnectionError",
    "GitHubAdapterError",
    "GitHubAdapterTimeoutError",
    "GitHubApiResponseError",
    "WorkflowApiPort",
]
