"""Project-native typed exceptions for GitHub REST adapter failures."""

from __future__ import annotations


class GitHubAdapterError(Exception):
    """Base exception for adapter-level GitHub API failures.

    Attributes:
        status_code: Optional HTTP status returned upstream.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubAdapterConnectionError(GitHubAdapterError, ConnectionError):
    """Transport-level connectivity failure during GitHub API communication."""


class GitHubAdapterTimeoutError(GitHubAdapterError, TimeoutError):
    """Transport timeout while waiting for a GitHub API response."""


class GitHubApiResponseError(GitHubAdapterError, RuntimeError):
    """GitHub API answered with an error status or an unexpected payload."""
