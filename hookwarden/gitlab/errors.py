"""GitLab client errors."""

from __future__ import annotations

_HTTP_NOT_FOUND = 404


class GitLabError(RuntimeError):
    """Base class for failures talking to a GitLab instance."""


class GitLabAPIError(GitLabError):
    """Raised when GitLab answers with an error status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, method: str, path: str, status_code: int) -> GitLabAPIError:
        """Return the error matching a non-2xx response."""
        message = f"GitLab {method} {path} returned HTTP {status_code}"
        if status_code == _HTTP_NOT_FOUND:
            return GitLabNotFoundError(message, status_code=status_code)
        return cls(message, status_code=status_code)


class GitLabNotFoundError(GitLabAPIError):
    """Raised when the requested GitLab resource does not exist."""


class GitLabTransportError(GitLabError):
    """Raised when a request never produced an HTTP response."""

    @classmethod
    def wrap(cls, method: str, path: str, exc: BaseException) -> GitLabTransportError:
        """Return an error describing a network-level failure."""
        return cls(f"GitLab {method} {path} failed: {exc}")


class GitLabResponseShapeError(GitLabError):
    """Raised when a GitLab payload does not match the expected model."""

    @classmethod
    def undecodable(cls, path: str, exc: BaseException) -> GitLabResponseShapeError:
        """Return an error for a payload msgspec could not decode."""
        return cls(f"Unexpected GitLab response for {path}: {exc}")


class GitLabConfigError(GitLabError):
    """Raised when GitLab client configuration is invalid."""

    @classmethod
    def empty_token(cls) -> GitLabConfigError:
        """Return an error when the access token is blank."""
        return cls("GitLab access token must be non-empty")

    @classmethod
    def invalid_server_url(cls, server_url: str) -> GitLabConfigError:
        """Return an error for a server URL without an http(s) scheme."""
        return cls(f"GitLab server URL must be http(s): {server_url!r}")
