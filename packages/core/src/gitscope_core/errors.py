"""Error taxonomy shared by the data client, the narration service and the HTTP app.

Every error carries the HTTP status it maps to, so the HTTP layer and the CLI
translate failures the same way without a lookup table of their own.
"""

from __future__ import annotations


class GitScopeError(Exception):
    """Base class for all gitscope failures."""

    status: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(GitScopeError):
    """A request body failed shape validation. No downstream call was made."""

    status = 400


class UpstreamError(GitScopeError):
    """GitHub or the LLM API answered with a non-success status."""

    def __init__(self, status: int, message: str, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(message)


class NotFoundError(UpstreamError):
    """The requested GitHub account does not exist."""

    def __init__(self, message: str, body: str = ""):
        super().__init__(404, message, body)


class RateLimitedError(UpstreamError):
    """The upstream API returned 429.

    ``retry_after`` is the number of seconds the caller should wait before
    trying again, when the upstream sent a hint.
    """

    def __init__(self, message: str, retry_after: int | None = None, body: str = ""):
        self.retry_after = retry_after
        super().__init__(429, message, body)


class NetworkError(GitScopeError):
    """The upstream could not be reached at all."""

    status = 500


class ConfigError(GitScopeError, ValueError):
    """The loaded configuration names something gitscope does not support."""

    status = 500
