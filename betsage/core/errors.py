"""
Exception hierarchy for the prediction pipeline.

Every error carries the HTTP status the API layer renders it with, so a
single exception handler can turn any of them into an ``{"error": ...}`` body.
"""

from typing import Optional


class BetSageError(Exception):
    """Base class for all pipeline errors."""
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(BetSageError):
    """The caller asked for something we do not support (e.g. unknown sport)."""
    status_code = 400


class ConfigurationError(BetSageError):
    """A required setting (API key, database) is missing."""
    status_code = 500


class PersistenceNotConfiguredError(ConfigurationError):
    """An endpoint needs the database but DATABASE_URL is not set."""
    status_code = 503


class UpstreamError(BetSageError):
    """The odds provider or the LLM failed or returned a non-success status."""
    status_code = 502

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class ParseError(BetSageError):
    """The model response holds no recoverable JSON payload."""
    status_code = 500


class SchemaValidationError(BetSageError):
    """The model response parsed as JSON but does not match the prediction schema."""
    status_code = 500


class RateLimitExceededError(BetSageError):
    """The client has used up its request quota for the current window."""
    status_code = 429

    def __init__(self, max_requests: int, retry_after_minutes: int, window_seconds: int = 3600):
        super().__init__(
            f"Rate limit exceeded. You can make {max_requests} requests {describe_window(window_seconds)}. "
            f"Try again in {retry_after_minutes} minutes."
        )
        self.max_requests = max_requests
        self.retry_after_minutes = retry_after_minutes
        self.window_seconds = window_seconds


def describe_window(seconds: int) -> str:
    """Human wording for a limiter window, e.g. "per hour" or "every 2 hours"."""
    for unit, length in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds == length:
            return f"per {unit}"
        if seconds % length == 0:
            return f"every {seconds // length} {unit}s"
    return f"every {seconds} seconds"
