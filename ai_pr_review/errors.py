"""
Error types for AI PR Review.

Every error carries an ErrorKind so callers can tell startup problems from
run failures and per-item failures without inspecting messages.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """How far an error reaches."""

    FATAL_STARTUP = "fatal_startup"
    FATAL_RUN = "fatal_run"
    RECOVERABLE_ITEM = "recoverable_item"


class ReviewError(Exception):
    """Base class for all errors raised by the review pipeline."""

    kind: ErrorKind = ErrorKind.FATAL_RUN

    def __init__(self, message: str, kind: Optional[ErrorKind] = None) -> None:
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class ConfigurationError(ReviewError):
    """A required credential or setting is missing or invalid."""

    kind = ErrorKind.FATAL_STARTUP


class InvalidRepositoryError(ReviewError):
    """Repository identifier is not in owner/repo form."""

    kind = ErrorKind.FATAL_STARTUP


class UnsupportedOutputError(ReviewError):
    """Requested output mode is not one of the supported renderers."""

    kind = ErrorKind.FATAL_STARTUP


class HostingAPIError(ReviewError):
    """
    A GitHub API request failed.

    Fatal by default. Inline comment posts raise it as RECOVERABLE_ITEM so
    the dispatcher can tally the failure and move on.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        kind: Optional[ErrorKind] = None,
    ) -> None:
        super().__init__(message, kind)
        self.status_code = status_code

    @property
    def is_retryable(self) -> bool:
        """Transport errors and server-side failures may succeed on retry."""
        return self.status_code is None or self.status_code >= 500


class CompletionAPIError(ReviewError):
    """The completion API call failed or returned no text."""
