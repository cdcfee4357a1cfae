"""Error taxonomy for the exporter.

Two disjoint families exist:

- ``RetryableFailure``: a single zone's pull failed during a collection cycle.
  It is counted and reported, and the next cycle is the only retry.
- ``ConfigurationFailure``: invalid setup detected before any cycle runs.
  It is always fatal.
"""

from enum import Enum


class FailureKind(str, Enum):
    """What went wrong while talking to the remote API."""

    # Network or protocol error while speaking HTTP
    TRANSPORT = "transport"
    # The API answered with a non-200 status
    UNEXPECTED_STATUS = "unexpected_status"
    # A line of the response body was not a valid log entry
    PARSE_ERROR = "parse_error"


class ExporterError(Exception):
    """Base class for all errors raised by logpull_exporter."""


class ConfigurationFailure(ExporterError):
    """Invalid configuration detected at construction or startup."""


class ZoneLookupError(ConfigurationFailure):
    """A configured zone name could not be resolved to a zone ID."""


class RetryableFailure(ExporterError):
    """A remote failure that aborted one zone's pull for the current cycle.

    Attributes:
        kind: Failure category.
        operation: Name of the operation that failed (e.g., "pull_log_entries").
        message: Human-readable description, including any response body.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        kind: FailureKind,
        operation: str,
        message: str,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(f"{operation}: {kind.value}: {message}")
        self.kind = kind
        self.operation = operation
        self.message = message
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"RetryableFailure(kind={self.kind.value!r}, "
            f"operation={self.operation!r}, message={self.message!r})"
        )
