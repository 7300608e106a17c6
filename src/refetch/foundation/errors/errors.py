"""Error codes and exception hierarchy for the re-scheduling core.

Transport failures are classified into error codes so retry decisions can
distinguish connection-level failures from everything else.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache


class ErrorCode(StrEnum):
    """Standard error codes for crawl failures.

    Used for programmatic error handling and retry decisions.
    """
    INVALID_CONFIG = "INVALID_CONFIG"
    CONNECTION_FAILED = "CONNECTION_FAILED"
    TIMEOUT = "TIMEOUT"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    UNKNOWN = "UNKNOWN"


# Codes treated as a connection-level transport failure
CONNECTION_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.CONNECTION_FAILED,
    ErrorCode.TIMEOUT,
})

# Flattened pattern -> code mapping, checked in insertion order
_PATTERN_CODES: dict[str, ErrorCode] = {
    "timeout": ErrorCode.TIMEOUT,
    "timedout": ErrorCode.TIMEOUT,
    "connection": ErrorCode.CONNECTION_FAILED,
    "connect": ErrorCode.CONNECTION_FAILED,
    "refused": ErrorCode.CONNECTION_FAILED,
    "reset": ErrorCode.CONNECTION_FAILED,
    "dns": ErrorCode.CONNECTION_FAILED,
    "unreachable": ErrorCode.CONNECTION_FAILED,
}
_PATTERN_KEYS = tuple(_PATTERN_CODES.keys())


@lru_cache(maxsize=256)
def _classify_cached(exc_key: str) -> ErrorCode:
    """Cached classification by exception signature."""
    haystack = exc_key.lower()
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_CODES[pattern]
    return ErrorCode.TRANSPORT_ERROR


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map exception to error code.

    RefetchError subclasses carry their own code. Anything else is matched
    by pattern on its type name and message.
    """
    if isinstance(exc, RefetchError):
        return exc.code
    return _classify_cached(f"{type(exc).__name__} {exc}")


def is_connection_failure(exc: BaseException) -> bool:
    """Whether the exception is a connection-level transport failure."""
    return classify_exception(exc) in CONNECTION_CODES


class RefetchError(Exception):
    """Base exception for the package. Carries a machine-readable code."""

    code: ErrorCode = ErrorCode.UNKNOWN


class ConfigurationError(RefetchError, ValueError):
    """Raised when an option value has an invalid shape or type.

    Attributes:
        value_type: Type name of the offending value, if known
    """

    code = ErrorCode.INVALID_CONFIG

    def __init__(self, message: str, *, value_type: str | None = None) -> None:
        self.value_type = value_type
        super().__init__(f"{message} (got {value_type})" if value_type else message)


class TransportError(RefetchError):
    """Generic failure raised by a transport while dispatching a request."""

    code = ErrorCode.TRANSPORT_ERROR


class ConnectionFailedError(TransportError):
    """The transport could not establish or keep a connection."""

    code = ErrorCode.CONNECTION_FAILED


class RequestTimeoutError(TransportError):
    code = ErrorCode.TIMEOUT
