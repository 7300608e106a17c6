"""Unified error handling for refetch.

- ErrorCode: Standard error codes for crawl failures
- RefetchError and subclasses: configuration and transport exceptions
- classify_exception: map arbitrary transport exceptions to error codes
"""

from .errors import (
    CONNECTION_CODES,
    ConfigurationError,
    ConnectionFailedError,
    ErrorCode,
    RefetchError,
    RequestTimeoutError,
    TransportError,
    classify_exception,
    is_connection_failure,
)
from .types import JsonDict, JsonMapping, JsonValue

__all__ = [
    # Codes
    "ErrorCode", "CONNECTION_CODES", "classify_exception", "is_connection_failure",
    # Exceptions
    "RefetchError", "ConfigurationError", "TransportError", "ConnectionFailedError", "RequestTimeoutError",
    # JSON aliases
    "JsonDict", "JsonMapping", "JsonValue",
]
