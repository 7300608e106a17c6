"""Foundation layer: errors and configuration shared by the runtime."""

from .config import RefetchSettings, RetrySettings, get_settings
from .errors import ConfigurationError, ErrorCode, RefetchError, TransportError, classify_exception

__all__ = [
    "ConfigurationError",
    "ErrorCode",
    "RefetchError",
    "TransportError",
    "classify_exception",
    "RefetchSettings",
    "RetrySettings",
    "get_settings",
]
