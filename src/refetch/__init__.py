"""refetch - request re-scheduling core for web crawlers.

Decides whether a failed fetch is retried, computes its backoff, and holds
the re-submitted request in a time-gated scheduler until it is due.

Quick Start:
    >>> from refetch import Downloader, Pipeline, Request, RequestScheduler, RetryMiddleware
    >>>
    >>> scheduler = RequestScheduler()
    >>> pipeline = Pipeline([RetryMiddleware(scheduler, options={"backoff": [1, 5, 10]})])
    >>> downloader = Downloader(scheduler, pipeline, transport)
    >>> downloader.enqueue(Request("https://example.com"))
    >>> responses = await downloader.run_once()
"""

from .foundation.config import RefetchSettings, get_settings
from .foundation.errors import (
    ConfigurationError,
    ConnectionFailedError,
    ErrorCode,
    RefetchError,
    RequestTimeoutError,
    TransportError,
    classify_exception,
)
from .http import Request, Response
from .runtime.downloader import Downloader, Transport
from .runtime.middleware import (
    Continue,
    Dropped,
    LoggingMiddleware,
    Pipeline,
    RetryMiddleware,
)
from .runtime.observability.logging import configure_logging, get_logger
from .runtime.retry import (
    ConnectionFailure,
    HttpStatus,
    NO_RETRY,
    Retry,
    RetryOptions,
    RetryPolicy,
    parse_backoff,
)
from .runtime.scheduling import Clock, RequestScheduler, SystemClock

__version__ = "0.1.0"

__all__ = [
    # Values
    "Request",
    "Response",
    # Scheduling
    "Clock",
    "SystemClock",
    "RequestScheduler",
    # Retry
    "RetryOptions",
    "RetryPolicy",
    "HttpStatus",
    "ConnectionFailure",
    "Retry",
    "NO_RETRY",
    "parse_backoff",
    # Pipeline
    "Pipeline",
    "Continue",
    "Dropped",
    "RetryMiddleware",
    "LoggingMiddleware",
    "Downloader",
    "Transport",
    # Errors
    "ErrorCode",
    "RefetchError",
    "ConfigurationError",
    "TransportError",
    "ConnectionFailedError",
    "RequestTimeoutError",
    "classify_exception",
    # Config & logging
    "RefetchSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
]
