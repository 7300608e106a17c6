"""Middleware pipeline for the download cycle.

Provides ordered request/response/exception hooks with explicit drop
semantics, plus the built-in retry and logging middleware.

Example:
    >>> from refetch.runtime.middleware import Pipeline, RetryMiddleware, LoggingMiddleware
    >>> from refetch.runtime.scheduling import RequestScheduler
    >>>
    >>> scheduler = RequestScheduler()
    >>> pipeline = Pipeline()
    >>> pipeline.use(LoggingMiddleware())
    >>> pipeline.use(RetryMiddleware(scheduler, options={"backoff": [1, 5, 10]}))
"""

from .middleware import (
    Continue,
    Dropped,
    DropListener,
    ExceptionMiddleware,
    Middleware,
    Pipeline,
    RequestMiddleware,
    RequestResult,
    ResponseMiddleware,
    ResponseResult,
)
from .plugins import RETRY_DROP_REASON, LoggingMiddleware, RetryMiddleware

__all__ = [
    # Core
    "Middleware",
    "RequestMiddleware",
    "ResponseMiddleware",
    "ExceptionMiddleware",
    "Pipeline",
    "Continue",
    "Dropped",
    "DropListener",
    "RequestResult",
    "ResponseResult",
    # Plugins
    "LoggingMiddleware",
    "RetryMiddleware",
    "RETRY_DROP_REASON",
]
