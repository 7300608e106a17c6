"""Runtime components: scheduling, retry policy, middleware pipeline, downloader."""

from .scheduling import Clock, RequestScheduler, ScheduledEntry, SystemClock
from .retry import RetryOptions, RetryPolicy
from .middleware import Continue, Dropped, LoggingMiddleware, Pipeline, RetryMiddleware
from .downloader import Downloader, Transport

__all__ = [
    "Clock",
    "SystemClock",
    "RequestScheduler",
    "ScheduledEntry",
    "RetryOptions",
    "RetryPolicy",
    "Pipeline",
    "Continue",
    "Dropped",
    "LoggingMiddleware",
    "RetryMiddleware",
    "Downloader",
    "Transport",
]
