"""Retry policies for crawl requests.

Decides whether a completed attempt is retried and how long the re-submitted
request waits before it becomes eligible for dispatch.

Example:
    >>> from refetch.runtime.retry import HttpStatus, RetryOptions, RetryPolicy
    >>> policy = RetryPolicy(RetryOptions.from_mapping({"backoff": [1, 5, 10]}))
    >>> policy.evaluate(HttpStatus(503), retry_count=5)
    Retry(delay_ms=10000, next_retry_count=6)
"""

from .backoff import (
    BACKOFF_SHAPE_ERROR,
    Backoff,
    ConstantBackoff,
    ExponentialBackoff,
    SequenceBackoff,
    parse_backoff,
)
from .outcome import (
    NO_RETRY,
    ConnectionFailure,
    HttpStatus,
    NoRetry,
    Outcome,
    Retry,
    RetryDecision,
)
from .policy import DEFAULT_RETRY_STATUSES, RetryOptions, RetryPolicy

__all__ = [
    # Backoff strategies
    "Backoff",
    "ConstantBackoff",
    "SequenceBackoff",
    "ExponentialBackoff",
    "parse_backoff",
    "BACKOFF_SHAPE_ERROR",
    # Outcomes & decisions
    "Outcome",
    "HttpStatus",
    "ConnectionFailure",
    "RetryDecision",
    "Retry",
    "NoRetry",
    "NO_RETRY",
    # Policy
    "RetryOptions",
    "RetryPolicy",
    "DEFAULT_RETRY_STATUSES",
]
