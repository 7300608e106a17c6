"""Attempt outcomes and retry decisions.

Both are small sum types so callers can pattern match on them:

    >>> match policy.evaluate(HttpStatus(503), retry_count=0):
    ...     case Retry(delay_ms=delay):
    ...         scheduler.schedule(request, delay)
    ...     case NoRetry():
    ...         pass
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class HttpStatus:
    """Attempt completed with an HTTP status code."""

    code: int


@dataclass(frozen=True, slots=True)
class ConnectionFailure:
    """Attempt failed at the connection level before any HTTP status existed."""


Outcome: TypeAlias = HttpStatus | ConnectionFailure


@dataclass(frozen=True, slots=True)
class NoRetry:
    """Leave the attempt as it is."""


@dataclass(frozen=True, slots=True)
class Retry:
    """Re-submit after ``delay_ms`` with the given retry count stamped."""

    delay_ms: int
    next_retry_count: int


RetryDecision: TypeAlias = NoRetry | Retry

# Singleton for the common case
NO_RETRY = NoRetry()
