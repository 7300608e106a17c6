"""Clock abstraction for deterministic scheduling.

Instants are integer milliseconds on a monotonic timeline. Only differences
between instants are meaningful.
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Protocol for time sources used by the scheduler."""

    def now(self) -> int:
        """Current instant in milliseconds."""
        ...


class SystemClock:
    """Monotonic wall-independent clock backed by ``time.monotonic``."""

    __slots__ = ()

    def now(self) -> int:
        return int(time.monotonic() * 1000)
