"""Time-gated in-memory request scheduler.

Stores pending requests tagged with an earliest-dispatch instant and releases
only those whose instant has passed. Release order is insertion order, which
also holds among entries with equal dispatch time.

Thread-safety: every operation on the store takes the same lock, so a retry
scheduled from one worker never races with a drain from the driver loop.

Example:
    >>> from refetch.foundation.testing import FakeClock
    >>> clock = FakeClock()
    >>> scheduler = RequestScheduler(clock)
    >>> scheduler.schedule(Request("https://example.com"), delay_ms=500)
    >>> scheduler.next_requests(10)
    []
    >>> clock.advance(500)
    >>> [r.uri for r in scheduler.next_requests(10)]
    ['https://example.com']
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field

from refetch.http import Request

from .clock import Clock, SystemClock


@dataclass(frozen=True, slots=True, order=True)
class ScheduledEntry:
    """A request paired with the earliest instant it may be dispatched.

    Ordered by (dispatch_at, sequence) so ties fall back to insertion order.
    """

    dispatch_at: int
    sequence: int
    request: Request = field(compare=False)

    def is_ready(self, now: int) -> bool:
        return self.dispatch_at <= now


class RequestScheduler:
    """Unbounded store of scheduled entries.

    Negative delays are clamped to zero, so an entry is never dated before
    the moment it was scheduled.

    Args:
        clock: Time source (default: SystemClock)
    """

    __slots__ = ("_clock", "_entries", "_lock", "_counter")

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or SystemClock()
        self._entries: list[ScheduledEntry] = []
        self._lock = threading.Lock()
        self._counter = itertools.count()

    @property
    def clock(self) -> Clock:
        return self._clock

    def schedule(self, request: Request, delay_ms: int = 0) -> None:
        """Store request so it becomes ready after ``delay_ms`` milliseconds."""
        with self._lock:
            entry = ScheduledEntry(
                dispatch_at=self._clock.now() + max(delay_ms, 0),
                sequence=next(self._counter),
                request=request,
            )
            self._entries.append(entry)

    def next_requests(self, limit: int) -> list[Request]:
        """Remove and return up to ``limit`` ready requests in insertion order."""
        if limit <= 0:
            return []
        with self._lock:
            now = self._clock.now()
            ready: list[Request] = []
            pending: list[ScheduledEntry] = []
            for entry in self._entries:
                if len(ready) < limit and entry.is_ready(now):
                    ready.append(entry.request)
                else:
                    pending.append(entry)
            if ready:
                self._entries = pending
            return ready

    def force_next_requests(self, limit: int) -> list[Request]:
        """Remove and return up to ``limit`` requests whether ready or not."""
        if limit <= 0:
            return []
        with self._lock:
            taken, self._entries = self._entries[:limit], self._entries[limit:]
            return [e.request for e in taken]

    def time_until_next(self) -> int | None:
        """Milliseconds until the earliest entry is ready (None when empty)."""
        with self._lock:
            if not self._entries:
                return None
            earliest = min(e.dispatch_at for e in self._entries)
            return max(earliest - self._clock.now(), 0)

    def is_empty(self) -> bool:
        return len(self) == 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f"RequestScheduler(pending={len(self)})"
