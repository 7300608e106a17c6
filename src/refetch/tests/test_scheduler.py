"""Tests for the time-gated request scheduler."""

from __future__ import annotations

import threading

from refetch.foundation.testing import FakeClock
from refetch.http import Request
from refetch.runtime.scheduling import RequestScheduler, SystemClock


def _uris(requests: list[Request]) -> list[str]:
    return [r.uri for r in requests]


# ═════════════════════════════════════════════════════════════════════════════
# Readiness
# ═════════════════════════════════════════════════════════════════════════════


def test_zero_delay_is_immediately_ready(scheduler: RequestScheduler) -> None:
    scheduler.schedule(Request("https://example.com/a"))
    assert _uris(scheduler.next_requests(10)) == ["https://example.com/a"]


def test_delayed_request_not_released_early(scheduler: RequestScheduler, clock: FakeClock) -> None:
    """A request is held until now + delay, then released exactly once."""
    scheduler.schedule(Request("https://example.com/a"), delay_ms=1000)

    assert scheduler.next_requests(10) == []
    clock.advance(999)
    assert scheduler.next_requests(10) == []
    clock.advance(1)
    assert _uris(scheduler.next_requests(10)) == ["https://example.com/a"]
    clock.advance(10_000)
    assert scheduler.next_requests(10) == []


def test_drain_is_consumption(scheduler: RequestScheduler) -> None:
    """Second call with nothing new ready returns empty."""
    scheduler.schedule(Request("https://example.com/a"))
    scheduler.schedule(Request("https://example.com/b"))

    assert len(scheduler.next_requests(10)) == 2
    assert scheduler.next_requests(10) == []
    assert scheduler.is_empty()


def test_not_ready_entries_stay_untouched(scheduler: RequestScheduler, clock: FakeClock) -> None:
    scheduler.schedule(Request("https://example.com/later"), delay_ms=500)
    scheduler.schedule(Request("https://example.com/now"))

    assert _uris(scheduler.next_requests(10)) == ["https://example.com/now"]
    assert len(scheduler) == 1
    clock.advance(500)
    assert _uris(scheduler.next_requests(10)) == ["https://example.com/later"]


def test_negative_delay_is_clamped(scheduler: RequestScheduler, clock: FakeClock) -> None:
    """Negative delays behave like zero: no past-dated entries jump the queue."""
    scheduler.schedule(Request("https://example.com/first"))
    scheduler.schedule(Request("https://example.com/second"), delay_ms=-5000)

    assert _uris(scheduler.next_requests(10)) == ["https://example.com/first", "https://example.com/second"]


# ═════════════════════════════════════════════════════════════════════════════
# Ordering & Limits
# ═════════════════════════════════════════════════════════════════════════════


def test_insertion_order_among_ready(scheduler: RequestScheduler, clock: FakeClock) -> None:
    scheduler.schedule(Request("https://example.com/1"), delay_ms=300)
    scheduler.schedule(Request("https://example.com/2"), delay_ms=100)
    scheduler.schedule(Request("https://example.com/3"), delay_ms=200)
    clock.advance(300)

    assert _uris(scheduler.next_requests(10)) == [
        "https://example.com/1",
        "https://example.com/2",
        "https://example.com/3",
    ]


def test_limit_is_respected(scheduler: RequestScheduler) -> None:
    for i in range(5):
        scheduler.schedule(Request(f"https://example.com/{i}"))

    assert _uris(scheduler.next_requests(2)) == ["https://example.com/0", "https://example.com/1"]
    assert _uris(scheduler.next_requests(2)) == ["https://example.com/2", "https://example.com/3"]
    assert _uris(scheduler.next_requests(2)) == ["https://example.com/4"]


def test_non_positive_limit_returns_empty(scheduler: RequestScheduler) -> None:
    scheduler.schedule(Request("https://example.com"))
    assert scheduler.next_requests(0) == []
    assert scheduler.next_requests(-1) == []
    assert len(scheduler) == 1


def test_force_next_requests_ignores_time(scheduler: RequestScheduler) -> None:
    scheduler.schedule(Request("https://example.com/a"), delay_ms=60_000)
    scheduler.schedule(Request("https://example.com/b"), delay_ms=1)

    assert _uris(scheduler.force_next_requests(10)) == ["https://example.com/a", "https://example.com/b"]
    assert scheduler.is_empty()


def test_time_until_next(scheduler: RequestScheduler, clock: FakeClock) -> None:
    assert scheduler.time_until_next() is None
    scheduler.schedule(Request("https://example.com/a"), delay_ms=800)
    scheduler.schedule(Request("https://example.com/b"), delay_ms=300)

    assert scheduler.time_until_next() == 300
    clock.advance(500)
    assert scheduler.time_until_next() == 0


# ═════════════════════════════════════════════════════════════════════════════
# Concurrency
# ═════════════════════════════════════════════════════════════════════════════


def test_concurrent_schedule_and_drain_loses_nothing(clock: FakeClock) -> None:
    """Racing producers and a draining consumer see every request exactly once."""
    scheduler = RequestScheduler(clock)
    per_thread, producers = 200, 4
    drained: list[Request] = []
    done = threading.Event()

    def produce(n: int) -> None:
        for i in range(per_thread):
            scheduler.schedule(Request(f"https://example.com/{n}/{i}"))

    def consume() -> None:
        while not done.is_set() or not scheduler.is_empty():
            drained.extend(scheduler.next_requests(7))

    consumer = threading.Thread(target=consume)
    consumer.start()
    threads = [threading.Thread(target=produce, args=(n,)) for n in range(producers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    done.set()
    consumer.join()

    uris = _uris(drained)
    assert len(uris) == per_thread * producers
    assert len(set(uris)) == len(uris)
    # FIFO per producer survives interleaving
    for n in range(producers):
        own = [u for u in uris if u.startswith(f"https://example.com/{n}/")]
        assert own == [f"https://example.com/{n}/{i}" for i in range(per_thread)]


def test_system_clock_is_monotonic() -> None:
    clock = SystemClock()
    first = clock.now()
    assert clock.now() >= first
