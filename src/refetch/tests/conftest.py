"""Shared fixtures for refetch tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from refetch.foundation.config import clear_settings_cache
from refetch.foundation.testing import FakeClock, FakeLogger
from refetch.runtime.middleware import RetryMiddleware
from refetch.runtime.scheduling import RequestScheduler


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1_000_000)


@pytest.fixture
def scheduler(clock: FakeClock) -> RequestScheduler:
    return RequestScheduler(clock)


@pytest.fixture
def fake_logger() -> FakeLogger:
    return FakeLogger()


@pytest.fixture
def retry(scheduler: RequestScheduler, fake_logger: FakeLogger) -> RetryMiddleware:
    """Retry middleware with default options."""
    return RetryMiddleware(scheduler, fake_logger)


@pytest.fixture
def clean_settings() -> Iterator[None]:
    """Reset cached settings around a test that touches the environment."""
    clear_settings_cache()
    yield
    clear_settings_cache()
