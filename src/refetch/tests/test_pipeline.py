"""Tests for the middleware pipeline runner and drop semantics."""

from __future__ import annotations

import pytest

from refetch.foundation.testing import FakeLogger, make_request, make_response
from refetch.http import Request, Response
from refetch.runtime.middleware import (
    RETRY_DROP_REASON,
    Continue,
    Dropped,
    LoggingMiddleware,
    Pipeline,
    RetryMiddleware,
)
from refetch.runtime.scheduling import RequestScheduler


# ─────────────────────────────────────────────────────────────────────────────
# Test Fixtures: Middleware
# ─────────────────────────────────────────────────────────────────────────────


class Recorder:
    """Records every hook invocation under a label."""

    def __init__(self, label: str, calls: list[str]) -> None:
        self.label, self.calls = label, calls

    def handle_request(self, request: Request) -> Request:
        self.calls.append(f"{self.label}:request")
        return request

    def handle_response(self, response: Response) -> Response:
        self.calls.append(f"{self.label}:response")
        return response

    def handle_exception(self, request: Request, error: BaseException) -> None:
        self.calls.append(f"{self.label}:exception")


class DropNotFound:
    def handle_response(self, response: Response) -> Response:
        return response.drop("not found") if response.status == 404 else response


class BlockHost:
    def __init__(self, host: str) -> None:
        self.host = host

    def handle_request(self, request: Request) -> Request:
        return request.drop("blocked host") if self.host in request.uri else request


class TagRequest:
    def handle_request(self, request: Request) -> Request:
        return request.with_meta("tagged", True)


# ─────────────────────────────────────────────────────────────────────────────
# Stage behaviour
# ─────────────────────────────────────────────────────────────────────────────


def test_hooks_run_in_order() -> None:
    calls: list[str] = []
    pipeline = Pipeline([Recorder("a", calls), Recorder("b", calls)])

    pipeline.process_request(make_request())
    pipeline.process_response(make_response())
    pipeline.process_exception(make_request(), OSError())

    assert calls == [
        "a:request", "b:request",
        "a:response", "b:response",
        "a:exception", "b:exception",
    ]


def test_continue_carries_modified_item() -> None:
    result = Pipeline([TagRequest()]).process_request(make_request())

    assert isinstance(result, Continue)
    assert result.item.get_meta("tagged") is True


def test_dropped_response_short_circuits() -> None:
    """No hook after the dropping one sees the item."""
    calls: list[str] = []
    pipeline = Pipeline([DropNotFound(), Recorder("after", calls)])

    result = pipeline.process_response(make_response(status=404))

    assert isinstance(result, Dropped)
    assert result.reason == "not found"
    assert result.item.status == 404
    assert calls == []


def test_dropped_request_short_circuits() -> None:
    calls: list[str] = []
    pipeline = Pipeline([BlockHost("blocked.example"), Recorder("after", calls)])

    match pipeline.process_request(make_request("https://blocked.example/page")):
        case Dropped(reason=reason):
            assert reason == "blocked host"
        case other:
            pytest.fail(f"expected Dropped, got {other!r}")
    assert calls == []

    assert isinstance(pipeline.process_request(make_request("https://ok.example")), Continue)
    assert calls == ["after:request"]


def test_already_dropped_response_is_inert() -> None:
    calls: list[str] = []
    pipeline = Pipeline([Recorder("a", calls)])

    result = pipeline.process_response(make_response().drop("earlier"))

    assert isinstance(result, Dropped)
    assert calls == []


def test_middleware_joins_only_implemented_stages() -> None:
    calls: list[str] = []
    pipeline = Pipeline([DropNotFound(), Recorder("r", calls)])

    pipeline.process_request(make_request())

    assert calls == ["r:request"]
    assert len(pipeline) == 2


def test_use_rejects_object_without_hooks() -> None:
    with pytest.raises(TypeError):
        Pipeline().use(object())  # type: ignore[arg-type]


def test_drop_listeners_receive_drops() -> None:
    seen: list[Dropped] = []
    pipeline = Pipeline([DropNotFound()])
    pipeline.on_drop(seen.append)

    pipeline.process_response(make_response(status=404))
    pipeline.process_response(make_response(status=200))

    assert [d.reason for d in seen] == ["not found"]


# ─────────────────────────────────────────────────────────────────────────────
# Retry hook composed with others
# ─────────────────────────────────────────────────────────────────────────────


def test_retry_drop_hides_response_from_later_hooks(scheduler: RequestScheduler) -> None:
    calls: list[str] = []
    logger = FakeLogger()
    pipeline = Pipeline([
        LoggingMiddleware(logger),
        RetryMiddleware(scheduler, logger, options={"retry_on_status": [503], "backoff": [1]}),
        Recorder("extract", calls),
    ])

    result = pipeline.process_response(make_response(status=503))

    assert isinstance(result, Dropped)
    assert result.reason == RETRY_DROP_REASON
    assert calls == []
    assert len(scheduler) == 1
    assert logger.events() == ["Received error response", "Retrying request"]


def test_non_retryable_response_reaches_later_hooks(scheduler: RequestScheduler) -> None:
    calls: list[str] = []
    pipeline = Pipeline([RetryMiddleware(scheduler, FakeLogger()), Recorder("extract", calls)])

    result = pipeline.process_response(make_response(status=200))

    assert isinstance(result, Continue)
    assert calls == ["extract:response"]
    assert scheduler.is_empty()


def test_logging_middleware_levels() -> None:
    logger = FakeLogger()
    mw = LoggingMiddleware(logger)

    mw.handle_request(make_request())
    mw.handle_response(make_response(status=200))
    mw.handle_response(make_response(status=500))
    mw.handle_exception(make_request(), ConnectionResetError("connection reset by peer"))

    assert [(r.level, r.event) for r in logger.records] == [
        ("debug", "Dispatching request"),
        ("debug", "Received response"),
        ("warning", "Received error response"),
        ("warning", "Transport failed"),
    ]
    assert logger.records[-1].fields["error_code"] == "CONNECTION_FAILED"
