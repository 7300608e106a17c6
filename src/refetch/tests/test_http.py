"""Tests for Request/Response value semantics."""

from __future__ import annotations

import dataclasses

import pytest

from refetch.http import META_RETRY_COUNT, OPTION_DELAY, Request, Response


def test_retry_count_defaults_to_zero() -> None:
    assert Request("https://example.com").retry_count == 0
    assert Request("https://example.com").delay is None


def test_with_meta_returns_new_request() -> None:
    """Mutation helpers never touch the original."""
    original = Request("https://example.com")
    derived = original.with_meta(META_RETRY_COUNT, 2).add_option(OPTION_DELAY, 4000)

    assert derived is not original
    assert derived.retry_count == 2
    assert derived.delay == 4000
    assert derived.uri == original.uri
    assert original.retry_count == 0
    assert OPTION_DELAY not in original.options


def test_meta_is_read_only() -> None:
    source = {"depth": 1}
    request = Request("https://example.com", meta=source)
    source["depth"] = 99

    assert request.get_meta("depth") == 1
    with pytest.raises(TypeError):
        request.meta["depth"] = 2  # type: ignore[index]


def test_request_is_frozen() -> None:
    request = Request("https://example.com")
    with pytest.raises(dataclasses.FrozenInstanceError):
        request.uri = "https://other.example"  # type: ignore[misc]


def test_with_meta_preserves_unrelated_keys() -> None:
    request = Request("https://example.com", meta={"depth": 3}).with_meta(META_RETRY_COUNT, 1)
    assert request.get_meta("depth") == 3
    assert request.get_meta("missing", "fallback") == "fallback"


def test_response_drop_keeps_data() -> None:
    request = Request("https://example.com")
    response = Response(request=request, status=503, body=b"busy")
    dropped = response.drop("Request being retried")

    assert not response.was_dropped
    assert dropped.was_dropped
    assert dropped.drop_reason == "Request being retried"
    assert dropped.status == 503
    assert dropped.body == b"busy"
    assert dropped.request is request


def test_response_ok() -> None:
    request = Request("https://example.com")
    assert Response(request, 204).ok
    assert not Response(request, 500).ok
    assert not Response(request, None).ok


def test_request_drop() -> None:
    request = Request("https://example.com").drop("disallowed")
    assert request.was_dropped
    assert request.drop_reason == "disallowed"
