"""Response value type describing the outcome of dispatching a Request."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from .request import Request

_NO_HEADERS: Mapping[str, str] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class Response:
    """Outcome of a single dispatch.

    A dropped response is terminal: the pipeline runs no further hook on it,
    but it keeps its data for observability.

    Attributes:
        request: Request that produced this response
        status: HTTP status code, or None when no HTTP response exists
        headers: Response headers
        body: Raw body bytes
        drop_reason: Set once a hook dropped the response
    """

    request: Request
    status: int | None = 200
    headers: Mapping[str, str] = field(default_factory=lambda: _NO_HEADERS, repr=False)
    body: bytes = field(default=b"", repr=False)
    drop_reason: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def uri(self) -> str:
        return self.request.uri

    @property
    def ok(self) -> bool:
        return self.status is not None and 200 <= self.status < 300

    def drop(self, reason: str) -> Response:
        """Return a copy marked as dropped with a human-readable reason."""
        return replace(self, drop_reason=reason)

    @property
    def was_dropped(self) -> bool:
        return self.drop_reason is not None
