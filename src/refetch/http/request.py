"""Crawl request value type.

Requests are immutable: every mutation helper returns a new Request and
leaves the original untouched. Meta and options are read-only mappings.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .response import Response

# Well-known keys
META_RETRY_COUNT = "retry_count"
OPTION_DELAY = "delay"

_EMPTY: Mapping[str, object] = MappingProxyType({})


def _empty() -> Mapping[str, object]:
    return _EMPTY


def _freeze(values: Mapping[str, object] | None) -> Mapping[str, object]:
    return MappingProxyType(dict(values)) if values else _EMPTY


@dataclass(frozen=True, slots=True)
class Request:
    """A request for a single URI.

    Attributes:
        uri: Target identifier
        meta: Free-form metadata bag (``retry_count`` lives here)
        options: Transport options bag (``delay`` in milliseconds lives here)
        response: Response this request was re-derived from, if any
        drop_reason: Set when a request hook dropped the request

    Example:
        >>> req = Request("https://example.com")
        >>> retry = req.with_meta("retry_count", 1).add_option("delay", 1000)
        >>> retry.retry_count, retry.delay, req.retry_count
        (1, 1000, 0)
    """

    uri: str
    meta: Mapping[str, object] = field(default_factory=_empty)
    options: Mapping[str, object] = field(default_factory=_empty)
    response: Response | None = field(default=None, repr=False, compare=False)
    drop_reason: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.meta, MappingProxyType):
            object.__setattr__(self, "meta", _freeze(self.meta))
        if not isinstance(self.options, MappingProxyType):
            object.__setattr__(self, "options", _freeze(self.options))

    def get_meta(self, key: str, default: object = None) -> object:
        return self.meta.get(key, default)

    def with_meta(self, key: str, value: object) -> Request:
        """Return a copy with ``meta[key]`` set to value."""
        return replace(self, meta=MappingProxyType({**self.meta, key: value}))

    def add_option(self, key: str, value: object) -> Request:
        """Return a copy with ``options[key]`` set to value."""
        return replace(self, options=MappingProxyType({**self.options, key: value}))

    def with_response(self, response: Response) -> Request:
        """Return a copy pointing back at the response it was derived from."""
        return replace(self, response=response)

    @property
    def retry_count(self) -> int:
        """Re-submissions already attempted for this lineage (0 when unset)."""
        value = self.meta.get(META_RETRY_COUNT, 0)
        return value if isinstance(value, int) else 0

    @property
    def delay(self) -> int | None:
        """Delay in milliseconds stamped by the retry hook, if any."""
        value = self.options.get(OPTION_DELAY)
        return value if isinstance(value, int) else None

    # ─── Dropping ──────────────────────────────────────────────────────

    def drop(self, reason: str) -> Request:
        """Return a copy marked as dropped."""
        return replace(self, drop_reason=reason)

    @property
    def was_dropped(self) -> bool:
        return self.drop_reason is not None
