"""Core middleware types and pipeline composition.

A downloader middleware implements any subset of three hooks:

- ``handle_request(request) -> Request``: before transport
- ``handle_response(response) -> Response``: after a response arrived
- ``handle_exception(request, error) -> None``: after the transport raised

Hooks run in registration order. A hook ends processing of an item by
returning it dropped (``item.drop(reason)``). The pipeline turns every stage
into an explicit ``Continue | Dropped`` result, and no hook after the
dropping one ever sees the item.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, Protocol, TypeAlias, TypeVar, runtime_checkable

from refetch.http import Request, Response

logger = logging.getLogger("refetch.middleware")

T = TypeVar("T", Request, Response)


# ─────────────────────────────────────────────────────────────────────────────
# Stage Results
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Continue(Generic[T]):
    """Item survived the stage and may be processed further."""

    item: T


@dataclass(frozen=True, slots=True)
class Dropped(Generic[T]):
    """Item was dropped by a hook and is inert from here on.

    The item still carries its data for observability.
    """

    item: T
    reason: str


RequestResult: TypeAlias = "Continue[Request] | Dropped[Request]"
ResponseResult: TypeAlias = "Continue[Response] | Dropped[Response]"

DropListener = Callable[[Dropped[Request] | Dropped[Response]], None]


# ─────────────────────────────────────────────────────────────────────────────
# Hook Protocols
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class RequestMiddleware(Protocol):
    """Intercepts outgoing requests before transport."""

    def handle_request(self, request: Request) -> Request:
        """Return the request (possibly modified or dropped)."""
        ...


@runtime_checkable
class ResponseMiddleware(Protocol):
    """Intercepts responses after transport.

    Example:
        >>> class StatusFilter:
        ...     def handle_response(self, response):
        ...         return response.drop("not found") if response.status == 404 else response
    """

    def handle_response(self, response: Response) -> Response:
        """Return the response (possibly modified or dropped)."""
        ...


@runtime_checkable
class ExceptionMiddleware(Protocol):
    """Reacts to transport exceptions. Has no item to return."""

    def handle_exception(self, request: Request, error: BaseException) -> None:
        ...


Middleware: TypeAlias = RequestMiddleware | ResponseMiddleware | ExceptionMiddleware


# ─────────────────────────────────────────────────────────────────────────────
# Pipeline Runner
# ─────────────────────────────────────────────────────────────────────────────


class Pipeline:
    """Ordered chain of downloader middleware.

    Each middleware is registered once and participates in whichever stages
    it implements.

    Args:
        middleware: Initial middleware, first = runs first

    Example:
        >>> pipeline = Pipeline([LoggingMiddleware(), RetryMiddleware(scheduler)])
        >>> match pipeline.process_response(response):
        ...     case Continue(item=resp): parse(resp)
        ...     case Dropped(reason=why): log.debug("dropped", reason=why)
    """

    __slots__ = ("_request_hooks", "_response_hooks", "_exception_hooks", "_drop_listeners")

    def __init__(self, middleware: Iterable[Middleware] = ()) -> None:
        self._request_hooks: list[RequestMiddleware] = []
        self._response_hooks: list[ResponseMiddleware] = []
        self._exception_hooks: list[ExceptionMiddleware] = []
        self._drop_listeners: list[DropListener] = []
        for mw in middleware:
            self.use(mw)

    def use(self, mw: Middleware) -> Pipeline:
        """Append middleware to every stage it implements. Returns self for chaining."""
        matched = False
        if isinstance(mw, RequestMiddleware):
            self._request_hooks.append(mw)
            matched = True
        if isinstance(mw, ResponseMiddleware):
            self._response_hooks.append(mw)
            matched = True
        if isinstance(mw, ExceptionMiddleware):
            self._exception_hooks.append(mw)
            matched = True
        if not matched:
            raise TypeError(f"{type(mw).__name__} implements no middleware hook")
        return self

    def on_drop(self, listener: DropListener) -> None:
        """Register a callback receiving every Dropped result."""
        self._drop_listeners.append(listener)

    def process_request(self, request: Request) -> RequestResult:
        """Run request hooks in order, stopping at the first drop."""
        for hook in self._request_hooks:
            request = hook.handle_request(request)
            if request.was_dropped:
                return self._dropped(Dropped(request, request.drop_reason or ""))
        return Continue(request)

    def process_response(self, response: Response) -> ResponseResult:
        """Run response hooks in order, stopping at the first drop."""
        if response.was_dropped:
            return self._dropped(Dropped(response, response.drop_reason or ""))
        for hook in self._response_hooks:
            response = hook.handle_response(response)
            if response.was_dropped:
                return self._dropped(Dropped(response, response.drop_reason or ""))
        return Continue(response)

    def process_exception(self, request: Request, error: BaseException) -> None:
        """Give every exception hook a chance to react to a transport failure."""
        for hook in self._exception_hooks:
            hook.handle_exception(request, error)

    def _dropped(self, result: Dropped[T]) -> Dropped[T]:
        logger.debug("%s dropped: %s", type(result.item).__name__, result.reason)
        for listener in self._drop_listeners:
            listener(result)
        return result

    def __len__(self) -> int:
        return len({id(h) for h in (*self._request_hooks, *self._response_hooks, *self._exception_hooks)})
