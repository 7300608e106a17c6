"""Driver step tying scheduler, middleware pipeline and transport together.

The crawl loop owns the cadence; each call to `Downloader.run_once` drains
the requests that are ready, pushes them through the request stage, hands
survivors to the transport, and routes each outcome through the response or
exception stage. Retries re-enter the scheduler through RetryMiddleware and
come back out on a later step once their delay has elapsed.

Example:
    >>> downloader = Downloader(scheduler, pipeline, transport)
    >>> downloader.enqueue(Request("https://example.com"))
    >>> while not scheduler.is_empty():
    ...     for response in await downloader.run_once():
    ...         parse(response)
    ...     await downloader.idle()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, runtime_checkable

from refetch.http import Request, Response

from .middleware import Continue, Pipeline
from .scheduling import RequestScheduler

logger = logging.getLogger("refetch.downloader")

DEFAULT_BATCH_SIZE = 16


@runtime_checkable
class Transport(Protocol):
    """Opaque fetch operation. Raises on transport-level failure."""

    async def dispatch(self, request: Request) -> Response:
        ...


class Downloader:
    """Run one poll-dispatch-handle cycle at a time.

    Args:
        scheduler: Source of ready requests and sink for retries
        pipeline: Middleware applied around each dispatch
        transport: Performs the actual fetch
        batch_size: Max requests drained per step
    """

    __slots__ = ("_scheduler", "_pipeline", "_transport", "_batch_size")

    def __init__(
        self,
        scheduler: RequestScheduler,
        pipeline: Pipeline,
        transport: Transport,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        self._scheduler = scheduler
        self._pipeline = pipeline
        self._transport = transport
        self._batch_size = batch_size

    @property
    def scheduler(self) -> RequestScheduler:
        return self._scheduler

    def enqueue(self, request: Request) -> None:
        """Schedule a fresh request for immediate dispatch."""
        self._scheduler.schedule(request)

    async def run_once(self, limit: int | None = None) -> list[Response]:
        """Dispatch every ready request and return the responses that survived the pipeline."""
        ready = self._scheduler.next_requests(self._batch_size if limit is None else limit)
        if not ready:
            return []
        results = await asyncio.gather(*(self._download(r) for r in ready))
        return [r for r in results if r is not None]

    async def idle(self, max_wait_ms: int = 1000) -> None:
        """Sleep until the next entry is due, capped at max_wait_ms."""
        wait = self._scheduler.time_until_next()
        if wait is None or wait <= 0:
            await asyncio.sleep(0)
            return
        await asyncio.sleep(min(wait, max_wait_ms) / 1000)

    async def _download(self, request: Request) -> Response | None:
        match self._pipeline.process_request(request):
            case Continue(item=outgoing):
                pass
            case _:
                return None

        try:
            response = await self._transport.dispatch(outgoing)
        except Exception as e:
            logger.debug("dispatch of %s raised %s", outgoing.uri, type(e).__name__)
            self._pipeline.process_exception(outgoing, e)
            return None

        match self._pipeline.process_response(response):
            case Continue(item=handled):
                return handled
            case _:
                return None
