"""Logging middleware for the download pipeline."""

from __future__ import annotations

from refetch.foundation.errors import classify_exception
from refetch.http import Request, Response
from refetch.runtime.observability.logging import StructuredLogger, get_logger


class LoggingMiddleware:
    """Log every request, response and transport exception.

    Logs at DEBUG for outgoing requests and successful responses, WARNING
    for error statuses and exceptions. Items pass through unchanged.

    Args:
        logger: Structured logger (default: ``get_logger("refetch.downloader")``)

    Example:
        >>> pipeline.use(LoggingMiddleware())
    """

    __slots__ = ("_log",)

    def __init__(self, logger: StructuredLogger | None = None) -> None:
        self._log = logger or get_logger("refetch.downloader")

    def handle_request(self, request: Request) -> Request:
        self._log.debug("Dispatching request", uri=request.uri, retry_count=request.retry_count)
        return request

    def handle_response(self, response: Response) -> Response:
        if response.ok:
            self._log.debug("Received response", uri=response.uri, status=response.status)
        else:
            self._log.warning("Received error response", uri=response.uri, status=response.status)
        return response

    def handle_exception(self, request: Request, error: BaseException) -> None:
        self._log.warning(
            "Transport failed",
            uri=request.uri,
            error_code=classify_exception(error).value,
            error=str(error),
        )
