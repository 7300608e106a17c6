"""Retry middleware for crawl requests.

Reacts to completed attempts: when the retry policy says so, a new request is
derived from the failed one, pushed into the scheduler with its backoff delay,
and the current response is dropped so nothing downstream processes it.

The decision itself is delegated to RetryPolicy. This hook only performs the
side effects (log + schedule) once a Retry decision exists.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from refetch.foundation.errors import is_connection_failure
from refetch.http import META_RETRY_COUNT, OPTION_DELAY, Request, Response
from refetch.runtime.observability.logging import StructuredLogger, get_logger
from refetch.runtime.retry import ConnectionFailure, HttpStatus, Outcome, Retry, RetryOptions, RetryPolicy

if TYPE_CHECKING:
    from refetch.runtime.scheduling import RequestScheduler

RETRY_DROP_REASON = "Request being retried"

_fallback = logging.getLogger("refetch.retry")


class RetryMiddleware:
    """Re-schedule requests whose response or failure is retryable.

    Options are merged over the defaults and validated when the middleware is
    built or reconfigured, so a malformed backoff fails before any request is
    scheduled.

    Args:
        scheduler: Store receiving re-derived requests
        logger: Structured logger (default: ``get_logger("refetch.retry")``)
        options: Raw option mapping or prebuilt RetryOptions

    Example:
        >>> retry = RetryMiddleware(scheduler, options={"retry_on_status": [503], "backoff": [1, 2, 3]})
        >>> result = retry.handle_response(response_503)
        >>> result.was_dropped, result.drop_reason
        (True, 'Request being retried')
    """

    __slots__ = ("_scheduler", "_log", "_policy")

    def __init__(
        self,
        scheduler: RequestScheduler,
        logger: StructuredLogger | None = None,
        options: Mapping[str, object] | RetryOptions | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._log = logger or get_logger("refetch.retry")
        self._policy = RetryPolicy()
        self.configure(options)

    def configure(self, options: Mapping[str, object] | RetryOptions | None = None) -> None:
        """Replace the retry rule. Raises ConfigurationError on invalid options."""
        opts = options if isinstance(options, RetryOptions) else RetryOptions.from_mapping(options)
        self._policy = RetryPolicy(opts)

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def handle_request(self, request: Request) -> Request:
        return request

    def handle_response(self, response: Response) -> Response:
        request = response.request
        outcome: Outcome = ConnectionFailure() if response.status is None else HttpStatus(response.status)
        decision = self._policy.evaluate(outcome, request.retry_count)
        if not isinstance(decision, Retry):
            return response

        self._reschedule(request, decision, response=response, status=response.status)
        return response.drop(RETRY_DROP_REASON)

    def handle_exception(self, request: Request, error: BaseException) -> None:
        if not is_connection_failure(error):
            return
        decision = self._policy.evaluate(ConnectionFailure(), request.retry_count)
        if isinstance(decision, Retry):
            self._reschedule(request, decision, status=None, error=f"{type(error).__name__}: {error}")

    def _reschedule(
        self,
        request: Request,
        decision: Retry,
        *,
        status: int | None,
        response: Response | None = None,
        error: str | None = None,
    ) -> None:
        retry_request = (
            request
            .with_meta(META_RETRY_COUNT, decision.next_retry_count)
            .add_option(OPTION_DELAY, decision.delay_ms)
        )
        if response is not None:
            retry_request = retry_request.with_response(response)
        self._scheduler.schedule(retry_request, decision.delay_ms)

        fields: dict[str, object] = {
            "uri": request.uri,
            "status": status,
            "retry_count": decision.next_retry_count,
            "delay_ms": decision.delay_ms,
        }
        if error is not None:
            fields["error"] = error
        # Injected loggers may raise; the retry is already scheduled
        try:
            self._log.info("Retrying request", **fields)
        except Exception:
            _fallback.warning("retry logger failed for %s", request.uri, exc_info=True)

    def __repr__(self) -> str:
        return f"RetryMiddleware({self._policy.options!r})"
