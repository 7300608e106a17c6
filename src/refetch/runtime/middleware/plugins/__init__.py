"""Built-in downloader middleware.

RetryMiddleware is the re-scheduling hook; LoggingMiddleware is a plain
pass-through observer that composes with it.
"""

from .logging import LoggingMiddleware
from .retry import RETRY_DROP_REASON, RetryMiddleware

__all__ = ["LoggingMiddleware", "RetryMiddleware", "RETRY_DROP_REASON"]
