"""Observability for the crawl core: structured logging."""

from .logging import BoundLogger, StructuredLogger, configure_logging, get_logger, log_context

__all__ = ["BoundLogger", "StructuredLogger", "configure_logging", "get_logger", "log_context"]
