"""Request and Response value types."""

from .request import META_RETRY_COUNT, OPTION_DELAY, Request
from .response import Response

__all__ = ["Request", "Response", "META_RETRY_COUNT", "OPTION_DELAY"]
