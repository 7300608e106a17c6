"""Testing utilities: fake clock, logger and transport plus value factories."""

from .fakes import FakeClock, FakeLogger, FakeTransport, LogRecord, make_request, make_response

__all__ = ["FakeClock", "FakeLogger", "FakeTransport", "LogRecord", "make_request", "make_response"]
