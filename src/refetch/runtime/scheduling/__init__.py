"""Time-gated scheduling of pending requests."""

from .clock import Clock, SystemClock
from .scheduler import RequestScheduler, ScheduledEntry

__all__ = ["Clock", "SystemClock", "RequestScheduler", "ScheduledEntry"]
