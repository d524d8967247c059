"""Clock services package."""

from slacker.services.clock.interface import ClockSource, TickCallback, TickHandle
from slacker.services.clock.manual import ManualClock
from slacker.services.clock.system import SystemClock

__all__ = [
    "ClockSource",
    "ManualClock",
    "SystemClock",
    "TickCallback",
    "TickHandle",
]
