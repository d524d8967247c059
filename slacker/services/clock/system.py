"""
Wall-clock ClockSource.

now() is the local time as an aware datetime. Ticks are polled:
the owner calls pump() (the UI does so on every refresh) and every
interval that elapsed since the last pump fires once.
"""

import time
from datetime import datetime

from slacker.services.clock.interface import ClockSource


class SystemClock(ClockSource):
    """Production clock backed by time.monotonic() and the local time zone."""

    def now(self) -> datetime:
        return datetime.now().astimezone()

    def _position(self) -> float:
        return time.monotonic()

    def pump(self) -> int:
        """Deliver all due ticks. Returns how many fired."""
        return self.run_due()
