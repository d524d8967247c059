"""
Deterministic ClockSource for tests and simulations.
"""

from datetime import datetime, timedelta
from typing import Optional

from slacker.services.clock.interface import ClockSource


class ManualClock(ClockSource):
    """
    Clock that only moves when told to.

    advance() walks time forward in steps and fires the ticks due
    after each step, so callbacks observe now() at their own instant.
    """

    def __init__(self, start: datetime, step_seconds: float = 1.0):
        super().__init__()
        if step_seconds <= 0:
            raise ValueError(f"Step must be positive, got {step_seconds}")
        self._start = start
        self._offset = 0.0
        self._step = float(step_seconds)

    def now(self) -> datetime:
        return self._start + timedelta(seconds=self._offset)

    def _position(self) -> float:
        return self._offset

    def advance(self, seconds: float, step: Optional[float] = None) -> int:
        """
        Move time forward by seconds.

        Returns:
            Number of tick callbacks fired
        """
        if seconds < 0:
            raise ValueError("Time cannot move backwards")

        step = self._step if step is None else float(step)
        if step <= 0:
            raise ValueError(f"Step must be positive, got {step}")

        fired = 0
        target = self._offset + seconds
        while self._offset + step <= target:
            self._offset += step
            fired += self.run_due()
        if self._offset < target:
            self._offset = target
            fired += self.run_due()
        return fired

    def set_time(self, instant: datetime) -> None:
        """Jump the wall-clock reading without firing ticks."""
        self._start = instant - timedelta(seconds=self._offset)
