"""
Clock and Tick Interface

DESIGN DECISION: The core never reads the wall clock or starts timers
on its own. Everything time-related goes through a ClockSource:
- now() stamps committed records
- schedule_periodic()/cancel() drive the accrual tick

Tests inject a ManualClock and advance time synchronously.
The UI uses a SystemClock and pumps it on every refresh.

There are no threads: due ticks are delivered from whoever calls
the clock's run method, one callback per elapsed interval, in order.
"""

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional


TickCallback = Callable[[], None]

_handle_ids = itertools.count(1)


@dataclass(eq=False)
class TickHandle:
    """Cancel handle for one periodic schedule."""

    interval: float
    callback: TickCallback
    next_due: float
    handle_id: int = field(default_factory=lambda: next(_handle_ids))
    active: bool = True


class ClockSource(ABC):
    """
    Supplies the current instant and cancelable periodic ticks.

    Subclasses provide the time base (_position) and the instant (now);
    the bookkeeping of schedules is shared.
    """

    def __init__(self) -> None:
        self._handles: dict[int, TickHandle] = {}

    @abstractmethod
    def now(self) -> datetime:
        """Current instant."""
        pass

    @abstractmethod
    def _position(self) -> float:
        """Monotonic seconds used to decide which ticks are due."""
        pass

    def schedule_periodic(
        self,
        interval_seconds: float,
        callback: TickCallback,
    ) -> TickHandle:
        """
        Call callback every interval_seconds until cancelled.

        The first call is due one interval from now.
        """
        if interval_seconds <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_seconds}")

        handle = TickHandle(
            interval=float(interval_seconds),
            callback=callback,
            next_due=self._position() + interval_seconds,
        )
        self._handles[handle.handle_id] = handle
        return handle

    def cancel(self, handle: Optional[TickHandle]) -> None:
        """Stop a schedule. Safe with None or an already cancelled handle."""
        if handle is None:
            return
        handle.active = False
        self._handles.pop(handle.handle_id, None)

    @property
    def active_schedules(self) -> int:
        return len(self._handles)

    def run_due(self) -> int:
        """
        Fire every tick that is due at the current position.

        Each elapsed interval is its own callback invocation, delivered
        in increasing time order. A callback may cancel its own handle.

        Returns:
            Number of callbacks fired
        """
        fired = 0
        position = self._position()
        for handle in sorted(self._handles.values(), key=lambda h: h.next_due):
            while handle.active and handle.next_due <= position:
                handle.next_due += handle.interval
                handle.callback()
                fired += 1
        return fired
