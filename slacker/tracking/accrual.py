"""
Accrual Engine

Pure session state machine (no UI, no storage):

    idle --start()--> running --stop()/reset()--> idle

While running, the clock delivers one tick per interval and every
tick adds one second and one second's worth of salary. Stopping
cancels the tick and hands back a SessionRecord for the caller to
persist; the engine itself never touches storage.

DESIGN DECISION: Amounts are Decimals accumulated tick by tick.
Rounding to cents only happens when a record is committed.
"""

from decimal import Decimal
from typing import Any, Callable, Optional
from uuid import UUID, uuid4

from slacker.models.session import (
    SessionPhase,
    SessionRecord,
    SessionSnapshot,
    round_amount,
    to_decimal,
)
from slacker.services.clock import ClockSource, TickHandle


SECONDS_PER_HOUR = 60 * 60


class InvalidInputError(ValueError):
    """Input from the boundary was not a usable number."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


def parse_monthly_salary(value: Any) -> Decimal:
    """
    Validate a monthly salary from the input boundary.

    Raises:
        InvalidInputError: Unless value is a finite number greater than zero
    """
    try:
        salary = to_decimal(value)
    except ValueError as e:
        raise InvalidInputError("monthly_salary", value, str(e)) from None

    if salary <= 0:
        raise InvalidInputError("monthly_salary", value, "must be greater than zero")
    return salary


class AccrualEngine:
    """
    Running-session state machine.

    The clock triggers tick() once per interval while running.
    Exactly one tick schedule exists at a time.
    """

    def __init__(
        self,
        clock: ClockSource,
        days_per_month: int = 30,
        hours_per_day: int = 8,
        tick_interval_seconds: float = 1.0,
    ):
        self._clock = clock
        self.days_per_month = int(days_per_month)
        self.hours_per_day = int(hours_per_day)
        self.tick_interval_seconds = float(tick_interval_seconds)

        self._phase = SessionPhase.IDLE
        self._rate = Decimal(0)
        self._elapsed_seconds = 0
        self._earned = Decimal(0)
        self._tick_handle: Optional[TickHandle] = None
        self._session_id: Optional[UUID] = None

        self._on_tick: Optional[Callable[[SessionSnapshot], None]] = None
        self._on_state_change: Optional[Callable[[SessionSnapshot], None]] = None

    # ----- Callbacks -----
    def set_on_tick(self, fn: Optional[Callable[[SessionSnapshot], None]]) -> None:
        self._on_tick = fn

    def set_on_state_change(self, fn: Optional[Callable[[SessionSnapshot], None]]) -> None:
        self._on_state_change = fn

    def _emit_tick(self) -> None:
        if self._on_tick:
            self._on_tick(self.snapshot())

    def _emit_state_change(self) -> None:
        if self._on_state_change:
            self._on_state_change(self.snapshot())

    # ----- State -----
    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def is_running(self) -> bool:
        return self._phase == SessionPhase.RUNNING

    @property
    def rate(self) -> Decimal:
        return self._rate

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed_seconds

    @property
    def earned_amount(self) -> Decimal:
        return self._earned

    @property
    def session_id(self) -> Optional[UUID]:
        return self._session_id

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            phase=self._phase,
            rate=self._rate,
            elapsed_seconds=self._elapsed_seconds,
            earned_amount=self._earned,
        )

    def rate_for(self, monthly_salary: Decimal) -> Decimal:
        """Per-second rate: salary / days / hours / 60 / 60."""
        return monthly_salary / self.days_per_month / self.hours_per_day / 60 / 60

    # ----- Transitions -----
    def start(self, monthly_salary: Any) -> bool:
        """
        Start accruing.

        Returns:
            True if a session started, False if one was already running

        Raises:
            InvalidInputError: If the salary is not a finite positive number
        """
        salary = parse_monthly_salary(monthly_salary)

        if self.is_running:
            return False

        # Counters of a stopped session stay visible until the next start
        self._elapsed_seconds = 0
        self._earned = Decimal(0)
        self._rate = self.rate_for(salary)
        self._session_id = uuid4()
        self._phase = SessionPhase.RUNNING
        self._tick_handle = self._clock.schedule_periodic(
            self.tick_interval_seconds,
            self.tick,
        )
        self._emit_state_change()
        return True

    def tick(self) -> None:
        """One elapsed interval. Ignored unless running."""
        if not self.is_running:
            return

        self._elapsed_seconds += 1
        self._earned += self._rate
        self._emit_tick()

    def stop(self) -> Optional[SessionRecord]:
        """
        Stop accruing.

        Returns:
            The committed record, or None if nothing ran or nothing accrued
        """
        if not self.is_running:
            return None

        self._clock.cancel(self._tick_handle)
        self._tick_handle = None
        self._phase = SessionPhase.IDLE

        record = None
        if self._elapsed_seconds > 0:
            record = SessionRecord(
                timestamp=self._clock.now(),
                earned_amount=round_amount(self._earned),
                elapsed_seconds=self._elapsed_seconds,
            )

        self._emit_state_change()
        return record

    def reset(self) -> Optional[SessionRecord]:
        """Stop (committing if applicable), then zero the counters."""
        record = self.stop()

        self._elapsed_seconds = 0
        self._earned = Decimal(0)
        self._session_id = None
        self._emit_state_change()
        return record
