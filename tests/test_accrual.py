"""
Tests for the accrual engine.

The engine runs on a ManualClock, so every tick is delivered
synchronously by clock.advance().
"""

import pytest
from datetime import timedelta
from decimal import Decimal

from slacker.models import SessionPhase
from slacker.tracking import AccrualEngine, InvalidInputError, parse_monthly_salary


SALARY = 40000
RATE = Decimal(SALARY) / 30 / 8 / 60 / 60

# Tick-by-tick sums round at the 28th digit
TOLERANCE = Decimal("1e-20")


@pytest.fixture
def engine(clock):
    return AccrualEngine(clock)


class TestSalaryParsing:
    """Tests for monthly salary validation."""

    def test_accepts_numbers_and_numeric_strings(self):
        """Test accepted salary inputs."""
        assert parse_monthly_salary(40000) == Decimal("40000")
        assert parse_monthly_salary("40000") == Decimal("40000")
        assert parse_monthly_salary(1234.5) == Decimal("1234.5")

    @pytest.mark.parametrize("value", [0, -5, "", "abc", None, True, float("nan"), float("inf")])
    def test_rejects_invalid_salary(self, value):
        """Test that zero, negatives and non-numbers are rejected."""
        with pytest.raises(InvalidInputError) as exc_info:
            parse_monthly_salary(value)
        assert exc_info.value.field == "monthly_salary"


class TestStart:
    """Tests for starting a session."""

    def test_rate_formula(self, engine):
        """Test the per-second rate is salary / 30 / 8 / 60 / 60."""
        assert engine.start(SALARY) is True
        assert engine.rate == RATE
        assert engine.phase == SessionPhase.RUNNING

    def test_custom_calendar(self, clock):
        """Test rate with a different working calendar."""
        engine = AccrualEngine(clock, days_per_month=20, hours_per_day=10)
        engine.start(720000)
        assert engine.rate == Decimal(1)

    @pytest.mark.parametrize("value", [0, -1, "abc", None, float("nan")])
    def test_invalid_salary_leaves_engine_idle(self, engine, clock, value):
        """Test that a rejected start changes nothing."""
        with pytest.raises(InvalidInputError):
            engine.start(value)
        assert engine.phase == SessionPhase.IDLE
        assert engine.session_id is None
        assert clock.active_schedules == 0

    def test_start_twice_keeps_one_schedule(self, engine, clock):
        """Test that a second start is a no-op."""
        engine.start(SALARY)
        session_id = engine.session_id

        assert engine.start(SALARY * 2) is False
        assert clock.active_schedules == 1
        assert engine.session_id == session_id
        assert engine.rate == RATE

        clock.advance(5)
        assert engine.elapsed_seconds == 5

    def test_invalid_salary_while_running_raises(self, engine):
        """Test that validation happens before the running check."""
        engine.start(SALARY)
        with pytest.raises(InvalidInputError):
            engine.start(-1)
        assert engine.is_running


class TestTicks:
    """Tests for accrual while running."""

    def test_n_ticks(self, engine, clock):
        """Test elapsed and earned after n ticks."""
        engine.start(SALARY)
        fired = clock.advance(10)

        assert fired == 10
        assert engine.elapsed_seconds == 10
        assert abs(engine.earned_amount - RATE * 10) < TOLERANCE

    def test_no_tick_before_first_interval(self, engine, clock):
        """Test that the first tick is one interval after start."""
        engine.start(SALARY)
        clock.advance(0.5, step=0.5)
        assert engine.elapsed_seconds == 0

    def test_tick_while_idle_is_ignored(self, engine):
        """Test that stray ticks do not accrue."""
        engine.tick()
        assert engine.elapsed_seconds == 0
        assert engine.earned_amount == Decimal(0)

    def test_on_tick_callback(self, engine, clock):
        """Test the tick callback receives snapshots."""
        snapshots = []
        engine.set_on_tick(snapshots.append)
        engine.start(SALARY)
        clock.advance(3)

        assert [s.elapsed_seconds for s in snapshots] == [1, 2, 3]
        assert all(s.is_running for s in snapshots)

    def test_on_state_change_callback(self, engine, clock):
        """Test the state callback fires on start and stop."""
        phases = []
        engine.set_on_state_change(lambda s: phases.append(s.phase))
        engine.start(SALARY)
        clock.advance(1)
        engine.stop()

        assert phases == [SessionPhase.RUNNING, SessionPhase.IDLE]


class TestStop:
    """Tests for stopping a session."""

    def test_stop_after_zero_ticks(self, engine, clock):
        """Test that an instant stop commits nothing."""
        engine.start(SALARY)
        assert engine.stop() is None
        assert engine.phase == SessionPhase.IDLE
        assert clock.active_schedules == 0

    def test_stop_after_n_ticks(self, engine, clock):
        """Test the committed record."""
        engine.start(SALARY)
        clock.advance(3600)
        record = engine.stop()

        assert record is not None
        assert record.elapsed_seconds == 3600
        assert record.earned_amount == Decimal("166.67")
        assert record.timestamp == clock.now()
        assert engine.phase == SessionPhase.IDLE
        assert clock.active_schedules == 0

    def test_no_accrual_after_stop(self, engine, clock):
        """Test that time passing while idle accrues nothing."""
        engine.start(SALARY)
        clock.advance(5)
        engine.stop()
        clock.advance(100)

        assert engine.elapsed_seconds == 5
        assert abs(engine.earned_amount - RATE * 5) < TOLERANCE

    def test_stop_while_idle(self, engine):
        """Test that stopping an idle engine is a no-op."""
        assert engine.stop() is None
        assert engine.phase == SessionPhase.IDLE

    def test_restart_starts_fresh_counters(self, engine, clock):
        """Test that each session's record holds only its own ticks."""
        engine.start(SALARY)
        clock.advance(10)
        first = engine.stop()

        # Stopped counters stay visible until the next start
        assert engine.elapsed_seconds == 10

        engine.start(SALARY * 2)
        assert engine.elapsed_seconds == 0
        assert engine.earned_amount == Decimal(0)
        clock.advance(3)

        assert engine.elapsed_seconds == 3
        assert abs(engine.earned_amount - RATE * 2 * 3) < TOLERANCE

        second = engine.stop()
        assert first.elapsed_seconds == 10
        assert first.earned_amount == Decimal("0.46")
        assert second.elapsed_seconds == 3
        assert second.earned_amount == Decimal("0.28")

    def test_record_timestamp_is_commit_time(self, engine, clock):
        """Test records are stamped when the session stops."""
        engine.start(SALARY)
        before = clock.now()
        clock.advance(90)
        record = engine.stop()
        assert record.timestamp - before == timedelta(seconds=90)


class TestReset:
    """Tests for resetting the counters."""

    def test_reset_while_running(self, engine, clock):
        """Test reset commits and zeroes."""
        engine.start(SALARY)
        clock.advance(7)
        record = engine.reset()

        assert record.elapsed_seconds == 7
        assert engine.phase == SessionPhase.IDLE
        assert engine.elapsed_seconds == 0
        assert engine.earned_amount == Decimal(0)
        assert engine.session_id is None
        assert clock.active_schedules == 0

    def test_reset_while_idle(self, engine, clock):
        """Test reset after stop zeroes the kept counters."""
        engine.start(SALARY)
        clock.advance(7)
        engine.stop()

        assert engine.reset() is None
        assert engine.elapsed_seconds == 0
        assert engine.earned_amount == Decimal(0)

    def test_snapshot_after_reset(self, engine):
        """Test the snapshot of a fresh engine."""
        engine.reset()
        snapshot = engine.snapshot()
        assert snapshot.is_running is False
        assert snapshot.elapsed_seconds == 0
        assert snapshot.display_amount == Decimal("0.00")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
