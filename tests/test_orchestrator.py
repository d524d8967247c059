"""
Integration tests for TrackerService.

The service is wired by create_app_components with a ManualClock and
an in-memory key-value store (see conftest.py).
"""

import json

import pytest
from datetime import timedelta
from decimal import Decimal

from slacker.config import Settings
from slacker.history import HistoryIndexError
from slacker.models import TrackerEventType
from slacker.orchestrator import create_app_components, create_key_value_store
from slacker.services.storage import (
    DEFAULT_HISTORY_KEY,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    StorageWriteError,
)
from slacker.tracking import DivisionUndefinedError, InvalidInputError


class BrokenStore(InMemoryKeyValueStore):
    """Key-value store whose writes always fail."""

    def set(self, key, value):
        raise StorageWriteError("quota exceeded")


class FlakyStore(InMemoryKeyValueStore):
    """Key-value store whose writes fail while failing is True."""

    failing = False

    def set(self, key, value):
        if self.failing:
            raise StorageWriteError("quota exceeded")
        super().set(key, value)


def event_types(service):
    return [event.event_type for event in service.recent_activity(limit=50)]


class TestEndToEnd:
    """A full day of slacking through the service."""

    def test_one_hour_at_40000(self, service, clock, store):
        """Test 40000/month for 3600 ticks earns 166.67 and half a 2h goal."""
        assert service.start(40000) is True
        clock.advance(3600)
        record = service.stop()

        assert record.elapsed_seconds == 3600
        assert record.earned_amount == Decimal("166.67")
        assert service.history == [record]

        service.set_goal_hours(2)
        progress = service.goal_progress()
        assert progress.ratio == 0.5
        assert progress.today_seconds == 3600

        stored = json.loads(store.get(DEFAULT_HISTORY_KEY))
        assert len(stored) == 1
        assert set(stored[0]) == {"timestamp", "earned", "seconds"}
        assert stored[0]["earned"] == 166.67
        assert stored[0]["seconds"] == 3600

    def test_history_survives_restart(self, service, clock, store):
        """Test a new service over the same store sees the history."""
        service.start(40000)
        clock.advance(60)
        service.stop()

        restarted = create_app_components(settings=Settings(), clock=clock, store=store)
        assert restarted.history == service.history

    def test_summary_cards(self, service, clock):
        """Test today/week/month after two sessions."""
        service.start(40000)
        clock.advance(1800)
        service.stop()
        service.start(40000)
        clock.advance(1800)
        service.stop()

        summary = service.summary()
        assert summary.today.seconds == 3600
        assert summary.week.seconds == 3600
        assert summary.month.count == 2

    def test_each_stop_records_only_its_session(self, service, clock):
        """Test a session after a stop does not count earlier seconds again."""
        service.start(40000)
        clock.advance(10)
        first = service.stop()
        service.start(40000)
        clock.advance(3)
        second = service.stop()

        assert [first.elapsed_seconds, second.elapsed_seconds] == [10, 3]
        assert second.earned_amount == Decimal("0.14")
        assert service.summary().today.seconds == 13

    def test_summary_with_older_reference(self, service, clock, start):
        """Test totals relative to an explicit instant."""
        service.start(40000)
        clock.advance(60)
        service.stop()

        summary = service.summary(reference=start - timedelta(days=40))
        assert summary.month.count == 0

    def test_chart_series(self, service, clock):
        """Test one chart point per committed session."""
        for _ in range(3):
            service.start(40000)
            clock.advance(10)
            service.stop()

        assert [p.label for p in service.chart_series()] == ["#1", "#2", "#3"]


class TestSessionOperations:
    """Tests for start/stop/reset through the service."""

    def test_invalid_salary_is_logged(self, service, clock):
        """Test rejected input stays idle and is recorded."""
        with pytest.raises(InvalidInputError):
            service.start("lots")

        assert service.snapshot().is_running is False
        assert clock.active_schedules == 0
        assert TrackerEventType.INPUT_REJECTED in event_types(service)

    def test_stop_without_ticks_commits_nothing(self, service):
        """Test an instant stop."""
        service.start(40000)
        assert service.stop() is None
        assert service.history == []
        assert TrackerEventType.SESSION_STOPPED in event_types(service)
        assert TrackerEventType.RECORD_SAVED not in event_types(service)

    def test_stop_while_idle(self, service):
        """Test stop with nothing running."""
        assert service.stop() is None
        assert TrackerEventType.SESSION_STOPPED not in event_types(service)

    def test_reset_commits_then_zeroes(self, service, clock):
        """Test reset while running."""
        service.start(40000)
        clock.advance(30)
        record = service.reset()

        assert service.history == [record]
        snapshot = service.snapshot()
        assert snapshot.elapsed_seconds == 0
        assert snapshot.earned_amount == Decimal(0)
        assert event_types(service)[0] == TrackerEventType.SESSION_RESET

    def test_goal_change_does_not_touch_rate(self, service):
        """Test goal and rate are independent."""
        service.start(40000)
        rate = service.snapshot().rate
        service.set_goal_hours(6)
        assert service.snapshot().rate == rate

    def test_zero_goal(self, service):
        """Test the goal ratio is undefined at zero hours."""
        service.set_goal_hours(0)
        with pytest.raises(DivisionUndefinedError):
            service.goal_progress()

    def test_invalid_goal(self, service):
        """Test a negative goal is rejected and the old one kept."""
        with pytest.raises(InvalidInputError):
            service.set_goal_hours(-1)
        assert service.goal_hours == 2.0

    def test_pump_on_manual_clock(self, service, clock):
        """Test pump() delivers nothing that advance() already fired."""
        service.start(40000)
        clock.advance(5)
        assert service.pump() == 0
        assert service.snapshot().elapsed_seconds == 5


class TestHistoryOperations:
    """Tests for history edits through the service."""

    def test_delete_record(self, service, clock):
        """Test deleting by position."""
        for seconds in (10, 20, 30):
            service.start(40000)
            clock.advance(seconds)
            service.reset()

        remaining = service.delete_record(1)
        assert [r.elapsed_seconds for r in remaining] == [10, 30]
        assert TrackerEventType.RECORD_DELETED in event_types(service)

    def test_delete_out_of_range(self, service):
        """Test deleting from an empty history."""
        with pytest.raises(HistoryIndexError):
            service.delete_record(0)

    def test_storage_failure_on_stop(self, clock):
        """Test a failed commit leaves the engine idle and history empty."""
        service = create_app_components(settings=Settings(), clock=clock, store=BrokenStore())
        service.start(40000)
        clock.advance(10)

        with pytest.raises(StorageWriteError):
            service.stop()

        assert service.snapshot().is_running is False
        assert service.history == []
        assert TrackerEventType.STORAGE_ERROR in event_types(service)

    def test_failed_commit_can_be_retried(self, clock):
        """Test the unsaved record is kept and saved on retry."""
        store = FlakyStore()
        service = create_app_components(settings=Settings(), clock=clock, store=store)
        service.start(40000)
        clock.advance(10)

        store.failing = True
        with pytest.raises(StorageWriteError):
            service.stop()
        assert service.unsaved_record.elapsed_seconds == 10

        with pytest.raises(StorageWriteError):
            service.retry_save()
        assert service.unsaved_record is not None

        store.failing = False
        record = service.retry_save()

        assert record.elapsed_seconds == 10
        assert service.history == [record]
        assert service.unsaved_record is None
        assert json.loads(store.get(DEFAULT_HISTORY_KEY))[0]["seconds"] == 10

    def test_retry_save_with_nothing_pending(self, service):
        """Test retry is a no-op after successful commits."""
        assert service.retry_save() is None
        assert service.unsaved_record is None

    def test_corrupt_history_starts_empty(self, clock):
        """Test startup with a malformed payload."""
        store = InMemoryKeyValueStore({DEFAULT_HISTORY_KEY: "{not json"})
        service = create_app_components(settings=Settings(), clock=clock, store=store)

        assert service.history == []
        assert TrackerEventType.HISTORY_CORRUPT in event_types(service)


class TestFactories:
    """Tests for component construction."""

    def test_memory_backend(self, monkeypatch):
        """Test the memory backend setting."""
        monkeypatch.setenv("SLACKER_STORAGE_BACKEND", "memory")
        assert isinstance(create_key_value_store(Settings()), InMemoryKeyValueStore)

    def test_json_backend(self, monkeypatch, tmp_path):
        """Test the default JSON file backend."""
        path = tmp_path / "history.json"
        monkeypatch.setenv("SLACKER_STORAGE_HISTORY_PATH", str(path))
        store = create_key_value_store(Settings())

        assert isinstance(store, JsonFileKeyValueStore)
        assert store.path == path

    def test_custom_history_key(self, monkeypatch, clock, store):
        """Test the history key setting."""
        monkeypatch.setenv("SLACKER_STORAGE_HISTORY_KEY", "my-history")
        service = create_app_components(settings=Settings(), clock=clock, store=store)
        service.start(40000)
        clock.advance(5)
        service.stop()

        assert store.get("my-history") is not None
        assert store.get(DEFAULT_HISTORY_KEY) is None

    def test_calendar_settings(self, monkeypatch, clock, store):
        """Test the accrual calendar comes from settings."""
        monkeypatch.setenv("SLACKER_DAYS_PER_MONTH", "20")
        monkeypatch.setenv("SLACKER_HOURS_PER_DAY", "10")
        service = create_app_components(settings=Settings(), clock=clock, store=store)
        service.start(720000)
        assert service.snapshot().rate == Decimal(1)

    def test_skip_loading(self, clock):
        """Test building without reading the history."""
        store = InMemoryKeyValueStore({DEFAULT_HISTORY_KEY: "[]"})
        service = create_app_components(
            settings=Settings(), clock=clock, store=store, load_history=False,
        )
        assert service.recent_activity() == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
