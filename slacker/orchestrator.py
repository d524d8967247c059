"""
Main Orchestrator for Slacker Meter

This module ties together all the components and defines the
operations the UI can invoke:
1. Session (start → ticks → stop/reset → record committed to history)
2. History (delete a record by position)
3. Statistics (today/week/month totals, goal progress, chart)

DESIGN DECISION: TrackerService is the single owner of state.
The session lives in the AccrualEngine, the history in the
HistoryStore; the UI only reads snapshots and calls these methods.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from slacker.audit import ActivityLogger
from slacker.config import Settings, get_settings
from slacker.history import HistoryStore
from slacker.models.session import (
    ChartPoint,
    GoalProgress,
    PeriodSummary,
    SessionRecord,
    SessionSnapshot,
)
from slacker.services.clock import ClockSource, SystemClock
from slacker.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueHistoryPersistence,
    KeyValueStoreInterface,
    StorageError,
)
from slacker.stats import StatsAggregator
from slacker.tracking import AccrualEngine, GoalTracker, InvalidInputError


class TrackerService:
    """
    Orchestrates:
    - AccrualEngine state (start/stop/reset, ticks)
    - History persistence of committed sessions
    - Statistics and goal progress for the UI
    - Activity logging of every state change
    """

    def __init__(
        self,
        clock: ClockSource,
        engine: AccrualEngine,
        history: HistoryStore,
        aggregator: Optional[StatsAggregator] = None,
        goal_tracker: Optional[GoalTracker] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._clock = clock
        self._engine = engine
        self._history = history
        self._aggregator = aggregator or StatsAggregator()
        self._goal_tracker = goal_tracker or GoalTracker()
        self._activity_logger = activity_logger
        # Record whose commit failed, kept so it can be saved again
        self._unsaved: Optional[tuple[SessionRecord, Optional[UUID]]] = None

    # ----- Read side -----
    @property
    def clock(self) -> ClockSource:
        return self._clock

    @property
    def engine(self) -> AccrualEngine:
        return self._engine

    @property
    def history(self) -> list[SessionRecord]:
        return self._history.records

    @property
    def goal_hours(self) -> float:
        return self._goal_tracker.goal_hours

    @property
    def unsaved_record(self) -> Optional[SessionRecord]:
        """Last stopped session that could not be written to storage."""
        return self._unsaved[0] if self._unsaved else None

    def snapshot(self) -> SessionSnapshot:
        return self._engine.snapshot()

    def summary(self, reference: Optional[datetime] = None) -> PeriodSummary:
        """Today/week/month totals relative to reference (default: now)."""
        reference = reference or self._clock.now()
        return self._aggregator.summarize(self._history.records, reference)

    def goal_progress(self, reference: Optional[datetime] = None) -> GoalProgress:
        """
        Progress of today's committed seconds against the goal.

        Raises:
            DivisionUndefinedError: If the goal is zero hours
        """
        today = self.summary(reference).today
        return self._goal_tracker.progress(today.seconds)

    def chart_series(self) -> list[ChartPoint]:
        return self._aggregator.chart_series(self._history.records)

    def recent_activity(self, limit: int = 10) -> list:
        if not self._activity_logger:
            return []
        return self._activity_logger.recent_events(limit)

    # ----- Session -----
    def load_history(self) -> list[SessionRecord]:
        return self._history.load()

    def start(self, monthly_salary: Any) -> bool:
        """
        Start a session at the given monthly salary.

        Returns:
            False if a session was already running

        Raises:
            InvalidInputError: If the salary is not a finite positive number
        """
        try:
            started = self._engine.start(monthly_salary)
        except InvalidInputError as e:
            if self._activity_logger:
                self._activity_logger.log_input_rejected(e.field, e.value, e.reason)
            raise

        if started and self._activity_logger:
            self._activity_logger.log_session_started(
                session_id=self._engine.session_id,
                rate=self._engine.rate,
            )
        return started

    def stop(self) -> Optional[SessionRecord]:
        """
        Stop the session and commit its record to the history.

        Returns:
            The committed record, or None if nothing was running or
            no time had elapsed
        """
        was_running = self._engine.is_running
        record = self._engine.stop()
        if was_running:
            self._commit(record)
        return record

    def reset(self) -> Optional[SessionRecord]:
        """Stop (committing if applicable) and zero the counters."""
        was_running = self._engine.is_running
        session_id = self._engine.session_id
        record = self._engine.reset()
        if was_running:
            self._commit(record, session_id=session_id)
        if self._activity_logger:
            self._activity_logger.log_session_reset(session_id)
        return record

    def pump(self) -> int:
        """Deliver due ticks for clocks that are polled (SystemClock)."""
        return self._clock.run_due()

    # ----- History -----
    def retry_save(self) -> Optional[SessionRecord]:
        """
        Write the record of a session whose commit failed.

        Returns:
            The saved record, or None if nothing was pending

        Raises:
            StorageError: If the write fails again (record stays pending)
        """
        if self._unsaved is None:
            return None
        record, session_id = self._unsaved
        self._save_record(record, session_id)
        return record

    def delete_record(self, index: int) -> list[SessionRecord]:
        """
        Delete a history record by position.

        Raises:
            HistoryIndexError: If there is no record at index
        """
        updated = self._history.delete_at(index)
        if self._activity_logger:
            self._activity_logger.log_record_deleted(index, len(updated))
        return updated

    # ----- Goal -----
    def set_goal_hours(self, goal_hours: Any) -> float:
        """
        Change the daily goal. Never affects the running session's rate.

        Raises:
            InvalidInputError: If goal_hours is negative or not a number
        """
        try:
            hours = self._goal_tracker.set_goal_hours(goal_hours)
        except InvalidInputError as e:
            if self._activity_logger:
                self._activity_logger.log_input_rejected(e.field, e.value, e.reason)
            raise

        if self._activity_logger:
            self._activity_logger.log_goal_changed(hours)
        return hours

    def _commit(
        self,
        record: Optional[SessionRecord],
        session_id: Optional[UUID] = None,
    ) -> None:
        session_id = session_id or self._engine.session_id
        if self._activity_logger:
            # No record means the session stopped before its first tick
            self._activity_logger.log_session_stopped(
                session_id=session_id,
                elapsed_seconds=record.elapsed_seconds if record else 0,
                earned=record.earned_amount if record else Decimal(0),
                committed=record is not None,
            )

        if record is None:
            return

        self._save_record(record, session_id)

    def _save_record(self, record: SessionRecord, session_id: Optional[UUID]) -> None:
        try:
            updated = self._history.append(record)
        except StorageError:
            self._unsaved = (record, session_id)
            raise

        if self._unsaved and self._unsaved[0] is record:
            self._unsaved = None
        if self._activity_logger:
            self._activity_logger.log_record_saved(
                index=len(updated) - 1,
                earned=record.earned_amount,
                elapsed_seconds=record.elapsed_seconds,
                session_id=session_id,
            )


def create_key_value_store(settings: Settings) -> KeyValueStoreInterface:
    """Build the storage medium selected in settings."""
    storage_settings = settings.storage
    if storage_settings.backend == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(storage_settings.history_path)


def create_app_components(
    settings: Optional[Settings] = None,
    clock: Optional[ClockSource] = None,
    store: Optional[KeyValueStoreInterface] = None,
    load_history: bool = True,
) -> TrackerService:
    """
    Factory function to create the whole component graph.

    Args:
        settings: Configuration; defaults to get_settings()
        clock: Time source; defaults to a SystemClock
        store: Key-value medium; defaults to the configured backend
        load_history: Read the persisted history before returning

    Returns:
        A ready TrackerService
    """
    settings = settings or get_settings()
    tracker_settings = settings.tracker

    clock = clock or SystemClock()
    store = store or create_key_value_store(settings)
    activity_logger = ActivityLogger()

    persistence = KeyValueHistoryPersistence(store, key=settings.storage.history_key)
    history = HistoryStore(persistence, activity_logger=activity_logger)

    engine = AccrualEngine(
        clock,
        days_per_month=tracker_settings.days_per_month,
        hours_per_day=tracker_settings.hours_per_day,
        tick_interval_seconds=tracker_settings.tick_interval_seconds,
    )

    service = TrackerService(
        clock=clock,
        engine=engine,
        history=history,
        aggregator=StatsAggregator(),
        goal_tracker=GoalTracker(tracker_settings.default_goal_hours),
        activity_logger=activity_logger,
    )

    if load_history:
        service.load_history()

    return service
