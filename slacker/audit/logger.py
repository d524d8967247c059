"""
Activity Logger

DESIGN DECISION: Every state change of the tracker is logged.
This provides:
1. A trail of sessions and history edits for debugging
2. Visibility into recovered failures (corrupt history, storage errors)
3. A short in-memory feed the UI can show as "recent activity"

The activity logger:
- Is synchronous, like the rest of the core
- Tags events with the session they belong to
"""

from collections import deque
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

import structlog

from slacker.models.events import TrackerEvent, TrackerEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class ActivityLogger:
    """
    Central activity logging service.

    Logs events to:
    1. Structured local log (JSON lines through the stdlib logger)
    2. A bounded in-memory feed of recent events
    """

    def __init__(self, max_recent: int = 50):
        """
        Initialize activity logger.

        Args:
            max_recent: How many events the recent-activity feed keeps.
        """
        self._recent: deque[TrackerEvent] = deque(maxlen=max_recent)
        self._logger = structlog.get_logger("slacker.activity")

    def log(self, event: TrackerEvent) -> None:
        """Log an activity event."""
        self._recent.append(event)

        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("activity_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("activity_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

    def recent_events(self, limit: int = 10) -> list[TrackerEvent]:
        """Most recent events, newest first."""
        events = list(self._recent)[-limit:] if limit > 0 else []
        events.reverse()
        return events

    def log_session_started(
        self,
        session_id: UUID,
        rate: Decimal,
    ) -> None:
        self.log(TrackerEventBuilder.session_started(
            session_id=session_id,
            rate=rate,
        ))

    def log_session_stopped(
        self,
        session_id: Optional[UUID],
        elapsed_seconds: int,
        earned: Decimal,
        committed: bool,
    ) -> None:
        self.log(TrackerEventBuilder.session_stopped(
            session_id=session_id,
            elapsed_seconds=elapsed_seconds,
            earned=earned,
            committed=committed,
        ))

    def log_session_reset(self, session_id: Optional[UUID]) -> None:
        self.log(TrackerEventBuilder.session_reset(session_id))

    def log_input_rejected(self, field: str, value: Any, reason: str) -> None:
        self.log(TrackerEventBuilder.input_rejected(field, value, reason))

    def log_history_loaded(self, record_count: int) -> None:
        self.log(TrackerEventBuilder.history_loaded(record_count))

    def log_history_corrupt(self, error_message: str) -> None:
        self.log(TrackerEventBuilder.history_corrupt(error_message))

    def log_record_saved(
        self,
        index: int,
        earned: Decimal,
        elapsed_seconds: int,
        session_id: Optional[UUID] = None,
    ) -> None:
        self.log(TrackerEventBuilder.record_saved(
            index=index,
            earned=earned,
            elapsed_seconds=elapsed_seconds,
            session_id=session_id,
        ))

    def log_record_deleted(self, index: int, remaining: int) -> None:
        self.log(TrackerEventBuilder.record_deleted(index, remaining))

    def log_goal_changed(self, goal_hours: float) -> None:
        self.log(TrackerEventBuilder.goal_changed(goal_hours))

    def log_storage_error(self, operation: str, error_message: str) -> None:
        self.log(TrackerEventBuilder.storage_error(operation, error_message))
