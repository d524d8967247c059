"""
Activity Event Models for Slacker Meter

Every state change of the tracker produces an activity event:
sessions starting and stopping, records being saved or deleted,
and the history being loaded (or found corrupt).

DESIGN DECISION: Events are only written to the structured log.
They are never part of the persisted history payload.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TrackerEventType(str, Enum):
    """Types of events the tracker reports."""
    # Session lifecycle
    SESSION_STARTED = "session_started"
    SESSION_STOPPED = "session_stopped"
    SESSION_RESET = "session_reset"
    INPUT_REJECTED = "input_rejected"

    # History
    HISTORY_LOADED = "history_loaded"
    HISTORY_CORRUPT = "history_corrupt"
    RECORD_SAVED = "record_saved"
    RECORD_DELETED = "record_deleted"

    # Goal
    GOAL_CHANGED = "goal_changed"

    # System events
    STORAGE_ERROR = "storage_error"


class EventSeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class TrackerEvent(BaseModel):
    """A single activity event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: TrackerEventType
    severity: EventSeverity = Field(default=EventSeverity.INFO)

    # Ties together all events of one running session
    session_id: Optional[UUID] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "session_id": str(self.session_id) if self.session_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class TrackerEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = TrackerEventBuilder.session_started(session_id, rate)
        event = TrackerEventBuilder.record_deleted(index, remaining)
    """

    @staticmethod
    def session_started(
        session_id: UUID,
        rate: Decimal,
    ) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.SESSION_STARTED,
            session_id=session_id,
            description="Session started",
            details={"rate_per_second": str(rate)},
            is_user_action=True,
        )

    @staticmethod
    def session_stopped(
        session_id: Optional[UUID],
        elapsed_seconds: int,
        earned: Decimal,
        committed: bool,
    ) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.SESSION_STOPPED,
            session_id=session_id,
            description=(
                f"Session stopped after {elapsed_seconds}s"
                if committed
                else "Session stopped before the first tick, nothing to commit"
            ),
            details={
                "elapsed_seconds": elapsed_seconds,
                "earned": str(earned),
                "committed": committed,
            },
            is_user_action=True,
        )

    @staticmethod
    def session_reset(session_id: Optional[UUID]) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.SESSION_RESET,
            session_id=session_id,
            description="Session counters reset",
            is_user_action=True,
        )

    @staticmethod
    def input_rejected(field: str, value: Any, reason: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.INPUT_REJECTED,
            severity=EventSeverity.WARNING,
            description=f"Rejected {field}: {reason}",
            details={
                "field": field,
                "value": repr(value),
            },
            is_user_action=True,
        )

    @staticmethod
    def history_loaded(record_count: int) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.HISTORY_LOADED,
            description=f"History loaded with {record_count} records",
            details={"record_count": record_count},
        )

    @staticmethod
    def history_corrupt(error_message: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.HISTORY_CORRUPT,
            severity=EventSeverity.WARNING,
            description="Stored history is malformed, starting with an empty history",
            error_message=error_message,
        )

    @staticmethod
    def record_saved(
        index: int,
        earned: Decimal,
        elapsed_seconds: int,
        session_id: Optional[UUID] = None,
    ) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.RECORD_SAVED,
            session_id=session_id,
            description=f"Record #{index + 1} saved: {earned} for {elapsed_seconds}s",
            details={
                "index": index,
                "earned": str(earned),
                "elapsed_seconds": elapsed_seconds,
            },
        )

    @staticmethod
    def record_deleted(index: int, remaining: int) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.RECORD_DELETED,
            description=f"Record #{index + 1} deleted",
            details={
                "index": index,
                "remaining": remaining,
            },
            is_user_action=True,
        )

    @staticmethod
    def goal_changed(goal_hours: float) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.GOAL_CHANGED,
            description=f"Daily goal set to {goal_hours} hours",
            details={"goal_hours": goal_hours},
            is_user_action=True,
        )

    @staticmethod
    def storage_error(operation: str, error_message: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.STORAGE_ERROR,
            severity=EventSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )
