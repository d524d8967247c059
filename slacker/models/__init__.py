"""
Data Models Package

This package contains all Pydantic models used in Slacker Meter.
All data flowing through the system must conform to these schemas.
"""

from slacker.models.session import (
    BucketTotals,
    ChartPoint,
    GoalProgress,
    Granularity,
    PeriodSummary,
    SessionPhase,
    SessionRecord,
    SessionSnapshot,
    round_amount,
    to_decimal,
)
from slacker.models.events import (
    EventSeverity,
    TrackerEvent,
    TrackerEventBuilder,
    TrackerEventType,
)

__all__ = [
    # Session models
    "BucketTotals",
    "ChartPoint",
    "GoalProgress",
    "Granularity",
    "PeriodSummary",
    "SessionPhase",
    "SessionRecord",
    "SessionSnapshot",
    "round_amount",
    "to_decimal",
    # Event models
    "EventSeverity",
    "TrackerEvent",
    "TrackerEventBuilder",
    "TrackerEventType",
]
