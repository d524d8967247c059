"""Session tracking package: accrual state machine and daily goal."""

from slacker.tracking.accrual import (
    AccrualEngine,
    InvalidInputError,
    parse_monthly_salary,
)
from slacker.tracking.goal import (
    DivisionUndefinedError,
    GoalTracker,
    completion_ratio,
    parse_goal_hours,
)

__all__ = [
    "AccrualEngine",
    "DivisionUndefinedError",
    "GoalTracker",
    "InvalidInputError",
    "completion_ratio",
    "parse_goal_hours",
    "parse_monthly_salary",
]
