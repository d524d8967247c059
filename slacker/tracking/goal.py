"""
Daily goal tracking.

Completion is today's committed seconds over the goal duration.
A goal of zero hours has no meaningful ratio and is reported as
DivisionUndefinedError rather than an infinite percentage.
"""

import math
from typing import Any

from slacker.models.session import GoalProgress
from slacker.tracking.accrual import InvalidInputError


class DivisionUndefinedError(ZeroDivisionError):
    """Completion ratio requested against a zero-hour goal."""
    pass


def parse_goal_hours(value: Any) -> float:
    """
    Validate goal hours from the input boundary.

    Zero is accepted here; it only fails once a ratio is computed.

    Raises:
        InvalidInputError: If value is negative, non-finite or not a number
    """
    if isinstance(value, bool):
        raise InvalidInputError("goal_hours", value, "expected a number")
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError("goal_hours", value, "expected a number") from None

    if not math.isfinite(hours):
        raise InvalidInputError("goal_hours", value, "must be finite")
    if hours < 0:
        raise InvalidInputError("goal_hours", value, "must not be negative")
    return hours


def completion_ratio(today_seconds: int, goal_hours: Any) -> GoalProgress:
    """
    today_seconds / (goal_hours * 3600), raw and clamped.

    Raises:
        InvalidInputError: If goal_hours is negative or not a number
        DivisionUndefinedError: If goal_hours is zero
    """
    hours = parse_goal_hours(goal_hours)
    if hours == 0:
        raise DivisionUndefinedError("Goal of 0 hours has no completion ratio")

    seconds = max(int(today_seconds), 0)
    return GoalProgress(
        goal_hours=hours,
        today_seconds=seconds,
        ratio=seconds / (hours * 3600),
    )


class GoalTracker:
    """Holds the configured daily goal and computes progress against it."""

    def __init__(self, goal_hours: float = 2.0):
        self._goal_hours = parse_goal_hours(goal_hours)

    @property
    def goal_hours(self) -> float:
        return self._goal_hours

    def set_goal_hours(self, goal_hours: Any) -> float:
        """Change the goal. Raises InvalidInputError, leaving the old goal."""
        self._goal_hours = parse_goal_hours(goal_hours)
        return self._goal_hours

    def completion_ratio(self, today_seconds: int, goal_hours: Any = None) -> GoalProgress:
        hours = self._goal_hours if goal_hours is None else goal_hours
        return completion_ratio(today_seconds, hours)

    def progress(self, today_seconds: int) -> GoalProgress:
        return completion_ratio(today_seconds, self._goal_hours)
