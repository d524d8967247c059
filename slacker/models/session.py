"""
Core Data Models for Slacker Meter

These models define the schemas for everything that flows between
the accrual engine, the history store and the statistics layer.
They are designed to:
1. Enforce the record invariants at construction time
2. Be immutable once created
3. Serialize to the exact storage payload format

DESIGN DECISION: Money is a Decimal everywhere inside the system.
Only the storage payload and the chart turn it into a plain number.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


CENT = Decimal("0.01")


def round_amount(value: Decimal) -> Decimal:
    """Round a money amount to two fractional digits (half up)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Decimal:
    """
    Convert a parsed number to Decimal without float noise.

    Floats go through repr() so 166.67 stays 166.67.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Not a number: {value!r}") from None
    else:
        raise ValueError(f"Expected a number, got {type(value).__name__}")

    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


# =============================================================================
# ENUMS
# =============================================================================

class SessionPhase(str, Enum):
    """Phase of the running-session state machine."""
    IDLE = "idle"
    RUNNING = "running"


class Granularity(str, Enum):
    """Calendar bucket sizes used by the statistics."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


# =============================================================================
# PERSISTED RECORD
# =============================================================================

class SessionRecord(BaseModel):
    """
    One committed slacking session.

    CRITICAL: Records are frozen. Once the engine emits a record
    the history store owns it and nothing changes its fields.

    Storage payload: {"timestamp": ISO-8601, "earned": number, "seconds": int}
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: datetime = Field(
        ...,
        description="When the session was stopped (commit time)"
    )
    earned_amount: Decimal = Field(
        ...,
        alias="earned",
        ge=0,
        description="Earned amount, rounded to two decimals"
    )
    elapsed_seconds: int = Field(
        ...,
        alias="seconds",
        ge=0,
        description="Whole seconds the session ran"
    )

    @field_validator('earned_amount', mode='before')
    @classmethod
    def round_earned(cls, v: Any) -> Decimal:
        """Normalize to a two-decimal Decimal."""
        return round_amount(to_decimal(v))

    @field_serializer('earned_amount')
    def serialize_earned(self, v: Decimal) -> float:
        return float(v)

    def to_payload(self) -> dict:
        """Convert to the JSON-ready storage payload."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_payload(cls, data: dict) -> "SessionRecord":
        return cls.model_validate(data)


# =============================================================================
# TRANSIENT STATE
# =============================================================================

class SessionSnapshot(BaseModel):
    """
    Read-only view of the running session.

    This is all the rendering layer ever sees of the engine.
    """
    model_config = ConfigDict(frozen=True)

    phase: SessionPhase
    rate: Decimal = Field(
        default=Decimal(0),
        description="Per-second rate of the current or last session"
    )
    elapsed_seconds: int = Field(default=0, ge=0)
    earned_amount: Decimal = Field(
        default=Decimal(0),
        description="Unrounded accrued amount"
    )

    @property
    def is_running(self) -> bool:
        return self.phase == SessionPhase.RUNNING

    @property
    def display_amount(self) -> Decimal:
        """Accrued amount as shown to the user."""
        return round_amount(self.earned_amount)


# =============================================================================
# STATISTICS MODELS
# =============================================================================

class BucketTotals(BaseModel):
    """Sum of earned amount and seconds over one bucket."""
    model_config = ConfigDict(frozen=True)

    earned: Decimal = Field(default=Decimal(0))
    seconds: int = Field(default=0, ge=0)
    count: int = Field(default=0, ge=0, description="Records in the bucket")


class PeriodSummary(BaseModel):
    """Today / this week / this month totals relative to one instant."""
    model_config = ConfigDict(frozen=True)

    reference: datetime
    today: BucketTotals
    week: BucketTotals
    month: BucketTotals

    def for_granularity(self, granularity: Granularity) -> BucketTotals:
        if granularity == Granularity.DAY:
            return self.today
        if granularity == Granularity.WEEK:
            return self.week
        return self.month


class ChartPoint(BaseModel):
    """One point of the history chart, one per record in commit order."""
    model_config = ConfigDict(frozen=True)

    label: str
    earned: Decimal
    timestamp: datetime


class GoalProgress(BaseModel):
    """
    Completion of today's slacking goal.

    ratio is the raw value (can exceed 1) used for the percentage text,
    clamped is what a progress bar should draw.
    """
    model_config = ConfigDict(frozen=True)

    goal_hours: float = Field(..., gt=0)
    today_seconds: int = Field(..., ge=0)
    ratio: float = Field(..., ge=0)

    @property
    def clamped(self) -> float:
        return min(max(self.ratio, 0.0), 1.0)

    @property
    def percent(self) -> float:
        return self.ratio * 100

    @property
    def reached(self) -> bool:
        return self.ratio >= 1
