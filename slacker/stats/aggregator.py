"""
Statistics Aggregation

DESIGN DECISION: Aggregation is PURE.
Every function takes the history and a reference instant and
returns new values; nothing here keeps state between calls, so the
same inputs always produce the same buckets.

Bucket rules (local calendar of the reference instant):
- day:   same year, month and day of month
- week:  same Monday-start week; each date is shifted back to its
         Monday (Sunday belongs to the week that started six days
         earlier) and the Mondays are compared
- month: same year and month
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable

from slacker.models.session import (
    BucketTotals,
    ChartPoint,
    Granularity,
    PeriodSummary,
    SessionRecord,
)


def to_reference_zone(instant: datetime, reference: datetime) -> datetime:
    """
    Express instant on the same wall clock as reference.

    Aware instants are converted to the reference's zone. With a naive
    reference, aware instants are converted to the local zone and made
    naive; naive instants are taken as local time already.
    """
    if reference.tzinfo is not None:
        return instant.astimezone(reference.tzinfo)
    if instant.tzinfo is not None:
        return instant.astimezone().replace(tzinfo=None)
    return instant


def week_start(day: date) -> date:
    """Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


def bucket_key(instant: datetime, granularity: Granularity) -> str:
    """Stable label of the bucket an instant falls in."""
    day = instant.date()
    if granularity == Granularity.DAY:
        return day.isoformat()
    if granularity == Granularity.WEEK:
        return week_start(day).isoformat()
    return f"{day.year:04d}-{day.month:02d}"


def same_bucket(
    instant: datetime,
    reference: datetime,
    granularity: Granularity,
) -> bool:
    """Whether instant and reference share a day/week/month."""
    local = to_reference_zone(instant, reference).date()
    ref = reference.date()

    if granularity == Granularity.DAY:
        return local == ref
    if granularity == Granularity.WEEK:
        return week_start(local) == week_start(ref)
    return (local.year, local.month) == (ref.year, ref.month)


class StatsAggregator:
    """
    Buckets history records by calendar period and sums them.

    GUARANTEES:
    - Only reads the records it is given
    - Bucket membership depends only on (timestamp, reference)
    - Sums are exact Decimals, independent of record order
    """

    def bucket(
        self,
        history: Iterable[SessionRecord],
        reference: datetime,
        granularity: Granularity,
    ) -> list[SessionRecord]:
        """Records in the same bucket as reference, in history order."""
        granularity = Granularity(granularity)
        return [
            record for record in history
            if same_bucket(record.timestamp, reference, granularity)
        ]

    def sum(self, records: Iterable[SessionRecord]) -> BucketTotals:
        """Total earned and seconds; zero for no records."""
        earned = Decimal(0)
        seconds = 0
        count = 0
        for record in records:
            earned += record.earned_amount
            seconds += record.elapsed_seconds
            count += 1
        return BucketTotals(earned=earned, seconds=seconds, count=count)

    def totals(
        self,
        history: Iterable[SessionRecord],
        reference: datetime,
        granularity: Granularity,
    ) -> BucketTotals:
        return self.sum(self.bucket(history, reference, granularity))

    def summarize(
        self,
        history: Iterable[SessionRecord],
        reference: datetime,
    ) -> PeriodSummary:
        """Today / this week / this month relative to reference."""
        records = list(history)
        return PeriodSummary(
            reference=reference,
            today=self.totals(records, reference, Granularity.DAY),
            week=self.totals(records, reference, Granularity.WEEK),
            month=self.totals(records, reference, Granularity.MONTH),
        )

    def breakdown(
        self,
        history: Iterable[SessionRecord],
        granularity: Granularity,
        reference: datetime,
    ) -> dict[str, BucketTotals]:
        """
        Totals for every bucket that has records.

        Keys are "YYYY-MM-DD" (day), the Monday "YYYY-MM-DD" (week)
        or "YYYY-MM" (month), in chronological order. Timestamps are
        read on the wall clock of reference.
        """
        granularity = Granularity(granularity)
        groups: dict[str, list[SessionRecord]] = {}

        for record in history:
            local = to_reference_zone(record.timestamp, reference)
            key = bucket_key(local, granularity)
            groups.setdefault(key, []).append(record)

        return {key: self.sum(groups[key]) for key in sorted(groups)}

    def chart_series(self, history: Iterable[SessionRecord]) -> list[ChartPoint]:
        """One point per record, labelled #1, #2, ... in commit order."""
        return [
            ChartPoint(
                label=f"#{position}",
                earned=record.earned_amount,
                timestamp=record.timestamp,
            )
            for position, record in enumerate(history, start=1)
        ]
