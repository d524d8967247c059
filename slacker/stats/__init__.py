"""Statistics package."""

from slacker.stats.aggregator import (
    StatsAggregator,
    bucket_key,
    same_bucket,
    to_reference_zone,
    week_start,
)
from slacker.stats.formatting import format_amount, format_duration, format_percent

__all__ = [
    "StatsAggregator",
    "bucket_key",
    "format_amount",
    "format_duration",
    "format_percent",
    "same_bucket",
    "to_reference_zone",
    "week_start",
]
