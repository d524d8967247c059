"""Display formatting for durations, amounts and percentages."""

from decimal import Decimal

from slacker.models.session import round_amount, to_decimal


def format_duration(total_seconds: int) -> str:
    """HH:MM:SS; hours keep counting past 24."""
    total_seconds = max(int(total_seconds), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_amount(amount) -> str:
    """Two decimals, e.g. 166.67."""
    value = amount if isinstance(amount, Decimal) else to_decimal(amount)
    return f"{round_amount(value):.2f}"


def format_percent(ratio: float) -> str:
    """Ratio as a one-decimal percentage, e.g. 0.5 -> 50.0%."""
    return f"{ratio * 100:.1f}%"
