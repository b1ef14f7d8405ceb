"""Formatting utility functions for freshtime."""
import math
import re
from datetime import timedelta
from decimal import Decimal

def round_hours(value: float) -> float:
    """Round an hour value to 2 decimals, halves away from zero.

    Args:
        value: Hour value

    Returns:
        Rounded hour value
    """
    if value < 0:
        return -round_hours(-value)
    return math.floor(value * 100 + 0.5) / 100

def seconds_to_hours(seconds: int) -> float:
    """Convert seconds to hours rounded to 2 decimals."""
    return round_hours(seconds / 3600)

def format_hours(hours: float) -> str:
    """Format an hour value for the weekly table.

    Args:
        hours: Hour value

    Returns:
        One-decimal string, or an em dash for zero
    """
    if hours == 0:
        return "—"
    return f"{hours:.1f}"

def format_qty(seconds: int) -> str:
    """Format a duration as an hour quantity string with 2 decimals."""
    return f"{seconds / 3600:.2f}"

def format_amount(value: Decimal) -> str:
    """Format a monetary amount with 2 decimals."""
    return f"{value.quantize(Decimal('0.01'))}"

def format_elapsed(elapsed: timedelta) -> str:
    """Format an elapsed time as e.g. 1h5m or 12m.

    Args:
        elapsed: Elapsed time

    Returns:
        Formatted string
    """
    total_minutes = int(elapsed.total_seconds()) // 60
    h, m = divmod(total_minutes, 60)
    if h > 0:
        return f"{h}h{m}m"
    return f"{m}m"

def parse_duration(duration: str) -> int:
    """Parse a duration like 2h, 30m or 1h30m into seconds.

    Args:
        duration: Duration string

    Returns:
        Duration in seconds

    Raises:
        ValueError: If the string is not a valid duration
    """
    match = re.fullmatch(r"(?:(\d+)h)?(?:(\d+)m)?", duration or "")
    if not match or not any(match.groups()):
        raise ValueError(f"invalid duration {duration!r} (expected format: 2h, 30m, 1h30m)")

    h, m = match.groups(default="0")
    return int(h) * 3600 + int(m) * 60
