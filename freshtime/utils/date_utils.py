"""Date utility functions for freshtime."""
from datetime import datetime, date, timedelta, timezone
from typing import Optional, Tuple

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
LOCAL_TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%S.%f")

def get_week_range(target_date: date) -> Tuple[date, date]:
    """Get the Monday and Friday of the work week containing the target date.

    Saturday and Sunday belong to the week that started on the preceding Monday.

    Args:
        target_date: Date within the week

    Returns:
        Tuple of (monday, friday)
    """
    start = target_date - timedelta(days=target_date.weekday())
    end = start + timedelta(days=4)
    return start, end

def day_start(dt: date) -> str:
    """Format the first second of a day as a naive ISO timestamp."""
    return f"{dt.isoformat()}T00:00:00"

def day_end(dt: date) -> str:
    """Format the last second of a day as a naive ISO timestamp."""
    return f"{dt.isoformat()}T23:59:59"

def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string.

    Raises:
        ValueError: If the string is not a valid date
    """
    return datetime.strptime(value, "%Y-%m-%d").date()

def parse_entry_datetime(value: str) -> Optional[datetime]:
    """Parse a time entry timestamp.

    Tries a naive local timestamp first (whole or fractional seconds), then an
    ISO timestamp with a zone.
    The wall-clock time is kept as given; nothing is converted.

    Args:
        value: Timestamp string

    Returns:
        Parsed datetime, or None if neither format matches
    """
    if not value:
        return None
    for fmt in LOCAL_TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            pass
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed

def utc_timestamp(dt: datetime) -> str:
    """Format a datetime as a UTC timestamp with a Z suffix."""
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

def format_date_range(start: date, end: date) -> str:
    """Format a date range as e.g. Feb 9 – Feb 13, 2026."""
    return f"{MONTHS[start.month - 1]} {start.day} – {MONTHS[end.month - 1]} {end.day}, {end.year}"
