"""Utility modules for freshtime."""

from .date_utils import (
    get_week_range, day_start, day_end, parse_date, parse_entry_datetime, utc_timestamp, format_date_range,
)
from .format_utils import round_hours, seconds_to_hours, format_hours, format_qty, format_elapsed, parse_duration
from .file_utils import read_json, write_json, write_csv, write_markdown

__all__ = [
    'get_week_range', 'day_start', 'day_end', 'parse_date', 'parse_entry_datetime', 'utc_timestamp',
    'format_date_range',
    'round_hours', 'seconds_to_hours', 'format_hours', 'format_qty', 'format_elapsed', 'parse_duration',
    'read_json', 'write_json', 'write_csv', 'write_markdown'
]
