"""
Calendar date utilities.

Provides ISO date parsing and timezone-aware "today" resolution.
"""

import re
from datetime import date, datetime

import pytz
from dateutil import parser

# Full calendar date, optionally followed by a time component
CALENDAR_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}(?:[T ].+)?")


def parse_iso_date(value: object) -> date | None:
    """
    Parse a value into a calendar date.

    Accepts date and datetime objects and ISO 8601 text starting with a
    complete YYYY-MM-DD date. Reduced forms such as "2024", "2024-03" or
    week dates are rejected rather than completed. A time component, if
    present, is dropped.

    Args:
        value: Value to parse.

    Returns:
        Parsed date, or None if the value is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not CALENDAR_DATE_PATTERN.fullmatch(text):
        return None

    try:
        return parser.isoparse(text).date()
    except (ValueError, OverflowError):
        return None


def current_date(timezone_str: str = "UTC") -> date:
    """
    Get today's date in a timezone.

    Args:
        timezone_str: Timezone string (e.g., "America/Santiago").

    Returns:
        Current calendar date in that timezone.
    """
    tz = pytz.timezone(timezone_str)
    return datetime.now(pytz.utc).astimezone(tz).date()
