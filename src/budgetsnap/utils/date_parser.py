"""Date parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow",
      "this/last/next month" (first day), "this/last/next week" (Monday)

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    offsets = {"last": -1, "this": 0, "next": 1}
    prefix, _, period = date_str.partition(" ")
    if prefix in offsets and period in ("month", "week"):
        offset = offsets[prefix]
        if period == "month":
            return today.replace(day=1) + relativedelta(months=offset)
        monday = today - timedelta(days=today.weekday())
        return monday + timedelta(weeks=offset)

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str, today: Optional[date] = None) -> date:
    """Parse a month reference into the first day of that month.

    Accepts "YYYY-MM" or anything parse_date understands.

    Raises:
        ValueError: If the month cannot be parsed
    """
    match = re.fullmatch(r"\s*(\d{4})-(\d{1,2})\s*", month_str)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ValueError(f"Could not parse month '{month_str}': month must be 1-12")
        return date(year, month, 1)
    return parse_date(month_str, today=today).replace(day=1)


def get_month_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get first and last day of a month period.

    Args:
        period: this-month, last-month or next-month

    Returns:
        Tuple of (first_day, last_day), both inclusive

    Raises:
        ValueError: If period string is not recognized
    """
    offsets = {"last-month": -1, "this-month": 0, "next-month": 1}
    period = period.strip().lower()
    if period not in offsets:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: {', '.join(offsets)}"
        )
    today = today or date.today()
    first = today.replace(day=1) + relativedelta(months=offsets[period])
    last = first + relativedelta(months=1) - timedelta(days=1)
    return first, last


def get_week_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get a Monday-to-Monday half-open week window.

    Args:
        period: this-week or next-week

    Returns:
        Tuple of (monday, following_monday); the end is exclusive

    Raises:
        ValueError: If period string is not recognized
    """
    offsets = {"this-week": 0, "next-week": 1}
    period = period.strip().lower()
    if period not in offsets:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: {', '.join(offsets)}"
        )
    today = today or date.today()
    start = today - timedelta(days=today.weekday()) + timedelta(weeks=offsets[period])
    return start, start + timedelta(weeks=1)
