"""Calendar-date window utilities.

All engine arithmetic works on ``datetime.date`` values, which are civil
calendar days with no time or zone attached. Windows are half-open:
``[start, end)``.
"""

import calendar
from datetime import date, datetime, timezone
from typing import Any, Iterator, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from budgetsnap.domain.errors import ValidationError, invalid_window


def as_calendar_date(value: Any) -> Optional[date]:
    """Coerce a loosely-typed date value to a calendar date.

    Accepts ``date``, ``datetime`` (aware values are converted to UTC first)
    and ISO-8601 strings. Anything else, including malformed strings,
    yields None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = date_parser.isoparse(text)
        except (ValueError, OverflowError):
            return None
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.date()
    return None


def parse_window_bound(value: Any, name: str = "window bound") -> date:
    """Coerce a window bound, raising ValidationError when it is unusable."""
    result = as_calendar_date(value)
    if result is None:
        raise ValidationError(f"Invalid {name}: {value!r}")
    return result


def in_window(day: date, start: date, end: date) -> bool:
    """Return True when ``day`` lies in ``[start, end)``."""
    return start <= day < end


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, clamping ``day`` into the month (31 -> 30, 29 or 28)."""
    return date(year, month, max(1, min(day, days_in_month(year, month))))


def first_of_month(day: date) -> date:
    return day.replace(day=1)


def next_month_start(day: date) -> date:
    """First day of the month after ``day``'s month."""
    return first_of_month(day) + relativedelta(months=1)


def months_between(earlier: date, later: date) -> int:
    """Whole calendar months from ``earlier``'s month to ``later``'s month."""
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def normalize_interval(value: Optional[int]) -> int:
    """Intervals that are absent or below 1 behave as 1."""
    if not value or value < 1:
        return 1
    return int(value)


def month_window(month_start: date, month_end: Optional[date] = None) -> tuple[date, date]:
    """Normalize a month request to ``[month_start, start of next month)``.

    The exclusive end is derived from ``month_start`` so the last calendar
    day is always included whatever the month's length.

    Raises:
        ValidationError: If ``month_end`` is before ``month_start``
    """
    if month_end is not None and month_end < month_start:
        raise ValidationError(invalid_window(month_start, month_end))
    return month_start, next_month_start(month_start)


def covering_months(start: date, end: date) -> Iterator[date]:
    """Yield the first day of every month that overlaps ``[start, end)``."""
    cursor = first_of_month(start)
    while cursor < end:
        yield cursor
        cursor += relativedelta(months=1)


def iso(day: date) -> str:
    """Date-only ISO string (YYYY-MM-DD)."""
    return day.isoformat()
