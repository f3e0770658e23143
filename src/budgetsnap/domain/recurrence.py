"""Occurrence generators for recurring rules.

Each generator returns the ordered candidate dates of a rule inside a
half-open window ``[window_start, window_end)``. Overrides are applied
later by the snapshot engine.
"""

from datetime import date, timedelta
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta

from budgetsnap.domain.entities import Frequency, Rule
from budgetsnap.domain.windows import (
    clamp_day,
    first_of_month,
    in_window,
    months_between,
    normalize_interval,
)


def generate_monthly(
    anchor: date,
    day_of_month: int,
    interval_months: Optional[int],
    window_start: date,
    window_end: date,
) -> list[date]:
    """Generate monthly occurrences.

    A month is due when the number of months from the anchor's month is
    non-negative and a multiple of the interval. The occurrence falls on
    ``day_of_month`` clamped to the month's length.

    Args:
        anchor: Date the rule's schedule counts from
        day_of_month: Preferred day (1-31)
        interval_months: Months between occurrences (normalized to >= 1)
        window_start: Inclusive window start
        window_end: Exclusive window end

    Returns:
        Ascending list of occurrence dates
    """
    if window_end <= window_start:
        return []

    step = normalize_interval(interval_months)
    day = normalize_interval(day_of_month)
    anchor_month = first_of_month(anchor)
    cursor = first_of_month(window_start)
    dates = []

    while cursor < window_end:
        diff = months_between(anchor_month, cursor)
        if diff >= 0 and diff % step == 0:
            candidate = clamp_day(cursor.year, cursor.month, day)
            if in_window(candidate, window_start, window_end):
                dates.append(candidate)
        cursor += relativedelta(months=1)
    return dates


def generate_weekly(
    anchor: date,
    interval_weeks: Optional[int],
    window_start: date,
    window_end: date,
) -> list[date]:
    """Generate occurrences every ``interval_weeks`` weeks from the anchor.

    Returns:
        Ascending list of occurrence dates
    """
    if window_end <= window_start:
        return []

    step = timedelta(weeks=normalize_interval(interval_weeks))
    current = anchor
    if current < window_start:
        # Jump straight to the first step on or after the window start.
        steps = -((anchor - window_start) // step)
        current = anchor + step * steps

    dates = []
    while current < window_end:
        dates.append(current)
        current += step
    return dates


def _monthly(rule: Rule, anchor: date, window_start: date, window_end: date) -> list[date]:
    day = rule.dom if rule.dom is not None else anchor.day
    return generate_monthly(anchor, day, rule.interval, window_start, window_end)


def _weekly(rule: Rule, anchor: date, window_start: date, window_end: date) -> list[date]:
    return generate_weekly(anchor, rule.interval, window_start, window_end)


def _biweekly(rule: Rule, anchor: date, window_start: date, window_end: date) -> list[date]:
    return generate_weekly(anchor, 2, window_start, window_end)


GENERATORS: dict[Frequency, Callable[[Rule, date, date, date], list[date]]] = {
    Frequency.MONTHLY: _monthly,
    Frequency.WEEKLY: _weekly,
    Frequency.BIWEEKLY: _biweekly,
}

_missing = set(Frequency) - set(GENERATORS)
if _missing:
    raise RuntimeError(f"No occurrence generator for: {sorted(f.value for f in _missing)}")


def generate_occurrences(
    rule: Rule, anchor: date, window_start: date, window_end: date
) -> list[date]:
    """Expand a rule into scheduled dates, honouring its end date."""
    dates = GENERATORS[rule.frequency](rule, anchor, window_start, window_end)
    if rule.end_date is not None:
        dates = [d for d in dates if d <= rule.end_date]
    return dates


def next_scheduled_date(rule: Rule, occurrence_date: date) -> date:
    """Slot a postponed occurrence moves to.

    Weekly rules move seven days, biweekly fourteen, and monthly rules move
    to the next calendar month on the rule's day of month (or the
    occurrence's own day), clamped.
    """
    if rule.frequency == Frequency.WEEKLY:
        return occurrence_date + timedelta(days=7)
    if rule.frequency == Frequency.BIWEEKLY:
        return occurrence_date + timedelta(days=14)
    following = first_of_month(occurrence_date) + relativedelta(months=1)
    day = rule.dom if rule.dom is not None else occurrence_date.day
    return clamp_day(following.year, following.month, day)
