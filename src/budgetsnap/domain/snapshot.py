"""Recurring budget snapshot engine.

Expands recurring rules into dated occurrences, merges them with one-time
entries, applies per-occurrence overrides, de-duplicates, orders the rows
and aggregates totals. Everything here is a pure function of its inputs.
"""

import logging
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

from budgetsnap.domain.entities import (
    EntryType,
    OneTimeEntry,
    Override,
    OverrideType,
    RowKind,
    RowStatus,
    Rule,
    Snapshot,
    Totals,
    UnifiedRow,
)
from budgetsnap.domain.errors import ValidationError, invalid_window
from budgetsnap.domain.overrides import resolve_override
from budgetsnap.domain.recurrence import generate_occurrences
from budgetsnap.domain.windows import (
    as_calendar_date,
    covering_months,
    in_window,
    iso,
    month_window,
    next_month_start,
    parse_window_bound,
)

logger = logging.getLogger(__name__)


def build_one_time_rows(
    entries: Iterable[OneTimeEntry], window_start: date, window_end: date
) -> list[UnifiedRow]:
    """Rows for one-time entries due inside ``[window_start, window_end)``."""
    rows = []
    for entry in entries:
        due = as_calendar_date(entry.due_date)
        if due is None:
            logger.debug("Skipping entry %s without a usable due date", entry.id)
            continue
        if not in_window(due, window_start, window_end):
            continue
        rows.append(
            UnifiedRow(
                id=str(entry.id),
                kind=RowKind.ONE_TIME,
                type=entry.type,
                category=entry.category,
                description=entry.description,
                amount=entry.amount,
                effective_date=due,
                due_date=due,
                date=due,
                is_paid=as_calendar_date(entry.paid_on) is not None,
            )
        )
    return rows


def _reentry_dates(
    rule: Rule,
    anchor: date,
    overrides: Iterable[Override],
    window_start: date,
    window_end: date,
) -> list[date]:
    """Scheduled dates outside the window that a postponement moves inside it.

    Only dates the rule actually schedules qualify.
    """
    dates = []
    for override in overrides:
        if override.override_type != OverrideType.POSTPONED:
            continue
        if str(override.rule_id) != str(rule.id):
            continue
        scheduled = as_calendar_date(override.occurrence_date)
        new_date = as_calendar_date(override.new_date)
        if scheduled is None or new_date is None:
            continue
        if in_window(scheduled, window_start, window_end):
            continue
        if not in_window(new_date, window_start, window_end):
            continue
        if generate_occurrences(rule, anchor, scheduled, scheduled + timedelta(days=1)):
            dates.append(scheduled)
    return dates


def build_recurring_rows(
    entries: Iterable[OneTimeEntry],
    rules: Iterable[Rule],
    overrides: Iterable[Override],
    window_start: date,
    window_end: date,
) -> list[UnifiedRow]:
    """Rows for every occurrence of every active rule inside the window.

    Window membership is checked on the post-override date, so postponements
    can move an occurrence into or out of the window. A rule's linked base
    entry, when present, supplies amount, type, category and description.
    """
    entry_by_id = {str(e.id): e for e in entries}
    overrides = list(overrides)
    rows = []

    for rule in rules:
        if not rule.active:
            continue

        rule_id = str(rule.id)
        base = entry_by_id.get(str(rule.entry_id)) if rule.entry_id is not None else None
        anchor = as_calendar_date(rule.start_anchor)
        if anchor is None and base is not None:
            anchor = as_calendar_date(base.due_date)
        if anchor is None:
            logger.debug("Skipping rule %s without an anchor date", rule_id)
            continue

        source = base if base is not None else rule
        candidates = set(generate_occurrences(rule, anchor, window_start, window_end))
        candidates.update(_reentry_dates(rule, anchor, overrides, window_start, window_end))
        for scheduled in sorted(candidates):
            resolved = resolve_override(scheduled, rule_id, overrides)
            effective = resolved.effective_date
            if effective is None or not in_window(effective, window_start, window_end):
                continue
            rows.append(
                UnifiedRow(
                    id=rule_id,
                    kind=RowKind.RECURRING,
                    type=source.type,
                    category=source.category,
                    description=source.description,
                    amount=source.amount,
                    effective_date=effective,
                    due_date=effective,
                    date=effective,
                    is_paid=resolved.is_paid,
                    rule_id=rule_id,
                    occurrence_id=resolved.occurrence_id or f"{rule_id}:{iso(effective)}",
                    occurrence_date=scheduled,
                    override_type=resolved.override_type,
                )
            )
    return rows


def dedup_key(row: UnifiedRow) -> str:
    if row.kind == RowKind.RECURRING:
        return f"rec|{row.rule_id}|{iso(row.effective_date)}"
    return f"one|{row.id}|{iso(row.effective_date)}"


def sort_key(row: UnifiedRow) -> tuple[date, str, str]:
    return (row.effective_date, row.occurrence_id or "", row.id)


def unify_rows(
    entries: Iterable[OneTimeEntry],
    rules: Iterable[Rule],
    overrides: Iterable[Override],
    window_start: date,
    window_end: date,
) -> list[UnifiedRow]:
    """Merge one-time and recurring rows, drop duplicates, and order them.

    The first row seen for a dedup key wins. Ordering is effective date,
    then occurrence id, then row id.
    """
    entries = list(entries or ())
    combined = build_one_time_rows(entries, window_start, window_end) + build_recurring_rows(
        entries, rules or (), overrides or (), window_start, window_end
    )

    seen: set[str] = set()
    deduped = []
    for row in combined:
        key = dedup_key(row)
        if key in seen:
            logger.debug("Dropping duplicate row %s", key)
            continue
        seen.add(key)
        deduped.append(row)

    return sorted(deduped, key=sort_key)


def derive_status(row: UnifiedRow) -> RowStatus:
    """Paid rows are Paid; others keep an existing status or become Pending."""
    if row.is_paid:
        return RowStatus.PAID
    return row.status or RowStatus.PENDING


def compute_totals(rows: Iterable[UnifiedRow]) -> Totals:
    """Sum income, expenses and unpaid expenses.

    Expense amounts count by absolute value regardless of their sign.
    """
    total_income = Decimal("0")
    total_expenses = Decimal("0")
    remaining_to_pay = Decimal("0")

    for row in rows:
        amount = Decimal(row.amount or 0)
        if row.type == EntryType.INCOME:
            total_income += amount
        else:
            total_expenses += abs(amount)
            if not row.is_paid:
                remaining_to_pay += abs(amount)

    return Totals(
        total_income=total_income,
        total_expenses=total_expenses,
        remaining_to_pay=remaining_to_pay,
    )


def compute_snapshot(
    entries: Optional[Sequence[OneTimeEntry]],
    rules: Optional[Sequence[Rule]],
    overrides: Optional[Sequence[Override]],
    month_start: Any,
    month_end: Any,
    today: Any = None,
) -> Snapshot:
    """Compute the budget snapshot for a month.

    The window is ``[month_start, start of the following month)``. ``today``
    is accepted so callers can memoize on the full argument tuple; status
    derivation does not depend on it.

    Args:
        entries: One-time entries (None means no entries)
        rules: Recurring rules
        overrides: Per-occurrence overrides
        month_start: First day of the window (date or ISO string)
        month_end: Last day of the requested range (date or ISO string)
        today: Caller's local date, unused by the computation

    Returns:
        Snapshot with ordered, status-stamped rows and totals

    Raises:
        ValidationError: If a window bound is unparseable or inverted
    """
    start = parse_window_bound(month_start, "month_start")
    end = parse_window_bound(month_end, "month_end")
    window_start, window_end = month_window(start, end)
    logger.debug("Computing snapshot for [%s, %s)", window_start, window_end)

    rows = unify_rows(entries or (), rules or (), overrides or (), window_start, window_end)
    stamped = tuple(replace(row, status=derive_status(row)) for row in rows)
    return Snapshot(
        month_start=start,
        month_end=end,
        rows=stamped,
        totals=compute_totals(stamped),
    )


def rows_for_window(
    entries: Optional[Sequence[OneTimeEntry]],
    rules: Optional[Sequence[Rule]],
    overrides: Optional[Sequence[Override]],
    start: Any,
    end: Any,
) -> list[UnifiedRow]:
    """Unpaid rows whose effective date falls in ``[start, end)``.

    One snapshot is computed per month overlapping the window and the
    results are filtered, so windows spanning a month boundary see both
    months.

    Raises:
        ValidationError: If a bound is unparseable or ``end`` precedes ``start``
    """
    window_start = parse_window_bound(start, "start")
    window_end = parse_window_bound(end, "end")
    if window_end < window_start:
        raise ValidationError(invalid_window(window_start, window_end))

    seen: set[str] = set()
    rows = []
    for month_start in covering_months(window_start, window_end):
        month_end = next_month_start(month_start) - timedelta(days=1)
        snapshot = compute_snapshot(entries, rules, overrides, month_start, month_end)
        for row in snapshot.rows:
            if row.status == RowStatus.PAID:
                continue
            if not in_window(row.effective_date, window_start, window_end):
                continue
            key = dedup_key(row)
            if key in seen:
                continue
            seen.add(key)
            rows.append(row)
    return sorted(rows, key=sort_key)


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    """JSON-ready representation: ISO dates, string amounts and enum values."""

    def _row(row: UnifiedRow) -> dict[str, Any]:
        return {
            "id": row.id,
            "kind": row.kind.value,
            "rule_id": row.rule_id,
            "occurrence_id": row.occurrence_id,
            "occurrence_date": iso(row.occurrence_date) if row.occurrence_date else None,
            "type": row.type.value,
            "category": row.category,
            "description": row.description,
            "amount": str(row.amount),
            "effective_date": iso(row.effective_date),
            "due_date": iso(row.due_date),
            "date": iso(row.date),
            "is_paid": row.is_paid,
            "override_type": row.override_type.value if row.override_type else None,
            "status": row.status.value if row.status else None,
        }

    return {
        "month_start": iso(snapshot.month_start),
        "month_end": iso(snapshot.month_end),
        "rows": [_row(row) for row in snapshot.rows],
        "totals": {
            "total_income": str(snapshot.totals.total_income),
            "total_expenses": str(snapshot.totals.total_expenses),
            "remaining_to_pay": str(snapshot.totals.remaining_to_pay),
        },
    }
