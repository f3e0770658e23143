"""Budget domain service."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from budgetsnap.database.base import Database
from budgetsnap.domain.entities import (
    DEFAULT_CATEGORY,
    EntryType,
    Frequency,
    OneTimeEntry,
    OverrideType,
    RawBudgetData,
    Rule,
    Snapshot,
    UnifiedRow,
)
from budgetsnap.domain.errors import (
    NotFoundError,
    ValidationError,
    day_of_month_out_of_range,
    day_of_week_out_of_range,
    entry_not_found,
    interval_out_of_range,
    invalid_choice,
    invalid_window,
    rule_not_found,
)
from budgetsnap.domain.recurrence import next_scheduled_date
from budgetsnap.domain.snapshot import compute_snapshot, rows_for_window
from budgetsnap.domain.windows import covering_months, month_window, next_month_start

logger = logging.getLogger(__name__)


def _entry_type(value) -> EntryType:
    try:
        return EntryType(getattr(value, "value", value))
    except ValueError:
        raise ValidationError(invalid_choice("type", value, tuple(t.value for t in EntryType)))


def _frequency(value) -> Frequency:
    try:
        return Frequency(getattr(value, "value", value))
    except ValueError:
        raise ValidationError(
            invalid_choice("frequency", value, tuple(f.value for f in Frequency))
        )


def _description(value: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError("Description must not be empty")
    return text


def _amount(value: Decimal) -> Decimal:
    if value is None:
        raise ValidationError("Amount is required")
    amount = Decimal(value)
    if amount < 0:
        raise ValidationError(f"Amount must not be negative, got {amount}")
    return amount


def _category(value: Optional[str]) -> str:
    text = (value or "").strip()
    return text or DEFAULT_CATEGORY


class BudgetService:
    """Service for managing budget entries, rules and occurrence overrides."""

    def __init__(self, db: Database, owner_id: str = "default"):
        """Initialize budget service.

        Args:
            db: Database instance
            owner_id: Owner every read and write is scoped to
        """
        self.db = db
        self.owner_id = owner_id

    # One-time entries
    def upsert_entry(
        self,
        description: str,
        amount: Decimal,
        type: EntryType | str,
        due_date: date,
        category: Optional[str] = None,
        entry_id: Optional[str] = None,
    ) -> str:
        """Create an entry, or update it when ``entry_id`` is given.

        Returns:
            Entry ID

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If ``entry_id`` does not exist
        """
        fields = dict(
            type=_entry_type(type),
            category=_category(category),
            description=_description(description),
            amount=_amount(amount),
            due_date=due_date,
        )
        if entry_id is None:
            return self.db.create_entry(self.owner_id, **fields)

        self.require_entry(entry_id)
        self.db.update_entry(self.owner_id, entry_id, **fields)
        return entry_id

    def require_entry(self, entry_id: str) -> OneTimeEntry:
        entry = self.db.get_entry(self.owner_id, entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def delete_entry(self, entry_id: str) -> None:
        self.require_entry(entry_id)
        self.db.delete_entry(self.owner_id, entry_id)

    def mark_entry_paid(self, entry_id: str, paid_on: Optional[date] = None) -> None:
        """Record payment of an entry (today when ``paid_on`` is omitted)."""
        self.require_entry(entry_id)
        self.db.set_entry_paid_on(self.owner_id, entry_id, paid_on or date.today())

    def mark_entry_unpaid(self, entry_id: str) -> None:
        self.require_entry(entry_id)
        self.db.set_entry_paid_on(self.owner_id, entry_id, None)

    def postpone_entry(self, entry_id: str, new_date: date) -> None:
        """Move a one-time entry to a new due date."""
        self.require_entry(entry_id)
        self.db.update_entry(self.owner_id, entry_id, due_date=new_date)

    def list_entries(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[OneTimeEntry]:
        return self.db.list_entries(self.owner_id, start_date=start_date, end_date=end_date)

    # Recurring rules
    def upsert_rule(
        self,
        description: str,
        amount: Decimal,
        type: EntryType | str,
        frequency: Frequency | str,
        start_anchor: date,
        category: Optional[str] = None,
        dom: Optional[int] = None,
        dow: Optional[int] = None,
        interval: int = 1,
        end_date: Optional[date] = None,
        entry_id: Optional[str] = None,
        active: bool = True,
        rule_id: Optional[str] = None,
    ) -> str:
        """Create a rule, or update it when ``rule_id`` is given.

        Returns:
            Rule ID

        Raises:
            ValidationError: If a field is invalid
            NotFoundError: If ``rule_id`` or ``entry_id`` does not exist
        """
        if dom is not None and not 1 <= dom <= 31:
            raise ValidationError(day_of_month_out_of_range(dom))
        if dow is not None and not 1 <= dow <= 7:
            raise ValidationError(day_of_week_out_of_range(dow))
        if interval is None or interval < 1:
            raise ValidationError(interval_out_of_range(interval))
        if end_date is not None and end_date < start_anchor:
            raise ValidationError(invalid_window(start_anchor, end_date))
        if entry_id is not None:
            self.require_entry(entry_id)

        fields = dict(
            type=_entry_type(type),
            category=_category(category),
            description=_description(description),
            amount=_amount(amount),
            frequency=_frequency(frequency),
            start_anchor=start_anchor,
            dom=dom,
            dow=dow,
            interval=interval,
            end_date=end_date,
            entry_id=entry_id,
            active=active,
        )
        if rule_id is None:
            return self.db.create_rule(self.owner_id, **fields)

        self.require_rule(rule_id)
        self.db.update_rule(self.owner_id, rule_id, **fields)
        return rule_id

    def require_rule(self, rule_id: str) -> Rule:
        rule = self.db.get_rule(self.owner_id, rule_id)
        if rule is None:
            raise NotFoundError(rule_not_found(rule_id))
        return rule

    def delete_rule(self, rule_id: str) -> None:
        """Delete a rule and every override attached to it."""
        self.require_rule(rule_id)
        self.db.delete_rule(self.owner_id, rule_id)

    def set_rule_active(self, rule_id: str, active: bool) -> None:
        self.require_rule(rule_id)
        self.db.update_rule(self.owner_id, rule_id, active=active)

    def list_rules(self, active_only: bool = False) -> list[Rule]:
        return self.db.list_rules(self.owner_id, active_only=active_only)

    # Occurrence overrides
    def mark_occurrence_paid(
        self, rule_id: str, occurrence_date: date, paid_on: Optional[date] = None
    ) -> str:
        """Mark one occurrence of a rule paid. Returns override ID."""
        self.require_rule(rule_id)
        return self.db.upsert_override(
            self.owner_id,
            rule_id,
            occurrence_date,
            OverrideType.PAID,
            paid_on=paid_on or date.today(),
        )

    def postpone_occurrence(
        self, rule_id: str, occurrence_date: date, new_date: Optional[date] = None
    ) -> date:
        """Postpone one occurrence of a rule.

        Without ``new_date`` the occurrence moves to the rule's next slot
        (see ``recurrence.next_scheduled_date``).

        Returns:
            The date the occurrence now falls on
        """
        rule = self.require_rule(rule_id)
        target = new_date or next_scheduled_date(rule, occurrence_date)
        logger.debug("Postponing rule %s occurrence %s to %s", rule_id, occurrence_date, target)
        self.db.upsert_override(
            self.owner_id,
            rule_id,
            occurrence_date,
            OverrideType.POSTPONED,
            new_date=target,
        )
        return target

    def skip_occurrence(self, rule_id: str, occurrence_date: date) -> str:
        """Record a skip for one occurrence. Returns override ID."""
        self.require_rule(rule_id)
        return self.db.upsert_override(
            self.owner_id, rule_id, occurrence_date, OverrideType.SKIPPED
        )

    # Reads
    def get_raw_budget_data(self, month_start: date, month_end: date) -> RawBudgetData:
        """Fetch snapshot inputs for an inclusive date range."""
        return self.db.get_raw_budget_data(self.owner_id, month_start, month_end)

    def get_snapshot(
        self, month_start: date, month_end: Optional[date] = None, today: Optional[date] = None
    ) -> Snapshot:
        """Fetch inputs and compute the snapshot for the month starting at ``month_start``.

        Raises:
            ValidationError: If ``month_end`` is before ``month_start``
        """
        window_start, window_end = month_window(month_start, month_end)
        last_day = window_end - timedelta(days=1)
        raw = self.get_raw_budget_data(window_start, last_day)
        return compute_snapshot(
            raw.entries,
            raw.rules,
            raw.overrides,
            month_start,
            month_end or last_day,
            today=today or date.today(),
        )

    def get_window_rows(self, start: date, end: date) -> list[UnifiedRow]:
        """Unpaid rows with an effective date in ``[start, end)``.

        Raises:
            ValidationError: If ``end`` is before ``start``
        """
        if end < start:
            raise ValidationError(invalid_window(start, end))
        if end == start:
            return []

        months = list(covering_months(start, end))
        raw = self.get_raw_budget_data(months[0], next_month_start(months[-1]) - timedelta(days=1))
        return rows_for_window(raw.entries, raw.rules, raw.overrides, start, end)
