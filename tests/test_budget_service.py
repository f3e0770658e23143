"""Tests for BudgetService."""

import pytest
from datetime import date
from decimal import Decimal

from budgetsnap.domain.budget import BudgetService
from budgetsnap.domain.entities import EntryType, Frequency, OverrideType, RowStatus
from budgetsnap.domain.errors import NotFoundError, ValidationError


def _add_rent(service, **kwargs):
    fields = dict(
        description="Rent",
        amount=Decimal("1200"),
        type="expense",
        frequency="monthly",
        start_anchor=date(2024, 1, 1),
        category="housing",
    )
    fields.update(kwargs)
    return service.upsert_rule(**fields)


class TestEntries:
    """Tests for one-time entry operations."""

    def test_create_defaults_category(self, budget_service):
        entry_id = budget_service.upsert_entry(
            description="  Repair ", amount=Decimal("80"), type="expense", due_date=date(2024, 4, 3)
        )
        entry = budget_service.require_entry(entry_id)
        assert entry.description == "Repair"
        assert entry.category == "other"
        assert entry.type == EntryType.EXPENSE

    def test_update_existing(self, budget_service):
        entry_id = budget_service.upsert_entry("Repair", Decimal("80"), "expense", date(2024, 4, 3))
        same_id = budget_service.upsert_entry(
            "Repair", Decimal("95"), "expense", date(2024, 4, 3), entry_id=entry_id
        )
        assert same_id == entry_id
        assert budget_service.require_entry(entry_id).amount == Decimal("95")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"description": "   "},
            {"amount": Decimal("-1")},
            {"type": "transfer"},
        ],
    )
    def test_validation(self, budget_service, kwargs):
        fields = dict(description="Repair", amount=Decimal("1"), type="expense", due_date=date(2024, 4, 3))
        fields.update(kwargs)
        with pytest.raises(ValidationError):
            budget_service.upsert_entry(**fields)

    def test_missing_entry(self, budget_service):
        with pytest.raises(NotFoundError, match="Entry nope not found"):
            budget_service.mark_entry_paid("nope")

    def test_pay_unpay_and_postpone(self, budget_service):
        entry_id = budget_service.upsert_entry("Tax", Decimal("300"), "expense", date(2024, 4, 3))
        budget_service.mark_entry_paid(entry_id, date(2024, 4, 2))
        assert budget_service.require_entry(entry_id).paid_on == date(2024, 4, 2)
        budget_service.mark_entry_unpaid(entry_id)
        assert budget_service.require_entry(entry_id).paid_on is None
        budget_service.postpone_entry(entry_id, date(2024, 5, 3))
        assert budget_service.require_entry(entry_id).due_date == date(2024, 5, 3)

    def test_entries_are_owner_scoped(self, budget_service, temp_db):
        entry_id = budget_service.upsert_entry("Tax", Decimal("300"), "expense", date(2024, 4, 3))
        other = BudgetService(temp_db, owner_id="someone-else")
        assert other.list_entries() == []
        with pytest.raises(NotFoundError):
            other.delete_entry(entry_id)


class TestRules:
    """Tests for recurring rule operations."""

    def test_create(self, budget_service):
        rule = budget_service.require_rule(_add_rent(budget_service, dom=31))
        assert rule.frequency == Frequency.MONTHLY
        assert rule.dom == 31
        assert rule.active is True

    @pytest.mark.parametrize(
        "kwargs,message",
        [
            ({"dom": 0}, "Day of month"),
            ({"dow": 8}, "Day of week"),
            ({"interval": 0}, "Interval"),
            ({"frequency": "yearly"}, "Invalid frequency"),
            ({"end_date": date(2023, 12, 31)}, "before window start"),
        ],
    )
    def test_validation(self, budget_service, kwargs, message):
        with pytest.raises(ValidationError, match=message):
            _add_rent(budget_service, **kwargs)

    def test_linked_entry_must_exist(self, budget_service):
        with pytest.raises(NotFoundError):
            _add_rent(budget_service, entry_id="missing")

    def test_deactivate(self, budget_service):
        rule_id = _add_rent(budget_service)
        budget_service.set_rule_active(rule_id, False)
        assert budget_service.list_rules(active_only=True) == []
        assert len(budget_service.list_rules()) == 1

    def test_delete(self, budget_service):
        rule_id = _add_rent(budget_service)
        budget_service.delete_rule(rule_id)
        with pytest.raises(NotFoundError):
            budget_service.require_rule(rule_id)


class TestOccurrences:
    """Tests for per-occurrence overrides."""

    def test_pay_occurrence(self, budget_service):
        rule_id = _add_rent(budget_service)
        override_id = budget_service.mark_occurrence_paid(rule_id, date(2024, 4, 1), date(2024, 3, 30))
        snapshot = budget_service.get_snapshot(date(2024, 4, 1))
        (row,) = snapshot.rows
        assert row.is_paid is True
        assert row.status == RowStatus.PAID
        assert row.occurrence_id == override_id

    def test_postpone_defaults_to_next_slot(self, budget_service):
        rule_id = _add_rent(budget_service, start_anchor=date(2024, 1, 31))
        moved_to = budget_service.postpone_occurrence(rule_id, date(2024, 1, 31))
        assert moved_to == date(2024, 2, 29)

    def test_postponed_occurrence_enters_next_month(self, budget_service):
        rule_id = _add_rent(budget_service, start_anchor=date(2024, 3, 30))
        budget_service.postpone_occurrence(rule_id, date(2024, 3, 30), date(2024, 4, 2))

        march = budget_service.get_snapshot(date(2024, 3, 1))
        april = budget_service.get_snapshot(date(2024, 4, 1))
        assert march.rows == ()
        assert [(r.effective_date, r.occurrence_date) for r in april.rows] == [
            (date(2024, 4, 2), date(2024, 3, 30)),
            (date(2024, 4, 30), date(2024, 4, 30)),
        ]

    def test_skip_overwrites_previous_override(self, budget_service, temp_db):
        rule_id = _add_rent(budget_service)
        budget_service.mark_occurrence_paid(rule_id, date(2024, 4, 1))
        budget_service.skip_occurrence(rule_id, date(2024, 4, 1))
        overrides = temp_db.list_overrides("tester", rule_id=rule_id)
        assert [o.override_type for o in overrides] == [OverrideType.SKIPPED]

    def test_unknown_rule(self, budget_service):
        with pytest.raises(NotFoundError, match="Rule nope not found"):
            budget_service.skip_occurrence("nope", date(2024, 4, 1))


class TestReads:
    """Tests for snapshot and window reads."""

    def test_snapshot_totals(self, budget_service):
        budget_service.upsert_entry("Salary", Decimal("1000"), "income", date(2024, 4, 25))
        _add_rent(budget_service, amount=Decimal("400"))
        snapshot = budget_service.get_snapshot(date(2024, 4, 1), date(2024, 4, 30))
        assert snapshot.totals.total_income == Decimal("1000")
        assert snapshot.totals.total_expenses == Decimal("400")
        assert snapshot.totals.remaining_to_pay == Decimal("400")

    def test_snapshot_uses_linked_base_entry(self, budget_service):
        base_id = budget_service.upsert_entry("Gym", Decimal("30"), "expense", date(2023, 11, 12))
        _add_rent(budget_service, entry_id=base_id, start_anchor=date(2023, 11, 12))
        (row,) = budget_service.get_snapshot(date(2024, 4, 1)).rows
        assert row.description == "Gym"
        assert row.amount == Decimal("30")
        assert row.effective_date == date(2024, 4, 12)

    def test_inverted_month_rejected(self, budget_service):
        with pytest.raises(ValidationError):
            budget_service.get_snapshot(date(2024, 4, 1), date(2024, 3, 31))

    def test_window_rows_span_month_boundary(self, budget_service):
        paid = budget_service.upsert_entry("Paid", Decimal("5"), "expense", date(2024, 4, 30))
        budget_service.mark_entry_paid(paid, date(2024, 4, 29))
        budget_service.upsert_entry("Due", Decimal("5"), "expense", date(2024, 4, 30))
        _add_rent(budget_service)

        rows = budget_service.get_window_rows(date(2024, 4, 29), date(2024, 5, 6))
        assert [(r.effective_date, r.description) for r in rows] == [
            (date(2024, 4, 30), "Due"),
            (date(2024, 5, 1), "Rent"),
        ]

    def test_empty_window(self, budget_service):
        assert budget_service.get_window_rows(date(2024, 4, 1), date(2024, 4, 1)) == []

    def test_inverted_window_rejected(self, budget_service):
        with pytest.raises(ValidationError):
            budget_service.get_window_rows(date(2024, 4, 2), date(2024, 4, 1))
