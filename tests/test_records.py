"""Tests for converting loosely-typed records into entities."""

import logging
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from budgetsnap.domain.entities import EntryType, Frequency, OverrideType
from budgetsnap.domain.records import (
    coerce_records,
    entry_from_record,
    override_from_record,
    rule_from_record,
)
from budgetsnap.domain.snapshot import compute_snapshot


class TestEntryFromRecord:
    """Tests for entry_from_record."""

    def test_full_record(self):
        entry = entry_from_record(
            {
                "id": 7,
                "type": "Income",
                "category_name": "salary",
                "description": "Pay",
                "amount": "1500.25",
                "due_date": "2024-04-01",
                "paid_on": "2024-04-01T09:30:00Z",
                "created_at": "2024-03-01T10:00:00+00:00",
            }
        )
        assert entry.id == "7"
        assert entry.type == EntryType.INCOME
        assert entry.category == "salary"
        assert entry.amount == Decimal("1500.25")
        assert entry.due_date == date(2024, 4, 1)
        assert entry.paid_on == date(2024, 4, 1)
        assert entry.created_at == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)

    def test_defaults_for_missing_fields(self):
        entry = entry_from_record({"id": "e"})
        assert entry.type == EntryType.EXPENSE
        assert entry.category == "other"
        assert entry.amount == Decimal("0")
        assert entry.due_date is None

    def test_malformed_date_becomes_none(self):
        entry = entry_from_record({"id": "e", "due_date": "not a date"})
        assert entry is not None
        assert entry.due_date is None

    def test_unknown_type_drops_record(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert entry_from_record({"id": "e", "type": "transfer"}) is None
        assert "transfer" in caplog.text

    def test_missing_id_drops_record(self):
        assert entry_from_record({"amount": "5"}) is None

    def test_bad_amount_drops_record(self):
        assert entry_from_record({"id": "e", "amount": "lots"}) is None

    @pytest.mark.parametrize("amount", ["NaN", "Infinity", "-Infinity", "sNaN"])
    def test_non_finite_amount_drops_record(self, amount, caplog):
        record = {"id": "e", "amount": amount, "due_date": "2024-04-05"}
        with caplog.at_level(logging.WARNING):
            assert entry_from_record(record) is None
        assert "invalid amount" in caplog.text


class TestRuleFromRecord:
    """Tests for rule_from_record."""

    def test_defaults(self):
        rule = rule_from_record({"id": "r", "start_anchor": "2024-01-15"})
        assert rule.frequency == Frequency.MONTHLY
        assert rule.interval == 1
        assert rule.active is True
        assert rule.entry_id is None
        assert rule.start_anchor == date(2024, 1, 15)

    def test_string_flags_and_ints(self):
        rule = rule_from_record(
            {
                "id": "r",
                "frequency": "WEEKLY",
                "interval": "3",
                "dom": "31",
                "active": "false",
                "entry_id": 12,
            }
        )
        assert rule.frequency == Frequency.WEEKLY
        assert rule.interval == 3
        assert rule.dom == 31
        assert rule.active is False
        assert rule.entry_id == "12"

    def test_blank_active_means_active(self):
        rule = rule_from_record({"id": "r", "start_anchor": "2024-04-01", "active": "  "})
        assert rule.active is True

    def test_unknown_frequency_drops_record(self):
        assert rule_from_record({"id": "r", "frequency": "yearly"}) is None

    def test_non_numeric_interval_drops_record(self):
        assert rule_from_record({"id": "r", "interval": "often"}) is None


class TestOverrideFromRecord:
    """Tests for override_from_record."""

    def test_postponed(self):
        override = override_from_record(
            {
                "id": 3,
                "rule_id": 9,
                "occurrence_date": "2024-04-15",
                "override_type": "postponed",
                "new_date": "2024-04-20",
                "updated_at": "2024-04-01T12:00:00",
            }
        )
        assert override.id == "3"
        assert override.rule_id == "9"
        assert override.override_type == OverrideType.POSTPONED
        assert override.new_date == date(2024, 4, 20)
        assert override.updated_at == datetime(2024, 4, 1, 12)

    def test_missing_override_type_drops_record(self):
        assert override_from_record({"id": 1, "rule_id": "r"}) is None

    def test_unparseable_timestamp_becomes_none(self):
        override = override_from_record(
            {"id": 1, "rule_id": "r", "override_type": "paid", "updated_at": "yesterday-ish"}
        )
        assert override.updated_at is None


class TestCoerceRecords:
    """Tests for coerce_records."""

    def test_drops_unusable_records(self):
        records = [
            {"id": "a", "due_date": "2024-04-01"},
            {"id": "b", "type": "gift"},
            {"description": "no id"},
        ]
        entries = coerce_records(records, entry_from_record)
        assert [e.id for e in entries] == ["a"]

    def test_non_finite_amount_keeps_totals_finite(self):
        records = [
            {"id": "bad", "amount": "NaN", "due_date": "2024-04-05"},
            {"id": "good", "amount": "10", "due_date": "2024-04-06"},
        ]
        entries = coerce_records(records, entry_from_record)
        totals = compute_snapshot(entries, [], [], "2024-04-01", "2024-04-30").totals
        assert totals.total_expenses == Decimal("10")
        assert totals.remaining_to_pay == Decimal("10")

    def test_none_is_empty(self):
        assert coerce_records(None, rule_from_record) == []
