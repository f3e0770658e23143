"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from budgetsnap.database.models import (
    BudgetEntry as ORMBudgetEntry,
    BudgetRule as ORMBudgetRule,
    BudgetRuleOverride as ORMBudgetRuleOverride,
)
from budgetsnap.database.mappers import (
    entry_to_domain,
    rule_to_domain,
    override_to_domain,
)
from budgetsnap.domain.entities import (
    EntryType,
    Frequency,
    OneTimeEntry,
    Override,
    OverrideType,
    Rule,
)


class TestEntryMapper:
    """Tests for OneTimeEntry mapper."""

    def test_entry_to_domain(self):
        """Test converting ORM BudgetEntry to domain OneTimeEntry."""
        orm_entry = ORMBudgetEntry(
            id="e1",
            owner_id="alice",
            type="income",
            category="salary",
            description=None,
            amount=Decimal("2500.00"),
            due_date=date(2024, 4, 25),
            paid_on=None,
            created_at=datetime.now(UTC),
        )
        entry = entry_to_domain(orm_entry)

        assert isinstance(entry, OneTimeEntry)
        assert entry.id == "e1"
        assert entry.type == EntryType.INCOME
        assert entry.description == ""
        assert entry.amount == Decimal("2500.00")
        assert entry.created_at == orm_entry.created_at


class TestRuleMapper:
    """Tests for Rule mapper."""

    def test_rule_to_domain(self):
        """Test converting ORM BudgetRule to domain Rule."""
        orm_rule = ORMBudgetRule(
            id="r1",
            owner_id="alice",
            type="expense",
            category="housing",
            description="Rent",
            amount=Decimal("1200.00"),
            frequency="biweekly",
            start_anchor=date(2024, 1, 5),
            interval=None,
            active=1,
            entry_id="e1",
        )
        rule = rule_to_domain(orm_rule)

        assert isinstance(rule, Rule)
        assert rule.frequency == Frequency.BIWEEKLY
        assert rule.interval == 1
        assert rule.active is True
        assert rule.entry_id == "e1"
        assert rule.dom is None


class TestOverrideMapper:
    """Tests for Override mapper."""

    def test_override_to_domain(self):
        """Test converting ORM BudgetRuleOverride to domain Override."""
        stamp = datetime(2024, 4, 2, 8, 0, tzinfo=UTC)
        orm_override = ORMBudgetRuleOverride(
            id="o1",
            owner_id="alice",
            rule_id="r1",
            occurrence_date=date(2024, 4, 15),
            override_type="postponed",
            new_date=date(2024, 4, 22),
            created_at=stamp,
            updated_at=stamp,
        )
        override = override_to_domain(orm_override)

        assert isinstance(override, Override)
        assert override.override_type == OverrideType.POSTPONED
        assert override.new_date == date(2024, 4, 22)
        assert override.paid_on is None
        assert override.updated_at == stamp
