"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so the engine never sees ORM
objects or raw column strings.
"""

from budgetsnap.domain import entities as domain
from budgetsnap.database.models import (
    BudgetEntry as ORMBudgetEntry,
    BudgetRule as ORMBudgetRule,
    BudgetRuleOverride as ORMBudgetRuleOverride,
)


def entry_to_domain(orm_entry: ORMBudgetEntry) -> domain.OneTimeEntry:
    """Convert SQLAlchemy BudgetEntry model to domain OneTimeEntry entity."""
    return domain.OneTimeEntry(
        id=orm_entry.id,
        type=domain.EntryType(orm_entry.type),
        category=orm_entry.category,
        description=orm_entry.description or "",
        amount=orm_entry.amount,
        due_date=orm_entry.due_date,
        paid_on=orm_entry.paid_on,
        created_at=orm_entry.created_at,
    )


def rule_to_domain(orm_rule: ORMBudgetRule) -> domain.Rule:
    """Convert SQLAlchemy BudgetRule model to domain Rule entity."""
    return domain.Rule(
        id=orm_rule.id,
        type=domain.EntryType(orm_rule.type),
        category=orm_rule.category,
        description=orm_rule.description or "",
        amount=orm_rule.amount,
        frequency=domain.Frequency(orm_rule.frequency),
        start_anchor=orm_rule.start_anchor,
        dom=orm_rule.dom,
        dow=orm_rule.dow,
        interval=orm_rule.interval or 1,
        active=bool(orm_rule.active),
        end_date=orm_rule.end_date,
        entry_id=orm_rule.entry_id,
        created_at=orm_rule.created_at,
    )


def override_to_domain(orm_override: ORMBudgetRuleOverride) -> domain.Override:
    """Convert SQLAlchemy BudgetRuleOverride model to domain Override entity."""
    return domain.Override(
        id=orm_override.id,
        rule_id=orm_override.rule_id,
        occurrence_date=orm_override.occurrence_date,
        override_type=domain.OverrideType(orm_override.override_type),
        paid_on=orm_override.paid_on,
        new_date=orm_override.new_date,
        created_at=orm_override.created_at,
        updated_at=orm_override.updated_at,
    )
