"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from budgetsnap.domain.entities import (
    EntryType,
    Frequency,
    OneTimeEntry,
    Override,
    OverrideType,
    RawBudgetData,
    Rule,
)


class Database(ABC):
    """Abstract record store for budgetsnap.

    Every read and write is scoped to an owner id.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Entry operations
    @abstractmethod
    def create_entry(
        self,
        owner_id: str,
        type: EntryType,
        category: str,
        description: str,
        amount: Decimal,
        due_date: date,
    ) -> str:
        """Create a one-time entry. Returns entry ID."""
        pass

    @abstractmethod
    def update_entry(
        self,
        owner_id: str,
        entry_id: str,
        *,
        type: Optional[EntryType] = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        due_date: Optional[date] = None,
    ) -> None:
        """Update the given fields of an entry."""
        pass

    @abstractmethod
    def set_entry_paid_on(self, owner_id: str, entry_id: str, paid_on: Optional[date]) -> None:
        """Set or clear the paid date of an entry."""
        pass

    @abstractmethod
    def delete_entry(self, owner_id: str, entry_id: str) -> None:
        """Delete an entry."""
        pass

    @abstractmethod
    def get_entry(self, owner_id: str, entry_id: str) -> Optional[OneTimeEntry]:
        """Get entry by ID."""
        pass

    @abstractmethod
    def list_entries(
        self,
        owner_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        ids: Optional[Sequence[str]] = None,
    ) -> list[OneTimeEntry]:
        """List entries, optionally filtered by inclusive due date range or ids."""
        pass

    # Rule operations
    @abstractmethod
    def create_rule(
        self,
        owner_id: str,
        type: EntryType,
        category: str,
        description: str,
        amount: Decimal,
        frequency: Frequency,
        start_anchor: date,
        dom: Optional[int] = None,
        dow: Optional[int] = None,
        interval: int = 1,
        end_date: Optional[date] = None,
        entry_id: Optional[str] = None,
        active: bool = True,
    ) -> str:
        """Create a recurring rule. Returns rule ID."""
        pass

    @abstractmethod
    def update_rule(self, owner_id: str, rule_id: str, **fields) -> None:
        """Update the given fields of a rule."""
        pass

    @abstractmethod
    def delete_rule(self, owner_id: str, rule_id: str) -> None:
        """Delete a rule together with its overrides."""
        pass

    @abstractmethod
    def get_rule(self, owner_id: str, rule_id: str) -> Optional[Rule]:
        """Get rule by ID."""
        pass

    @abstractmethod
    def list_rules(self, owner_id: str, active_only: bool = False) -> list[Rule]:
        """List rules, optionally only active ones."""
        pass

    # Override operations
    @abstractmethod
    def upsert_override(
        self,
        owner_id: str,
        rule_id: str,
        occurrence_date: date,
        override_type: OverrideType,
        paid_on: Optional[date] = None,
        new_date: Optional[date] = None,
    ) -> str:
        """Insert or replace the override for (owner, rule, occurrence_date).

        Returns override ID.
        """
        pass

    @abstractmethod
    def list_overrides(
        self,
        owner_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        rule_id: Optional[str] = None,
    ) -> list[Override]:
        """List overrides whose occurrence_date or new_date is in the inclusive range."""
        pass

    def get_raw_budget_data(
        self, owner_id: str, month_start: date, month_end: date
    ) -> RawBudgetData:
        """Fetch the snapshot inputs for one owner and an inclusive date range.

        Entries due in the range, all active rules, overrides touching the
        range, and any base entries linked from those rules.
        """
        entries = self.list_entries(owner_id, start_date=month_start, end_date=month_end)
        rules = self.list_rules(owner_id, active_only=True)
        overrides = self.list_overrides(owner_id, start_date=month_start, end_date=month_end)

        known = {e.id for e in entries}
        linked = [r.entry_id for r in rules if r.entry_id and r.entry_id not in known]
        if linked:
            entries = entries + self.list_entries(owner_id, ids=linked)

        return RawBudgetData(
            entries=tuple(entries), rules=tuple(rules), overrides=tuple(overrides)
        )
