"""Domain model entities for budgetsnap.

These are pure data classes describing budget records and the derived
snapshot rows, independent of the database schema. The snapshot engine
only ever sees these types; store rows and loose records are converted
at the edges (see ``database.mappers`` and ``domain.records``).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class EntryType(str, Enum):
    """Direction of money for an entry or rule."""

    INCOME = "income"
    EXPENSE = "expense"


class Frequency(str, Enum):
    """Recurrence frequency of a rule."""

    MONTHLY = "monthly"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"


class OverrideType(str, Enum):
    """Effect an override has on a single occurrence."""

    PAID = "paid"
    POSTPONED = "postponed"
    SKIPPED = "skipped"


class RowKind(str, Enum):
    """Origin of a unified row."""

    ONE_TIME = "one_time"
    RECURRING = "recurring"


class RowStatus(str, Enum):
    """Display status stamped on snapshot rows."""

    PAID = "Paid"
    PENDING = "Pending"


DEFAULT_CATEGORY = "other"

KNOWN_CATEGORIES = (
    "bill",
    "gas",
    "groceries",
    "loan",
    "other",
    "subscription",
    "business_income",
)


@dataclass(frozen=True)
class OneTimeEntry:
    """A single, non-recurring income or expense."""

    id: str
    type: EntryType
    category: str
    description: str
    amount: Decimal
    due_date: Optional[date]
    paid_on: Optional[date] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Rule:
    """A recurring billing rule.

    ``dom`` is the day of month for monthly rules (falls back to the anchor's
    day). ``dow`` is stored for display only; weekly rules step from the
    anchor date. ``entry_id`` optionally links a base entry whose fields take
    precedence over the rule's own.
    """

    id: str
    type: EntryType
    category: str
    description: str
    amount: Decimal
    frequency: Frequency
    start_anchor: Optional[date]
    dom: Optional[int] = None
    dow: Optional[int] = None
    interval: int = 1
    active: bool = True
    end_date: Optional[date] = None
    entry_id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Override:
    """Alters one occurrence of a rule, keyed by its unmodified scheduled date."""

    id: str
    rule_id: str
    occurrence_date: Optional[date]
    override_type: OverrideType
    paid_on: Optional[date] = None
    new_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class UnifiedRow:
    """One line of a snapshot: a one-time entry or a recurring occurrence.

    ``effective_date``, ``due_date`` and ``date`` carry the same post-override
    date. For recurring rows ``occurrence_date`` is the scheduled date the
    override store is keyed on, and ``occurrence_id`` is unique per instance.
    """

    id: str
    kind: RowKind
    type: EntryType
    category: str
    description: str
    amount: Decimal
    effective_date: date
    due_date: date
    date: date
    is_paid: bool
    rule_id: Optional[str] = None
    occurrence_id: Optional[str] = None
    occurrence_date: Optional[date] = None
    override_type: Optional[OverrideType] = None
    status: Optional[RowStatus] = None


@dataclass(frozen=True)
class Totals:
    """Aggregated sums over snapshot rows."""

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    remaining_to_pay: Decimal = Decimal("0")


@dataclass(frozen=True)
class Snapshot:
    """Computed rows and totals for a month window."""

    month_start: date
    month_end: date
    rows: tuple[UnifiedRow, ...] = ()
    totals: Totals = field(default_factory=Totals)


@dataclass(frozen=True)
class RawBudgetData:
    """The three input collections for one owner, as fetched from the store."""

    entries: tuple[OneTimeEntry, ...] = ()
    rules: tuple[Rule, ...] = ()
    overrides: tuple[Override, ...] = ()
