"""Domain layer for budgetsnap application.

The snapshot engine is re-exported here. ``BudgetService`` lives in
``budgetsnap.domain.budget`` because it depends on the database layer.
"""

from budgetsnap.domain.overrides import resolve_override
from budgetsnap.domain.recurrence import generate_monthly, generate_weekly
from budgetsnap.domain.snapshot import (
    build_one_time_rows,
    build_recurring_rows,
    compute_snapshot,
    compute_totals,
    rows_for_window,
    unify_rows,
)

__all__ = [
    "resolve_override",
    "generate_monthly",
    "generate_weekly",
    "build_one_time_rows",
    "build_recurring_rows",
    "compute_snapshot",
    "compute_totals",
    "rows_for_window",
    "unify_rows",
]
