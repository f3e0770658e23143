"""CLI helper for building the budget service from the click context."""

import click

from budgetsnap.domain.budget import BudgetService


def get_service(ctx: click.Context) -> BudgetService:
    """Return a BudgetService bound to the context's database and owner."""
    return BudgetService(ctx.obj["db"], owner_id=ctx.obj["owner"])
