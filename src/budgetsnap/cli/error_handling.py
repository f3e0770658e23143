"""CLI error handling helpers."""

from datetime import date
from decimal import Decimal
from typing import NoReturn

import click

from budgetsnap.domain.errors import DomainError
from budgetsnap.utils.amount_parser import parse_amount
from budgetsnap.utils.date_parser import parse_date


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> NoReturn:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def parse_date_or_exit(ctx: click.Context, value: str, label: str = "date") -> date:
    """Parse a user-supplied date, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: str) -> Decimal:
    """Parse a user-supplied amount, or exit with a CLI error."""
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)
