"""Snapshot and upcoming-payments commands."""

import json

import click

from budgetsnap.cli.date_filters import resolve_cli_month, resolve_cli_window
from budgetsnap.cli.error_handling import handle_domain_error
from budgetsnap.cli.service import get_service
from budgetsnap.domain.entities import RowKind, UnifiedRow
from budgetsnap.domain.errors import DomainError
from budgetsnap.domain.snapshot import snapshot_to_dict


def _echo_rows(rows: list[UnifiedRow], verbose: bool = False) -> None:
    width = 130 if verbose else 96
    click.echo("-" * width)
    header = (
        f"{'Date':<12} {'Kind':<10} {'Description':<28} {'Category':<14} {'Amount':>12} {'Status':<8}"
    )
    if verbose:
        header += f" {'Scheduled':<12} {'Occurrence':<40}"
    click.echo(header)
    click.echo("-" * width)

    for row in rows:
        sign = "+" if row.type.value == "income" else "-"
        line = (
            f"{str(row.effective_date):<12} {row.kind.value:<10} {row.description[:28]:<28} "
            f"{row.category[:14]:<14} {f'{sign}${abs(row.amount):,.2f}':>12} "
            f"{(row.status.value if row.status else ''):<8}"
        )
        if verbose:
            scheduled = str(row.occurrence_date) if row.kind == RowKind.RECURRING else ""
            line += f" {scheduled:<12} {(row.occurrence_id or row.id):<40}"
        click.echo(line)


@click.command("snapshot")
@click.option("--month", help="Month to show (YYYY-MM or a date inside it)")
@click.option("--this-month", is_flag=True, help="Show the current month")
@click.option("--last-month", is_flag=True, help="Show the previous month")
@click.option("--next-month", is_flag=True, help="Show the following month")
@click.option("--json", "as_json", is_flag=True, help="Print the snapshot as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Show scheduled dates and occurrence ids")
@click.pass_context
def show_snapshot(
    ctx,
    month: str | None,
    this_month: bool,
    last_month: bool,
    next_month: bool,
    as_json: bool,
    verbose: bool,
):
    """Show every entry and rule occurrence in a month, with totals.

    Examples:
        budgetsnap snapshot
        budgetsnap snapshot --month 2024-02
        budgetsnap snapshot --next-month --json
    """
    service = get_service(ctx)
    month_start, month_end = resolve_cli_month(
        ctx,
        month=month,
        period_flags={
            "this-month": this_month,
            "last-month": last_month,
            "next-month": next_month,
        },
    )

    try:
        snapshot = service.get_snapshot(month_start, month_end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(json.dumps(snapshot_to_dict(snapshot), indent=2))
        return

    click.echo(f"\nBudget {month_start} to {month_end}")
    if snapshot.rows:
        _echo_rows(list(snapshot.rows), verbose=verbose)
    else:
        click.echo("No entries or occurrences in this month.")

    totals = snapshot.totals
    click.echo("=" * 40)
    click.echo(f"{'Income:':<20} ${totals.total_income:>14,.2f}")
    click.echo(f"{'Expenses:':<20} ${totals.total_expenses:>14,.2f}")
    click.echo(f"{'Remaining to pay:':<20} ${totals.remaining_to_pay:>14,.2f}")


@click.command("upcoming")
@click.option("--start-date", help="Window start (inclusive)")
@click.option("--end-date", help="Window end (exclusive)")
@click.option("--this-week", is_flag=True, help="Monday to Monday of the current week")
@click.option("--next-week", is_flag=True, help="Monday to Monday of the following week")
@click.option("--verbose", "-v", is_flag=True, help="Show scheduled dates and occurrence ids")
@click.pass_context
def show_upcoming(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_week: bool,
    next_week: bool,
    verbose: bool,
):
    """Show unpaid items due in a window (defaults to this week)."""
    service = get_service(ctx)
    start, end = resolve_cli_window(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={"this-week": this_week, "next-week": next_week},
    )

    try:
        rows = service.get_window_rows(start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not rows:
        click.echo(f"Nothing unpaid between {start} and {end}.")
        return

    click.echo(f"\nUnpaid between {start} and {end} (exclusive): {len(rows)} item(s)")
    _echo_rows(rows, verbose=verbose)


def register_commands(cli):
    """Register snapshot commands with main CLI."""
    cli.add_command(show_snapshot)
    cli.add_command(show_upcoming)
