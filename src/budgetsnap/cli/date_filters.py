"""CLI helpers for month and window resolution."""

from datetime import date

import click

from budgetsnap.utils.date_parser import (
    get_month_range,
    get_week_range,
    parse_date,
    parse_month,
)


def _single_period(ctx, period_flags: dict[str, bool], names: str) -> str | None:
    chosen = [period for period, is_set in period_flags.items() if is_set]
    if len(chosen) > 1:
        click.echo(
            f"Error: Only one period option ({names}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)
    return chosen[0] if chosen else None


def resolve_cli_month(
    ctx,
    *,
    month: str | None,
    period_flags: dict[str, bool],
) -> tuple[date, date]:
    """Resolve the month to snapshot from --month or a period flag.

    Defaults to the current month.

    Returns:
        Tuple of (first_day, last_day)
    """
    period = _single_period(ctx, period_flags, "--this-month, --last-month, --next-month")

    if period is not None and month:
        click.echo("Error: Period options cannot be combined with --month.", err=True)
        ctx.exit(1)

    if period is not None:
        return get_month_range(period)

    if month:
        try:
            first = parse_month(month)
        except ValueError as e:
            click.echo(f"Error: Invalid month: {e}", err=True)
            ctx.exit(1)
        last = get_month_range("this-month", today=first)[1]
        return first, last

    return get_month_range("this-month")


def resolve_cli_window(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date, date]:
    """Resolve a half-open [start, end) window from period flags or explicit dates.

    Defaults to the current week (Monday to Monday).
    """
    period = _single_period(ctx, period_flags, "--this-week, --next-week")

    if period is not None and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-week, --next-week) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period is not None:
        return get_week_range(period)

    if not start_date and not end_date:
        return get_week_range("this-week")

    if not (start_date and end_date):
        click.echo("Error: --start-date and --end-date must be given together.", err=True)
        ctx.exit(1)

    try:
        start = parse_date(start_date)
    except ValueError as e:
        click.echo(f"Error: Invalid start date: {e}", err=True)
        ctx.exit(1)

    try:
        end = parse_date(end_date)
    except ValueError as e:
        click.echo(f"Error: Invalid end date: {e}", err=True)
        ctx.exit(1)

    if end < start:
        click.echo("Error: --end-date must not be before --start-date.", err=True)
        ctx.exit(1)

    return start, end
