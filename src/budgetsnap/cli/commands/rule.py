"""Recurring rule commands."""

import click

from budgetsnap.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
)
from budgetsnap.cli.service import get_service
from budgetsnap.domain.entities import DEFAULT_CATEGORY, KNOWN_CATEGORIES, EntryType, Frequency
from budgetsnap.domain.errors import DomainError

TYPE_CHOICE = click.Choice([t.value for t in EntryType], case_sensitive=False)
CATEGORY_HELP = f"Category, e.g. {', '.join(KNOWN_CATEGORIES)}"
FREQUENCY_CHOICE = click.Choice([f.value for f in Frequency], case_sensitive=False)


@click.group()
def rule_group():
    """Manage recurring rules."""
    pass


@rule_group.command("add")
@click.option("--description", required=True, help="What the rule bills for")
@click.option("--amount", required=True, help="Amount per occurrence")
@click.option("--type", "entry_type", type=TYPE_CHOICE, default="expense", show_default=True)
@click.option("--category", default=DEFAULT_CATEGORY, show_default=True, help=CATEGORY_HELP)
@click.option("--frequency", type=FREQUENCY_CHOICE, default="monthly", show_default=True)
@click.option("--start", "start_anchor", required=True, help="Anchor date the schedule counts from")
@click.option("--dom", type=int, help="Day of month for monthly rules (defaults to the anchor's day)")
@click.option("--dow", type=int, help="Day of week (1-7), informational")
@click.option("--interval", type=int, default=1, show_default=True, help="Months or weeks between occurrences")
@click.option("--end-date", help="Last date an occurrence may fall on")
@click.option("--entry", "entry_id", help="Base entry whose fields take precedence")
@click.pass_context
def add_rule(
    ctx,
    description: str,
    amount: str,
    entry_type: str,
    category: str,
    frequency: str,
    start_anchor: str,
    dom: int | None,
    dow: int | None,
    interval: int,
    end_date: str | None,
    entry_id: str | None,
):
    """Add a recurring rule.

    Examples:
        budgetsnap rule add --description Rent --amount 1200 --start 2024-01-01 --dom 1
        budgetsnap rule add --description Paycheck --amount 900 --type income --frequency biweekly --start 2024-01-05
    """
    service = get_service(ctx)
    anchor = parse_date_or_exit(ctx, start_anchor, "start date")
    value = parse_amount_or_exit(ctx, amount)
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    try:
        rule_id = service.upsert_rule(
            description=description,
            amount=value,
            type=entry_type.lower(),
            frequency=frequency.lower(),
            start_anchor=anchor,
            category=category,
            dom=dom,
            dow=dow,
            interval=interval,
            end_date=end,
            entry_id=entry_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created rule {rule_id}")
    click.echo(f"  Description: {description}")
    click.echo(f"  Amount: ${value:,.2f} ({entry_type.lower()})")
    click.echo(f"  Schedule: {frequency.lower()} from {anchor}")


@rule_group.command("edit")
@click.argument("rule_id")
@click.option("--description", help="New description")
@click.option("--amount", help="New amount")
@click.option("--type", "entry_type", type=TYPE_CHOICE, help="New type")
@click.option("--category", help="New category")
@click.option("--frequency", type=FREQUENCY_CHOICE, help="New frequency")
@click.option("--start", "start_anchor", help="New anchor date")
@click.option("--dom", type=int, help="New day of month")
@click.option("--interval", type=int, help="New interval")
@click.option("--end-date", help="New end date")
@click.option("--no-end-date", is_flag=True, help="Remove the end date so the rule runs on")
@click.option("--entry", "entry_id", help="New base entry")
@click.option("--no-entry", is_flag=True, help="Unlink the base entry")
@click.pass_context
def edit_rule(
    ctx,
    rule_id,
    description,
    amount,
    entry_type,
    category,
    frequency,
    start_anchor,
    dom,
    interval,
    end_date,
    no_end_date,
    entry_id,
    no_entry,
):
    """Edit a recurring rule. Unspecified fields keep their value."""
    if end_date and no_end_date:
        click.echo("Error: --end-date cannot be combined with --no-end-date.", err=True)
        ctx.exit(1)
    if entry_id and no_entry:
        click.echo("Error: --entry cannot be combined with --no-entry.", err=True)
        ctx.exit(1)

    service = get_service(ctx)
    try:
        current = service.require_rule(rule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if no_end_date:
        new_end_date = None
    elif end_date:
        new_end_date = parse_date_or_exit(ctx, end_date, "end date")
    else:
        new_end_date = current.end_date

    try:
        service.upsert_rule(
            rule_id=rule_id,
            description=description if description is not None else current.description,
            amount=parse_amount_or_exit(ctx, amount) if amount else current.amount,
            type=entry_type.lower() if entry_type else current.type,
            frequency=frequency.lower() if frequency else current.frequency,
            start_anchor=(
                parse_date_or_exit(ctx, start_anchor, "start date") if start_anchor else current.start_anchor
            ),
            category=category if category is not None else current.category,
            dom=dom if dom is not None else current.dom,
            dow=current.dow,
            interval=interval if interval is not None else current.interval,
            end_date=new_end_date,
            entry_id=None if no_entry else (entry_id or current.entry_id),
            active=current.active,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated rule {rule_id}")


@rule_group.command("delete")
@click.argument("rule_id")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_rule(ctx, rule_id: str, yes: bool):
    """Delete a rule and all of its occurrence overrides."""
    service = get_service(ctx)
    try:
        current = service.require_rule(rule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Delete rule '{current.description}' ({rule_id})?"):
        click.echo("Deletion cancelled.")
        return

    service.delete_rule(rule_id)
    click.echo(f"Deleted rule {rule_id}")


def _set_active(ctx, rule_id: str, active: bool) -> None:
    service = get_service(ctx)
    try:
        service.set_rule_active(rule_id, active)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Rule {rule_id} {'activated' if active else 'deactivated'}")


@rule_group.command("activate")
@click.argument("rule_id")
@click.pass_context
def activate_rule(ctx, rule_id: str):
    """Resume generating occurrences for a rule."""
    _set_active(ctx, rule_id, True)


@rule_group.command("deactivate")
@click.argument("rule_id")
@click.pass_context
def deactivate_rule(ctx, rule_id: str):
    """Stop generating occurrences for a rule."""
    _set_active(ctx, rule_id, False)


@rule_group.command("list")
@click.option("--active-only", is_flag=True, help="Hide inactive rules")
@click.pass_context
def list_rules(ctx, active_only: bool):
    """List recurring rules."""
    service = get_service(ctx)
    rules = service.list_rules(active_only=active_only)
    if not rules:
        click.echo("No rules found.")
        return

    click.echo(f"\nFound {len(rules)} rule(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<38} {'Frequency':<10} {'Start':<12} {'Amount':>12} {'Active':<7} {'Description':<30}"
    )
    click.echo("-" * 110)
    for r in rules:
        frequency = r.frequency.value
        if r.interval > 1 and r.frequency != Frequency.BIWEEKLY:
            frequency = f"{frequency}/{r.interval}"
        click.echo(
            f"{r.id:<38} {frequency:<10} {str(r.start_anchor):<12} {f'${r.amount:,.2f}':>12} "
            f"{'yes' if r.active else 'no':<7} {r.description[:30]:<30}"
        )


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
