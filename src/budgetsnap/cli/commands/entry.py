"""One-time entry commands."""

import click

from budgetsnap.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
)
from budgetsnap.cli.service import get_service
from budgetsnap.domain.entities import DEFAULT_CATEGORY, KNOWN_CATEGORIES, EntryType
from budgetsnap.domain.errors import DomainError

TYPE_CHOICE = click.Choice([t.value for t in EntryType], case_sensitive=False)
CATEGORY_HELP = f"Category, e.g. {', '.join(KNOWN_CATEGORIES)}"


@click.group()
def entry_group():
    """Manage one-time entries."""
    pass


@entry_group.command("add")
@click.option("--description", required=True, help="What the entry is for")
@click.option("--amount", required=True, help="Amount (e.g., 123.45)")
@click.option("--type", "entry_type", type=TYPE_CHOICE, default="expense", show_default=True)
@click.option("--category", default=DEFAULT_CATEGORY, show_default=True, help=CATEGORY_HELP)
@click.option(
    "--due-date",
    required=True,
    help="Due date (YYYY-MM-DD or relative like 'today', 'tomorrow')",
)
@click.pass_context
def add_entry(ctx, description: str, amount: str, entry_type: str, category: str, due_date: str):
    """Add a one-time entry.

    Examples:
        budgetsnap entry add --description "Car repair" --amount 420 --due-date 2024-03-12
        budgetsnap entry add --description "Bonus" --amount 1000 --type income --due-date today
    """
    service = get_service(ctx)
    due = parse_date_or_exit(ctx, due_date, "due date")
    value = parse_amount_or_exit(ctx, amount)

    try:
        entry_id = service.upsert_entry(
            description=description,
            amount=value,
            type=entry_type.lower(),
            category=category,
            due_date=due,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created entry {entry_id}")
    click.echo(f"  Description: {description}")
    click.echo(f"  Amount: ${value:,.2f} ({entry_type.lower()})")
    click.echo(f"  Due: {due}")


@entry_group.command("edit")
@click.argument("entry_id")
@click.option("--description", help="New description")
@click.option("--amount", help="New amount")
@click.option("--type", "entry_type", type=TYPE_CHOICE, help="New type")
@click.option("--category", help="New category")
@click.option("--due-date", help="New due date")
@click.pass_context
def edit_entry(ctx, entry_id, description, amount, entry_type, category, due_date):
    """Edit a one-time entry. Unspecified fields keep their value."""
    service = get_service(ctx)
    try:
        current = service.require_entry(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    try:
        service.upsert_entry(
            entry_id=entry_id,
            description=description if description is not None else current.description,
            amount=parse_amount_or_exit(ctx, amount) if amount else current.amount,
            type=entry_type.lower() if entry_type else current.type,
            category=category if category is not None else current.category,
            due_date=parse_date_or_exit(ctx, due_date, "due date") if due_date else current.due_date,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated entry {entry_id}")


@entry_group.command("delete")
@click.argument("entry_id")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: str, yes: bool):
    """Delete a one-time entry."""
    service = get_service(ctx)
    try:
        current = service.require_entry(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Delete entry '{current.description}' ({entry_id})?"):
        click.echo("Deletion cancelled.")
        return

    service.delete_entry(entry_id)
    click.echo(f"Deleted entry {entry_id}")


@entry_group.command("pay")
@click.argument("entry_id")
@click.option("--on", "paid_on", help="Payment date (defaults to today)")
@click.option("--undo", is_flag=True, help="Clear the payment instead")
@click.pass_context
def pay_entry(ctx, entry_id: str, paid_on: str | None, undo: bool):
    """Mark a one-time entry paid (or unpaid with --undo)."""
    service = get_service(ctx)
    try:
        if undo:
            service.mark_entry_unpaid(entry_id)
            click.echo(f"Entry {entry_id} marked unpaid")
            return
        paid = parse_date_or_exit(ctx, paid_on, "payment date") if paid_on else None
        service.mark_entry_paid(entry_id, paid)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Entry {entry_id} marked paid")


@entry_group.command("postpone")
@click.argument("entry_id")
@click.option("--to", "new_date", required=True, help="New due date")
@click.pass_context
def postpone_entry(ctx, entry_id: str, new_date: str):
    """Move a one-time entry to a new due date."""
    service = get_service(ctx)
    target = parse_date_or_exit(ctx, new_date, "date")
    try:
        service.postpone_entry(entry_id, target)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Entry {entry_id} moved to {target}")


@entry_group.command("list")
@click.option("--start-date", help="Only entries due on or after this date")
@click.option("--end-date", help="Only entries due on or before this date")
@click.pass_context
def list_entries(ctx, start_date: str | None, end_date: str | None):
    """List one-time entries."""
    service = get_service(ctx)
    start = parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    entries = service.list_entries(start_date=start, end_date=end)
    if not entries:
        click.echo("No entries found.")
        return

    click.echo(f"\nFound {len(entries)} entry(ies):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<38} {'Due':<12} {'Type':<8} {'Amount':>12} {'Paid on':<12} {'Description':<30}"
    )
    click.echo("-" * 110)
    for e in entries:
        paid = str(e.paid_on) if e.paid_on else ""
        click.echo(
            f"{e.id:<38} {str(e.due_date):<12} {e.type.value:<8} {f'${e.amount:,.2f}':>12} "
            f"{paid:<12} {e.description[:30]:<30}"
        )


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
