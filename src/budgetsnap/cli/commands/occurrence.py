"""Commands that override a single occurrence of a recurring rule."""

import click

from budgetsnap.cli.error_handling import handle_domain_error, parse_date_or_exit
from budgetsnap.cli.service import get_service
from budgetsnap.domain.errors import DomainError


@click.group()
def occurrence_group():
    """Pay, postpone or skip one occurrence of a rule.

    DATE is the occurrence's originally scheduled date, as shown in the
    snapshot's "Scheduled" column.
    """
    pass


@occurrence_group.command("pay")
@click.argument("rule_id")
@click.argument("occurrence_date", metavar="DATE")
@click.option("--on", "paid_on", help="Payment date (defaults to today)")
@click.pass_context
def pay_occurrence(ctx, rule_id: str, occurrence_date: str, paid_on: str | None):
    """Mark one occurrence paid."""
    service = get_service(ctx)
    scheduled = parse_date_or_exit(ctx, occurrence_date, "occurrence date")
    paid = parse_date_or_exit(ctx, paid_on, "payment date") if paid_on else None
    try:
        override_id = service.mark_occurrence_paid(rule_id, scheduled, paid)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Occurrence {scheduled} of rule {rule_id} marked paid (override {override_id})")


@occurrence_group.command("postpone")
@click.argument("rule_id")
@click.argument("occurrence_date", metavar="DATE")
@click.option("--to", "new_date", help="New date (defaults to the rule's next slot)")
@click.pass_context
def postpone_occurrence(ctx, rule_id: str, occurrence_date: str, new_date: str | None):
    """Postpone one occurrence."""
    service = get_service(ctx)
    scheduled = parse_date_or_exit(ctx, occurrence_date, "occurrence date")
    target = parse_date_or_exit(ctx, new_date, "date") if new_date else None
    try:
        moved_to = service.postpone_occurrence(rule_id, scheduled, target)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Occurrence {scheduled} of rule {rule_id} postponed to {moved_to}")


@occurrence_group.command("skip")
@click.argument("rule_id")
@click.argument("occurrence_date", metavar="DATE")
@click.pass_context
def skip_occurrence(ctx, rule_id: str, occurrence_date: str):
    """Record a skip for one occurrence."""
    service = get_service(ctx)
    scheduled = parse_date_or_exit(ctx, occurrence_date, "occurrence date")
    try:
        service.skip_occurrence(rule_id, scheduled)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Occurrence {scheduled} of rule {rule_id} marked skipped")


def register_commands(cli):
    """Register occurrence commands with main CLI."""
    cli.add_command(occurrence_group, name="occurrence")
