"""Main CLI entry point."""

import logging

import click
from budgetsnap.database.factories import DB_PATH_ENVVAR, create_sqlite_database

# Import and register all commands at module level
from budgetsnap.cli.commands import (
    entry,
    rule,
    occurrence,
    snapshot,
)

DEFAULT_OWNER = "default"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENVVAR} environment variable)",
    envvar=DB_PATH_ENVVAR,
)
@click.option(
    "--owner",
    default=DEFAULT_OWNER,
    show_default=True,
    help="Owner whose budget is read and written",
    envvar="BUDGETSNAP_OWNER",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, owner: str, verbose: bool):
    """Budgetsnap - Recurring budget tracking.

    Record one-time entries and recurring rules, adjust single occurrences
    (pay, postpone, skip), and view monthly snapshots with totals.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["owner"] = owner
        ctx.call_on_close(db.disconnect)


# Register all commands
entry.register_commands(cli)
rule.register_commands(cli)
occurrence.register_commands(cli)
snapshot.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
