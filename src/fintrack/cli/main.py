"""Main CLI entry point."""

import logging

import click
from fintrack.database.factories import create_sqlite_database
from fintrack.domain.category import CategoryService

# Import and register all commands at module level
from fintrack.cli.commands import (
    user,
    account,
    add,
    transaction,
    category,
    budget,
    recurring,
    income,
    goal,
    notifications,
    preferences,
    report,
    project,
    import_cmd,
    suggest,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINTRACK_DB_PATH environment variable)",
    envvar="FINTRACK_DB_PATH",
)
@click.option(
    "--user",
    "user_name",
    default="default",
    show_default=True,
    help="Profile to act as; created on first use (FINTRACK_USER)",
    envvar="FINTRACK_USER",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level (FINTRACK_LOG_LEVEL)",
    envvar="FINTRACK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, user_name: str, log_level: str):
    """Fintrack - personal finance tracker.

    Track account balances, transactions, budgets, recurring bills and
    incomes, and savings goals, with reports, projections and CSV import.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        CategoryService(db).ensure_default_categories()
        ctx.obj["db"] = db
        ctx.obj["user_name"] = user_name
        ctx.call_on_close(db.disconnect)


# Register all commands
user.register_commands(cli)
account.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
category.register_commands(cli)
budget.register_commands(cli)
recurring.register_commands(cli)
income.register_commands(cli)
goal.register_commands(cli)
notifications.register_commands(cli)
preferences.register_commands(cli)
report.register_commands(cli)
project.register_commands(cli)
import_cmd.register_commands(cli)
suggest.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
