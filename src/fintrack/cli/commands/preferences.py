"""Preference commands."""

import click
from fintrack.cli.context import current_user_id
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.preferences import PreferencesService


@click.group()
def preferences_group():
    """Show or change your preferences."""
    pass


def _echo_preferences(prefs) -> None:
    click.echo(f"Currency:                 {prefs.currency}")
    click.echo(f"Budget warning threshold: {prefs.budget_warning_threshold}%")
    click.echo(f"Bill reminder days:       {prefs.bill_reminder_days}")


@preferences_group.command("show")
@click.pass_context
def show(ctx):
    """Show the current preferences."""
    _echo_preferences(PreferencesService(ctx.obj["db"]).get_preferences(current_user_id(ctx)))


@preferences_group.command("set")
@click.option("--currency", help="ISO 4217 currency code, e.g. BRL or USD")
@click.option("--budget-warning-threshold", type=int, help="Budget usage percentage (1-100)")
@click.option("--bill-reminder-days", type=int, help="Days ahead to remind about bills (0-31)")
@click.pass_context
def set_preferences(
    ctx,
    currency: str | None,
    budget_warning_threshold: int | None,
    bill_reminder_days: int | None,
):
    """Change preferences. Options not given keep their value.

    Examples:
        fintrack preferences set --currency USD --bill-reminder-days 5
    """
    if currency is None and budget_warning_threshold is None and bill_reminder_days is None:
        click.echo("Error: Nothing to change", err=True)
        ctx.exit(1)
    try:
        prefs = PreferencesService(ctx.obj["db"]).save_preferences(
            current_user_id(ctx),
            currency=currency,
            budget_warning_threshold=budget_warning_threshold,
            bill_reminder_days=bill_reminder_days,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo("Preferences saved")
    _echo_preferences(prefs)


def register_commands(cli):
    """Register preference commands with main CLI."""
    cli.add_command(preferences_group, name="preferences")
