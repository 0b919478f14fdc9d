"""Balance projection command."""

import click
from fintrack.cli.context import current_currency, current_user_id
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.projection import ProjectionService
from fintrack.utils.money import format_money


@click.command("project")
@click.option("--months", type=int, default=6, show_default=True, help="Months to project (1-120)")
@click.pass_context
def project(ctx, months: int):
    """Project your total balance from recurring incomes and bills.

    Examples:
        fintrack project --months 12
    """
    try:
        rows = ProjectionService(ctx.obj["db"]).project(current_user_id(ctx), months=months)
    except ValueError as e:
        handle_domain_error(ctx, e)

    currency = current_currency(ctx)
    click.echo("\nBalance Projection:")
    click.echo("-" * 96)
    click.echo(f"{'Month':<10} {'Income':>20} {'Bills':>20} {'Net':>20} {'Balance':>20}")
    click.echo("-" * 96)
    for row in rows:
        click.echo(
            f"{row.month:%Y-%m}    {format_money(row.income, currency):>20} "
            f"{format_money(row.expense, currency):>20} {format_money(row.net, currency):>20} "
            f"{format_money(row.end_balance, currency):>20}"
        )


def register_commands(cli):
    """Register projection command with main CLI."""
    cli.add_command(project)
