"""Report commands: expenses by category, monthly overview and dashboard."""

from datetime import date
from decimal import Decimal

import click
from fintrack.cli.account_resolution import resolve_account_or_exit
from fintrack.cli.context import current_currency, current_user_id
from fintrack.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.account import AccountService
from fintrack.domain.report import ReportService
from fintrack.domain.schedule import month_end, month_start
from fintrack.domain.transaction import TransactionService
from fintrack.utils.money import format_money


@click.group()
def report_group():
    """Spending reports."""
    pass


@report_group.command("categories")
@period_options
@click.option("--account", help="Only this account (name or ID)")
@click.option("--include-transfers", is_flag=True, help="Count outgoing transfers as expenses")
@click.pass_context
def categories(
    ctx,
    account: str | None,
    include_transfers: bool,
    start_date: str | None,
    end_date: str | None,
    **period_kwargs,
):
    """Expenses grouped by category, largest first.

    Defaults to the current month.

    Examples:
        fintrack report categories
        fintrack report categories --last-3-months --account Card
    """
    db = ctx.obj["db"]
    user_id = current_user_id(ctx)
    today = date.today()
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=pop_period_flags(period_kwargs),
        default_range=(month_start(today), month_end(today)),
    )

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)

    totals = ReportService(db).expenses_by_category(
        user_id,
        start_date=start,
        end_date=end,
        account_id=account_id,
        include_transfers=include_transfers,
    )
    if not totals:
        click.echo("No expenses found.")
        return

    currency = current_currency(ctx)
    grand_total = sum((total.value for total in totals), Decimal("0"))
    click.echo("\nExpenses by Category:")
    click.echo("-" * 80)
    click.echo(f"{'Category':<40} {'Total':>20} {'Share':>10}")
    click.echo("-" * 80)
    for total in totals:
        share = total.value / grand_total * 100 if grand_total else Decimal("0")
        click.echo(
            f"{total.name:<40} {format_money(total.value, currency):>20} {share:>9.1f}%"
        )
    click.echo("-" * 80)
    click.echo(f"{'Total':<40} {format_money(grand_total, currency):>20}")


@report_group.command("overview")
@click.option("--months", type=int, default=6, show_default=True, help="Months to show")
@click.pass_context
def overview(ctx, months: int):
    """Income and expenses for each of the last months."""
    try:
        rows = ReportService(ctx.obj["db"]).monthly_overview(current_user_id(ctx), months=months)
    except ValueError as e:
        handle_domain_error(ctx, e)

    currency = current_currency(ctx)
    click.echo("\nMonthly Overview:")
    click.echo("-" * 80)
    click.echo(f"{'Month':<10} {'Income':>22} {'Expenses':>22} {'Net':>22}")
    click.echo("-" * 80)
    for row in rows:
        click.echo(
            f"{row.month:%Y-%m}    {format_money(row.income, currency):>22} "
            f"{format_money(row.expense, currency):>22} {format_money(row.net, currency):>22}"
        )


@report_group.command("dashboard")
@click.pass_context
def dashboard(ctx):
    """Total balance, this month's totals and the latest transactions."""
    db = ctx.obj["db"]
    user_id = current_user_id(ctx)
    currency = current_currency(ctx)
    summary = ReportService(db).dashboard_summary(user_id)

    click.echo(f"Total balance:     {format_money(summary.total_balance, currency)}")
    click.echo(f"Monthly income:    {format_money(summary.monthly_income, currency)}")
    click.echo(f"Monthly expenses:  {format_money(summary.monthly_expenses, currency)}")
    click.echo(f"Monthly savings:   {format_money(summary.monthly_savings, currency)}")

    recent = TransactionService(db).recent_transactions(user_id)
    if recent:
        click.echo("\nRecent transactions:")
        for txn in recent:
            click.echo(
                f"  {txn.date.isoformat()} | {txn.description[:35]:35s} | "
                f"{format_money(txn.signed_amount, currency):>16}"
            )


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
