"""Recurring income commands."""

import click
from fintrack.cli.account_resolution import resolve_account_or_exit
from fintrack.cli.context import current_currency, current_user_id
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from fintrack.domain.account import AccountService
from fintrack.domain.recurring_income import RecurringIncomeService
from fintrack.utils.money import format_money


@click.group()
def income_group():
    """Manage income expected every month."""
    pass


def _require_own_income(ctx, service: RecurringIncomeService, income_id: int):
    income = service.get_recurring_income(income_id)
    if income is None or income.user_id != current_user_id(ctx):
        click.echo(f"Error: Recurring income {income_id} not found", err=True)
        ctx.exit(1)
    return income


@income_group.command("add")
@click.option("--description", required=True, help="Income source, e.g. Salary")
@click.option("--amount", required=True, help="Amount received each month")
@click.option("--day", "day_of_month", type=int, required=True, help="Day of month (1-31)")
@click.option("--account", required=True, help="Account name or ID receiving the income")
@click.pass_context
def add_income(ctx, description: str, amount: str, day_of_month: int, account: str):
    """Add a recurring income.

    Examples:
        fintrack income add --description Salary --amount 5000 --day 5 --account Checking
    """
    db = ctx.obj["db"]
    user_id = current_user_id(ctx)
    account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)
    income_amount = parse_amount_or_exit(ctx, amount)
    try:
        income_id = RecurringIncomeService(db).add_recurring_income(
            user_id=user_id,
            description=description,
            amount=income_amount,
            day_of_month=day_of_month,
            account_id=account_id,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created recurring income {income_id}: {description}")


@income_group.command("list")
@click.pass_context
def list_incomes(ctx):
    """List recurring incomes and their monthly total."""
    service = RecurringIncomeService(ctx.obj["db"])
    user_id = current_user_id(ctx)
    incomes = service.list_recurring_incomes(user_id)
    if not incomes:
        click.echo("No recurring incomes found.")
        return

    currency = current_currency(ctx)
    click.echo("\nRecurring incomes:")
    click.echo("-" * 70)
    for income in incomes:
        click.echo(
            f"ID: {income.id:3d} | {income.description[:25]:25s} | "
            f"{format_money(income.amount, currency):>14} | day {income.day_of_month:2d}"
        )
    click.echo("-" * 70)
    click.echo(f"Monthly total: {format_money(service.monthly_total(user_id), currency)}")


@income_group.command("update")
@click.argument("income_id", type=int)
@click.option("--description", help="New description")
@click.option("--amount", help="New amount")
@click.option("--day", "day_of_month", type=int, help="New day of month")
@click.option("--account", help="New account name or ID")
@click.pass_context
def update_income(
    ctx,
    income_id: int,
    description: str | None,
    amount: str | None,
    day_of_month: int | None,
    account: str | None,
):
    """Update a recurring income."""
    db = ctx.obj["db"]
    service = RecurringIncomeService(db)
    income = _require_own_income(ctx, service, income_id)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), income.user_id, account)

    try:
        service.update_recurring_income(
            income_id,
            description=description,
            amount=parse_amount_or_exit(ctx, amount) if amount is not None else None,
            day_of_month=day_of_month,
            account_id=account_id,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated recurring income {income_id}")


@income_group.command("delete")
@click.argument("income_id", type=int)
@click.pass_context
def delete_income(ctx, income_id: int):
    """Delete a recurring income."""
    service = RecurringIncomeService(ctx.obj["db"])
    _require_own_income(ctx, service, income_id)
    service.delete_recurring_income(income_id)
    click.echo(f"Deleted recurring income {income_id}")


@income_group.command("receive")
@click.argument("income_id", type=int)
@click.option("--date", "receipt_date", default="today", show_default=True, help="Receipt date")
@click.pass_context
def receive_income(ctx, income_id: int, receipt_date: str):
    """Record a recurring income as received."""
    service = RecurringIncomeService(ctx.obj["db"])
    _require_own_income(ctx, service, income_id)
    received_on = parse_date_or_exit(ctx, receipt_date)
    try:
        transaction_id = service.register_receipt(income_id, received_on)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Registered receipt as transaction {transaction_id}")


def register_commands(cli):
    """Register recurring income commands with main CLI."""
    cli.add_command(income_group, name="income")
