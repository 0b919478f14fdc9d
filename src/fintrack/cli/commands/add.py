"""Add transaction command."""

import click
from fintrack.cli.account_resolution import resolve_account_or_exit, resolve_category_or_exit
from fintrack.cli.context import current_currency, current_user_id
from fintrack.domain.account import AccountService
from fintrack.domain.category import (
    OTHER_EXPENSES_CATEGORY,
    OTHER_INCOME_CATEGORY,
    CategoryService,
)
from fintrack.domain.entities import TransactionType
from fintrack.domain.transaction import TransactionService
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.date_parser import parse_date
from fintrack.utils.money import format_money


@click.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD, DD/MM/YYYY or relative like 'today', 'yesterday')",
)
@click.option(
    "--amount",
    required=True,
    help="Amount; negative means expense unless --type is given (e.g., -50.00 or 1.200,00)",
)
@click.option("--description", required=True, help="Transaction description")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice([t.value for t in TransactionType]),
    help="Transaction type (defaults from the amount's sign)",
)
@click.option("--category", help="Category name or ID (defaults to Other Expenses / Other Income)")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    date: str,
    amount: str,
    description: str,
    txn_type: str | None,
    category: str | None,
):
    """Add a transaction and update the account balance.

    Examples:
        fintrack add --account Nubank --amount -50.00 --description "Groceries" --category Food
        fintrack add --account 1 --date 05/01/2024 --amount 5000 --description "Salary" \\
            --category Salary
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = AccountService(db)
    category_service = CategoryService(db)
    user_id = current_user_id(ctx)

    account_id = resolve_account_or_exit(ctx, account_service, user_id, account)
    account_obj = account_service.get_account(account_id)

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        raw_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    if txn_type is not None:
        resolved_type = TransactionType(txn_type)
    else:
        resolved_type = TransactionType.EXPENSE if raw_amount < 0 else TransactionType.INCOME

    if category is None:
        category = (
            OTHER_EXPENSES_CATEGORY
            if resolved_type == TransactionType.EXPENSE
            else OTHER_INCOME_CATEGORY
        )
    category_obj = resolve_category_or_exit(ctx, category_service, category)

    try:
        transaction_id = transaction_service.add_transaction(
            user_id=user_id,
            account_id=account_id,
            date=txn_date,
            description=description,
            amount=abs(raw_amount),
            type=resolved_type,
            category_id=category_obj.id,
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    currency = current_currency(ctx)
    new_balance = account_service.get_account(account_id).balance
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Account: {account_obj.name}")
    click.echo(f"  Date: {txn_date}")
    click.echo(f"  Type: {resolved_type.value}")
    click.echo(f"  Amount: {format_money(abs(raw_amount), currency)}")
    click.echo(f"  Description: {description}")
    click.echo(f"  Category: {category_obj.name}")
    click.echo(f"  New balance: {format_money(new_balance, currency)}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
