"""Account management commands."""

import click
from fintrack.cli.account_resolution import resolve_account_or_exit
from fintrack.cli.context import current_currency, current_user_id
from fintrack.domain.account import AccountService
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.money import format_money


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--bank", help="Bank name (defaults to account name if not provided)")
@click.option("--balance", default="0", help="Opening balance (e.g., 1500.00 or 1.500,00)")
@click.pass_context
def create_account(ctx, name: str, bank: str | None, balance: str):
    """Create a new account.

    If --bank is not provided, the bank name will be set to the account name.

    Examples:
        fintrack account create "Nubank"
        fintrack account create "Checking" --bank "Itaú" --balance 2500,00
    """
    service = AccountService(ctx.obj["db"])
    user_id = current_user_id(ctx)

    bank_name = bank if bank is not None else name

    try:
        opening = parse_amount(balance)
    except ValueError as e:
        click.echo(f"Error: Invalid balance: {e}", err=True)
        ctx.exit(1)

    try:
        account_id = service.create_account(
            user_id=user_id, name=name, bank_name=bank_name, balance=opening
        )
        click.echo(f"Created account '{name}' (ID: {account_id})")
        if bank is None:
            click.echo(f"Bank name set to '{bank_name}'")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List accounts with their balances."""
    service = AccountService(ctx.obj["db"])
    user_id = current_user_id(ctx)
    currency = current_currency(ctx)

    accounts = service.list_accounts(user_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | Bank: {acc.bank_name:15s} | "
            f"{format_money(acc.balance, currency):>15s}"
        )
    click.echo("-" * 70)
    click.echo(f"Total balance: {format_money(service.total_balance(user_id), currency)}")


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.option("--bank", help="New bank name (optional)")
@click.pass_context
def rename_account(ctx, account: str, new_name: str, bank: str | None) -> None:
    """Rename an account.

    ACCOUNT can be an account name or ID. The balance cannot be edited;
    record a transaction instead.

    Examples:
        fintrack account rename "Nubank" "Nubank Checking"
        fintrack account rename 1 "Savings" --bank "Caixa"
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, current_user_id(ctx), account)

    try:
        service.update_account(account_id=account_id, name=new_name, bank_name=bank)
        click.echo(f"Renamed account to '{new_name}'")
        if bank is not None:
            click.echo(f"Bank name updated to '{bank}'")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    The account can only be deleted if no transactions, recurring bills or
    recurring incomes reference it.

    Examples:
        fintrack account delete "Nubank"
        fintrack account delete 1 --yes
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, current_user_id(ctx), account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
