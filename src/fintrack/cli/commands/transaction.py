"""Transaction management commands."""

import click
from fintrack.cli.account_resolution import resolve_account_or_exit, resolve_category_or_exit
from fintrack.cli.context import current_currency, current_user_id
from fintrack.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from fintrack.domain.account import AccountService
from fintrack.domain.category import CategoryService
from fintrack.domain.entities import TransactionType
from fintrack.domain.transaction import TransactionService
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.date_parser import parse_date
from fintrack.utils.money import format_money


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@period_options
@click.option("--account", help="Account name or ID")
@click.option("--category", help="Category name or ID")
@click.option(
    "--type", "txn_type", type=click.Choice([t.value for t in TransactionType]), help="Type filter"
)
@click.option("--limit", type=int, help="Show at most this many transactions")
@click.pass_context
def list_transactions(
    ctx,
    account: str | None,
    category: str | None,
    txn_type: str | None,
    limit: int | None,
    start_date: str | None,
    end_date: str | None,
    **period_kwargs,
):
    """List transactions, newest first.

    Examples:
        fintrack transaction list --this-month
        fintrack transaction list --account Nubank --type expense --limit 20
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)
    category_service = CategoryService(db)
    user_id = current_user_id(ctx)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=pop_period_flags(period_kwargs),
    )

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, account_service, user_id, account)

    category_id = None
    if category:
        category_id = resolve_category_or_exit(ctx, category_service, category).id

    transactions = service.list_transactions(
        user_id=user_id,
        start_date=start,
        end_date=end,
        account_id=account_id,
        category_id=category_id,
        type=txn_type,
        limit=limit,
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    currency = current_currency(ctx)
    accounts = {acc.id: acc.name for acc in account_service.list_accounts(user_id)}
    categories = {cat.id: cat.name for cat in category_service.list_categories()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':>5} | {'Date':10} | {'Account':15} | {'Category':17} | "
        f"{'Description':28} | {'Amount':>17}"
    )
    click.echo("-" * 110)
    for txn in transactions:
        description = txn.description
        if txn.transfer_id is not None:
            description = f"[T] {description}"
        click.echo(
            f"{txn.id:5d} | {txn.date.isoformat():10} | "
            f"{accounts.get(txn.account_id, 'Unknown')[:15]:15} | "
            f"{categories.get(txn.category_id, '')[:17]:17} | {description[:28]:28} | "
            f"{format_money(txn.signed_amount, currency):>17}"
        )


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--account", help="Account name or ID")
@click.option("--date", help="Transaction date (YYYY-MM-DD, DD/MM/YYYY or relative)")
@click.option("--amount", help="Positive amount (e.g., 75.00)")
@click.option("--description", help="Transaction description")
@click.option(
    "--type", "txn_type", type=click.Choice([t.value for t in TransactionType]), help="Type"
)
@click.option("--category", help="Category name or ID")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    account: str | None,
    date: str | None,
    amount: str | None,
    description: str | None,
    txn_type: str | None,
    category: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided; balances are adjusted for the
    old and new values. Transfer legs cannot be updated.

    Examples:
        fintrack transaction update 1 --amount 75.00
        fintrack transaction update 1 --account "Nubank" --category Food
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    user_id = current_user_id(ctx)

    txn = transaction_service.get_transaction(transaction_id)
    if txn is None or txn.user_id != user_id:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)

    txn_date = None
    if date is not None:
        try:
            txn_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    txn_amount = None
    if amount is not None:
        try:
            txn_amount = abs(parse_amount(amount))
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    category_id = None
    if category is not None:
        category_id = resolve_category_or_exit(ctx, CategoryService(db), category).id

    try:
        transaction_service.update_transaction(
            transaction_id,
            account_id=account_id,
            date=txn_date,
            amount=txn_amount,
            description=description,
            type=txn_type,
            category_id=category_id,
        )
        click.echo(f"Updated transaction {transaction_id}")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction and revert its effect on the balance.

    Deleting one leg of a transfer deletes both legs.

    Examples:
        fintrack transaction delete 12 --yes
    """
    service = TransactionService(ctx.obj["db"])
    txn = service.get_transaction(transaction_id)
    if txn is None or txn.user_id != current_user_id(ctx):
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete transaction {transaction_id} ('{txn.description}')?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        deleted = service.delete_transaction(transaction_id)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if len(deleted) > 1:
        click.echo(f"Deleted transfer transactions {', '.join(str(i) for i in deleted)}")
    else:
        click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("transfer")
@click.option("--from", "from_account", required=True, help="Source account name or ID")
@click.option("--to", "to_account", required=True, help="Destination account name or ID")
@click.option("--amount", required=True, help="Amount to move (e.g., 200.00)")
@click.option("--date", default="today", show_default=True, help="Transfer date")
@click.option("--description", help="Description (generated if omitted)")
@click.pass_context
def transfer(
    ctx,
    from_account: str,
    to_account: str,
    amount: str,
    date: str,
    description: str | None,
) -> None:
    """Move money between two of your accounts.

    Examples:
        fintrack transaction transfer --from Checking --to Savings --amount 500
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    user_id = current_user_id(ctx)

    from_id = resolve_account_or_exit(ctx, account_service, user_id, from_account)
    to_id = resolve_account_or_exit(ctx, account_service, user_id, to_account)

    try:
        transfer_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        transfer_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        out_id, in_id = TransactionService(db).transfer(
            user_id=user_id,
            from_account_id=from_id,
            to_account_id=to_id,
            amount=transfer_amount,
            date=transfer_date,
            description=description,
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    currency = current_currency(ctx)
    source = account_service.get_account(from_id)
    target = account_service.get_account(to_id)
    click.echo(
        f"Transferred {format_money(transfer_amount, currency)} from '{source.name}' "
        f"to '{target.name}' (transactions {out_id}, {in_id})"
    )
    click.echo(f"  {source.name}: {format_money(source.balance, currency)}")
    click.echo(f"  {target.name}: {format_money(target.balance, currency)}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
