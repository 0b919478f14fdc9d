"""Recurring bill commands."""

from datetime import date

import click
from fintrack.cli.account_resolution import resolve_account_or_exit, resolve_category_or_exit
from fintrack.cli.context import current_currency, current_user_id
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from fintrack.domain.account import AccountService
from fintrack.domain.category import OTHER_EXPENSES_CATEGORY, CategoryService
from fintrack.domain.recurring import RecurringService, installment_status
from fintrack.domain.schedule import next_due_date
from fintrack.utils.money import format_money


@click.group()
def recurring_group():
    """Manage recurring bills and installment plans."""
    pass


def _require_own_recurring(ctx, service: RecurringService, recurring_id: int):
    item = service.get_recurring(recurring_id)
    if item is None or item.user_id != current_user_id(ctx):
        click.echo(f"Error: Recurring bill {recurring_id} not found", err=True)
        ctx.exit(1)
    return item


@recurring_group.command("add")
@click.option("--description", required=True, help="What the bill is for")
@click.option("--amount", required=True, help="Amount due each month")
@click.option("--day", "day_of_month", type=int, required=True, help="Due day of month (1-31)")
@click.option("--account", required=True, help="Account name or ID the bill is paid from")
@click.option(
    "--category",
    default=OTHER_EXPENSES_CATEGORY,
    show_default=True,
    help="Expense category name or ID",
)
@click.option("--start-date", help="First due month (defaults to today)")
@click.option("--installments", type=int, help="Number of installments (omit for a fixed bill)")
@click.pass_context
def add_recurring(
    ctx,
    description: str,
    amount: str,
    day_of_month: int,
    account: str,
    category: str,
    start_date: str | None,
    installments: int | None,
):
    """Add a recurring bill.

    Examples:
        fintrack recurring add --description Rent --amount 1500 --day 5 --account Checking
        fintrack recurring add --description "New phone" --amount 250 --day 10 \\
            --account Card --installments 12
    """
    db = ctx.obj["db"]
    user_id = current_user_id(ctx)
    account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)
    category_obj = resolve_category_or_exit(ctx, CategoryService(db), category)
    bill_amount = parse_amount_or_exit(ctx, amount)
    start = parse_date_or_exit(ctx, start_date) if start_date else None

    try:
        recurring_id = RecurringService(db).add_recurring(
            user_id=user_id,
            description=description,
            amount=bill_amount,
            day_of_month=day_of_month,
            account_id=account_id,
            category_id=category_obj.id,
            start_date=start,
            installments=installments,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created recurring bill {recurring_id}: {description}")


@recurring_group.command("list")
@click.pass_context
def list_recurring(ctx):
    """List recurring bills with installment status and next due date."""
    db = ctx.obj["db"]
    items = RecurringService(db).list_recurring(current_user_id(ctx))
    if not items:
        click.echo("No recurring bills found.")
        return

    today = date.today()
    currency = current_currency(ctx)
    click.echo("\nRecurring bills:")
    click.echo("-" * 95)
    for item in items:
        status = installment_status(item, today)
        due = next_due_date(item.day_of_month, today, item.start_date, item.installments)
        due_text = due.isoformat() if due is not None else "-"
        click.echo(
            f"ID: {item.id:3d} | {item.description[:25]:25s} | "
            f"{format_money(item.amount, currency):>14} | day {item.day_of_month:2d} | "
            f"{status.label:10s} | next: {due_text}"
        )


@recurring_group.command("update")
@click.argument("recurring_id", type=int)
@click.option("--description", help="New description")
@click.option("--amount", help="New amount")
@click.option("--day", "day_of_month", type=int, help="New due day of month")
@click.option("--account", help="New account name or ID")
@click.option("--category", help="New category name or ID")
@click.option("--start-date", help="New first due month")
@click.option("--installments", type=int, help="New number of installments")
@click.option("--fixed", is_flag=True, help="Turn an installment plan into a fixed bill")
@click.pass_context
def update_recurring(
    ctx,
    recurring_id: int,
    description: str | None,
    amount: str | None,
    day_of_month: int | None,
    account: str | None,
    category: str | None,
    start_date: str | None,
    installments: int | None,
    fixed: bool,
):
    """Update a recurring bill."""
    db = ctx.obj["db"]
    service = RecurringService(db)
    item = _require_own_recurring(ctx, service, recurring_id)

    if fixed and installments is not None:
        click.echo("Error: --fixed cannot be combined with --installments", err=True)
        ctx.exit(1)

    changes = {
        "description": description,
        "day_of_month": day_of_month,
        "amount": parse_amount_or_exit(ctx, amount) if amount is not None else None,
        "start_date": parse_date_or_exit(ctx, start_date) if start_date else None,
    }
    if account is not None:
        changes["account_id"] = resolve_account_or_exit(
            ctx, AccountService(db), item.user_id, account
        )
    if category is not None:
        changes["category_id"] = resolve_category_or_exit(ctx, CategoryService(db), category).id
    if fixed or installments is not None:
        changes["installments"] = installments

    try:
        service.update_recurring(recurring_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated recurring bill {recurring_id}")


@recurring_group.command("delete")
@click.argument("recurring_id", type=int)
@click.pass_context
def delete_recurring(ctx, recurring_id: int):
    """Delete a recurring bill. Past payments are kept."""
    service = RecurringService(ctx.obj["db"])
    _require_own_recurring(ctx, service, recurring_id)
    service.delete_recurring(recurring_id)
    click.echo(f"Deleted recurring bill {recurring_id}")


@recurring_group.command("pay")
@click.argument("recurring_id", type=int)
@click.option("--date", "payment_date", default="today", show_default=True, help="Payment date")
@click.pass_context
def pay_recurring(ctx, recurring_id: int, payment_date: str):
    """Record a payment of a recurring bill as an expense."""
    service = RecurringService(ctx.obj["db"])
    _require_own_recurring(ctx, service, recurring_id)
    paid_on = parse_date_or_exit(ctx, payment_date)
    try:
        transaction_id = service.register_payment(recurring_id, paid_on)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Registered payment as transaction {transaction_id}")


@recurring_group.command("upcoming")
@click.option("--days", type=int, default=3, show_default=True, help="Days to look ahead")
@click.pass_context
def upcoming(ctx, days: int):
    """Show bills due in the next few days."""
    due_items = RecurringService(ctx.obj["db"]).upcoming(current_user_id(ctx), days=days)
    if not due_items:
        click.echo(f"No bills due in the next {days} day(s).")
        return

    currency = current_currency(ctx)
    for item, due in due_items:
        click.echo(
            f"{due.isoformat()} | {item.description[:30]:30s} | {format_money(item.amount, currency)}"
        )


def register_commands(cli):
    """Register recurring bill commands with main CLI."""
    cli.add_command(recurring_group, name="recurring")
