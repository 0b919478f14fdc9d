"""Budget commands."""

import click
from fintrack.cli.account_resolution import resolve_category_or_exit
from fintrack.cli.context import current_currency, current_user_id
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.parsing import parse_amount_or_exit
from fintrack.domain.budget import BudgetService
from fintrack.domain.category import CategoryService
from fintrack.utils.money import format_money


@click.group()
def budget_group():
    """Manage monthly spending limits per category."""
    pass


def _require_own_budget(ctx, service: BudgetService, budget_id: int):
    budget = service.get_budget(budget_id)
    if budget is None or budget.user_id != current_user_id(ctx):
        click.echo(f"Error: Budget {budget_id} not found", err=True)
        ctx.exit(1)
    return budget


@budget_group.command("add")
@click.argument("category")
@click.argument("amount")
@click.pass_context
def add_budget(ctx, category: str, amount: str):
    """Set a monthly limit for an expense CATEGORY.

    Examples:
        fintrack budget add Food 800
    """
    db = ctx.obj["db"]
    category_obj = resolve_category_or_exit(ctx, CategoryService(db), category)
    limit = parse_amount_or_exit(ctx, amount)
    try:
        budget_id = BudgetService(db).add_budget(current_user_id(ctx), category_obj.id, limit)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Created budget {budget_id}: {category_obj.name} "
        f"{format_money(limit, current_currency(ctx))}/month"
    )


@budget_group.command("list")
@click.pass_context
def list_budgets(ctx):
    """List budgets with this month's spending."""
    db = ctx.obj["db"]
    statuses = BudgetService(db).budgets_with_spent(current_user_id(ctx))
    if not statuses:
        click.echo("No budgets found.")
        return

    currency = current_currency(ctx)
    names = {cat.id: cat.name for cat in CategoryService(db).list_categories()}
    click.echo("\nBudgets (this month):")
    click.echo("-" * 90)
    for status in statuses:
        line = (
            f"ID: {status.budget.id:3d} | {names.get(status.budget.category_id, 'Unknown'):20s} | "
            f"{format_money(status.spent, currency):>14} of "
            f"{format_money(status.budget.amount, currency):>14} | {status.percentage:>6}%"
        )
        if status.is_over_budget:
            line += f" | over by {format_money(status.over_budget_by, currency)}"
        click.echo(line)


@budget_group.command("update")
@click.argument("budget_id", type=int)
@click.option("--amount", help="New monthly limit")
@click.option("--category", help="New category name or ID")
@click.pass_context
def update_budget(ctx, budget_id: int, amount: str | None, category: str | None):
    """Change a budget's limit or category."""
    db = ctx.obj["db"]
    service = BudgetService(db)
    _require_own_budget(ctx, service, budget_id)

    limit = parse_amount_or_exit(ctx, amount) if amount is not None else None
    category_id = None
    if category is not None:
        category_id = resolve_category_or_exit(ctx, CategoryService(db), category).id

    try:
        service.update_budget(budget_id, amount=limit, category_id=category_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated budget {budget_id}")


@budget_group.command("delete")
@click.argument("budget_id", type=int)
@click.pass_context
def delete_budget(ctx, budget_id: int):
    """Delete a budget."""
    service = BudgetService(ctx.obj["db"])
    _require_own_budget(ctx, service, budget_id)
    service.delete_budget(budget_id)
    click.echo(f"Deleted budget {budget_id}")


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
