"""Savings goal commands."""

from datetime import date

import click
from fintrack.cli.account_resolution import resolve_account_or_exit
from fintrack.cli.context import current_currency, current_user_id
from fintrack.cli.error_handling import handle_domain_error
from fintrack.cli.parsing import parse_amount_or_exit, parse_date_or_exit
from fintrack.domain.account import AccountService
from fintrack.domain.goal import GoalService, goal_progress
from fintrack.utils.money import format_money


@click.group()
def goal_group():
    """Manage savings goals."""
    pass


def _require_own_goal(ctx, service: GoalService, goal_id: int):
    goal = service.get_goal(goal_id)
    if goal is None or goal.user_id != current_user_id(ctx):
        click.echo(f"Error: Goal {goal_id} not found", err=True)
        ctx.exit(1)
    return goal


@goal_group.command("add")
@click.argument("name")
@click.argument("target")
@click.option("--current", default="0", show_default=True, help="Amount already saved")
@click.option("--deadline", help="Target date")
@click.pass_context
def add_goal(ctx, name: str, target: str, current: str, deadline: str | None):
    """Create a savings goal NAME with a TARGET amount.

    Examples:
        fintrack goal add "Emergency fund" 10000 --deadline 2026-12-31
    """
    target_amount = parse_amount_or_exit(ctx, target)
    current_amount = parse_amount_or_exit(ctx, current)
    deadline_date = parse_date_or_exit(ctx, deadline) if deadline else None
    try:
        goal_id = GoalService(ctx.obj["db"]).add_goal(
            user_id=current_user_id(ctx),
            name=name,
            target_amount=target_amount,
            current_amount=current_amount,
            deadline=deadline_date,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created goal {goal_id}: {name}")


@goal_group.command("list")
@click.pass_context
def list_goals(ctx):
    """List goals with their progress."""
    goals = GoalService(ctx.obj["db"]).list_goals(current_user_id(ctx))
    if not goals:
        click.echo("No goals found.")
        return

    today = date.today()
    currency = current_currency(ctx)
    click.echo("\nGoals:")
    click.echo("-" * 100)
    for goal in goals:
        progress = goal_progress(goal, today)
        marker = " (achieved)" if progress.is_achieved else ""
        click.echo(
            f"ID: {goal.id:3d} | {goal.name[:22]:22s} | "
            f"{format_money(goal.current_amount, currency):>14} of "
            f"{format_money(goal.target_amount, currency):>14} | "
            f"{progress.percentage:>6}%{marker} | {progress.deadline_text}"
        )


@goal_group.command("update")
@click.argument("goal_id", type=int)
@click.option("--name", help="New name")
@click.option("--target", help="New target amount")
@click.option("--current", help="New saved amount")
@click.option("--deadline", help="New deadline")
@click.option("--no-deadline", is_flag=True, help="Remove the deadline")
@click.pass_context
def update_goal(
    ctx,
    goal_id: int,
    name: str | None,
    target: str | None,
    current: str | None,
    deadline: str | None,
    no_deadline: bool,
):
    """Update a goal."""
    service = GoalService(ctx.obj["db"])
    _require_own_goal(ctx, service, goal_id)

    if no_deadline and deadline:
        click.echo("Error: --deadline cannot be combined with --no-deadline", err=True)
        ctx.exit(1)

    changes = {
        "name": name,
        "target_amount": parse_amount_or_exit(ctx, target) if target is not None else None,
        "current_amount": parse_amount_or_exit(ctx, current) if current is not None else None,
    }
    if deadline:
        changes["deadline"] = parse_date_or_exit(ctx, deadline)
    elif no_deadline:
        changes["deadline"] = None

    try:
        service.update_goal(goal_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated goal {goal_id}")


@goal_group.command("delete")
@click.argument("goal_id", type=int)
@click.pass_context
def delete_goal(ctx, goal_id: int):
    """Delete a goal. Past contributions stay on their accounts."""
    service = GoalService(ctx.obj["db"])
    _require_own_goal(ctx, service, goal_id)
    service.delete_goal(goal_id)
    click.echo(f"Deleted goal {goal_id}")


@goal_group.command("contribute")
@click.argument("goal_id", type=int)
@click.argument("amount")
@click.option("--account", required=True, help="Account name or ID the money comes from")
@click.option("--date", "contribution_date", default="today", show_default=True)
@click.pass_context
def contribute(ctx, goal_id: int, amount: str, account: str, contribution_date: str):
    """Move AMOUNT from an account into a goal.

    Examples:
        fintrack goal contribute 1 250 --account Savings
    """
    db = ctx.obj["db"]
    service = GoalService(db)
    goal = _require_own_goal(ctx, service, goal_id)
    account_service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, account_service, goal.user_id, account)
    value = parse_amount_or_exit(ctx, amount)
    when = parse_date_or_exit(ctx, contribution_date)

    try:
        service.contribute(goal_id, account_id, value, date=when)
    except ValueError as e:
        handle_domain_error(ctx, e)

    currency = current_currency(ctx)
    progress = service.goal_progress(goal_id)
    click.echo(f"Contributed {format_money(value, currency)} to '{goal.name}'")
    click.echo(
        f"  Saved: {format_money(progress.goal.current_amount, currency)} "
        f"({progress.percentage}%)"
    )
    click.echo(
        f"  Account balance: {format_money(account_service.get_account(account_id).balance, currency)}"
    )
    if progress.is_achieved:
        click.echo("  Goal achieved!")


def register_commands(cli):
    """Register goal commands with main CLI."""
    cli.add_command(goal_group, name="goal")
