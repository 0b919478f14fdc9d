"""CLI helpers for resolving account and category arguments."""

from __future__ import annotations

import click
from fintrack.domain.account import AccountService
from fintrack.domain.category import CategoryService
from fintrack.domain.entities import Category
from fintrack.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, user_id: int, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, user_id, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_category_or_exit(
    ctx: click.Context, category_service: CategoryService, category: str
) -> Category:
    """Resolve a category by ID or case-insensitive name, or exit with a CLI error."""
    if category.strip().isdigit():
        category_obj = category_service.get_category(int(category))
        if category_obj is None:
            click.echo(f"Error: Category {category} not found", err=True)
            ctx.exit(1)
        return category_obj
    try:
        return category_service.require_category_by_name(category)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
