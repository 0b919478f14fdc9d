"""Per-invocation CLI state: the acting user and display currency."""

import click

from fintrack.domain.preferences import PreferencesService
from fintrack.domain.user import UserService


def current_user_id(ctx: click.Context) -> int:
    """ID of the profile named by --user, creating it on first use."""
    obj = ctx.find_root().obj
    if "user_id" not in obj:
        user = UserService(obj["db"]).get_or_create_user(obj["user_name"])
        obj["user_id"] = user.id
    return obj["user_id"]


def current_currency(ctx: click.Context) -> str:
    obj = ctx.find_root().obj
    return PreferencesService(obj["db"]).get_preferences(current_user_id(ctx)).currency
