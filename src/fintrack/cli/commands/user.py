"""User profile commands."""

import click
from fintrack.cli.context import current_user_id
from fintrack.domain.user import UserService


@click.group()
def user_group():
    """Manage user profiles."""
    pass


@user_group.command("create")
@click.argument("name")
@click.option("--email", help="Email address")
@click.pass_context
def create_user(ctx, name: str, email: str | None):
    """Create a user profile.

    Examples:
        fintrack user create "alice" --email alice@example.com
    """
    service = UserService(ctx.obj["db"])
    try:
        user_id = service.create_user(name=name, email=email)
        click.echo(f"Created user '{name}' (ID: {user_id})")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List all user profiles."""
    users = UserService(ctx.obj["db"]).list_users()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\nUsers:")
    click.echo("-" * 60)
    for user in users:
        marker = "*" if user.name == ctx.obj["user_name"] else " "
        click.echo(f"{marker} ID: {user.id:3d} | {user.name:20s} | {user.email or ''}")


@user_group.command("whoami")
@click.pass_context
def whoami(ctx):
    """Show the active profile."""
    user = UserService(ctx.obj["db"]).get_user(current_user_id(ctx))
    click.echo(f"{user.name} (ID: {user.id})")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
