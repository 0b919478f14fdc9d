"""Category suggestion command."""

import click
from fintrack.cli.context import current_user_id
from fintrack.domain.categorizer import CategorizerService


@click.command("suggest-category")
@click.argument("description")
@click.pass_context
def suggest_category(ctx, description: str):
    """Suggest a category for DESCRIPTION from your past transactions.

    Examples:
        fintrack suggest-category "UBER *TRIP"
    """
    suggestion = CategorizerService(ctx.obj["db"]).suggest(current_user_id(ctx), description)
    if suggestion is None:
        click.echo("No suggestion: no similar past transaction found.")
        return
    click.echo(
        f"Suggested category: {suggestion.category_name} (ID {suggestion.category_id}, "
        f"confidence {suggestion.confidence:.0%})"
    )


def register_commands(cli):
    """Register category suggestion command with main CLI."""
    cli.add_command(suggest_category)
