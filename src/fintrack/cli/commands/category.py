"""Category commands."""

import click
from fintrack.domain.category import CategoryService
from fintrack.domain.entities import CategoryKind


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--kind", type=click.Choice([k.value for k in CategoryKind]), help="Only this kind")
@click.pass_context
def list_categories(ctx, kind: str | None):
    """List categories."""
    categories = CategoryService(ctx.obj["db"]).list_categories(kind=kind)
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    click.echo("-" * 40)
    for cat in categories:
        click.echo(f"ID: {cat.id:3d} | {cat.name:20s} | {cat.kind.value}")


@category_group.command("init")
@click.pass_context
def init_categories(ctx):
    """Create any missing default category."""
    created = CategoryService(ctx.obj["db"]).ensure_default_categories()
    if created:
        click.echo(f"Created {created} categories")
    else:
        click.echo("Default categories already exist")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
