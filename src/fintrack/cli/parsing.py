"""CLI helpers for parsing amount and date arguments."""

from datetime import date
from decimal import Decimal

import click
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.date_parser import parse_date


def parse_amount_or_exit(ctx: click.Context, value: str) -> Decimal:
    """Parse an amount argument, or exit with a CLI error."""
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def parse_date_or_exit(ctx: click.Context, value: str) -> date:
    """Parse a date argument, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)
