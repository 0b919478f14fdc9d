"""CLI helpers for date range resolution."""

from datetime import date

import click

from fintrack.utils.date_parser import get_date_range, parse_date

# Flag name -> period understood by get_date_range
PERIOD_FLAGS = {
    "this_month": "this-month",
    "last_3_months": "3-months",
    "last_6_months": "6-months",
    "this_year": "this-year",
    "this_week": "this-week",
    "last_week": "last-week",
    "last_month": "last-month",
    "last_year": "last-year",
}


def period_options(command):
    """Add --start-date/--end-date and the period flags to a command."""
    options = [
        click.option(
            "--start-date", help="Start date (YYYY-MM-DD, DD/MM/YYYY or relative like 'last month')"
        ),
        click.option("--end-date", help="End date (YYYY-MM-DD, DD/MM/YYYY or relative like 'today')"),
        click.option("--this-month", is_flag=True, help="Filter to current month"),
        click.option("--last-3-months", is_flag=True, help="Filter to the last 3 months"),
        click.option("--last-6-months", is_flag=True, help="Filter to the last 6 months"),
        click.option("--this-year", is_flag=True, help="Filter to current year"),
        click.option("--this-week", is_flag=True, help="Filter to current week"),
        click.option("--last-week", is_flag=True, help="Filter to previous week"),
        click.option("--last-month", is_flag=True, help="Filter to previous month"),
        click.option("--last-year", is_flag=True, help="Filter to previous year"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def pop_period_flags(kwargs: dict) -> dict[str, bool]:
    """Remove the period flags from command kwargs, keyed by period name."""
    return {period: bool(kwargs.pop(flag, False)) for flag, period in PERIOD_FLAGS.items()}


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo("Error: Only one period option can be specified at a time.", err=True)
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --this-year, etc.) cannot be combined "
            "with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    start = None
    end = None

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                start, end = get_date_range(period)
                break
    else:
        if start_date:
            try:
                start = parse_date(start_date)
            except ValueError as e:
                click.echo(f"Error: Invalid start date: {e}", err=True)
                ctx.exit(1)

        if end_date:
            try:
                end = parse_date(end_date)
            except ValueError as e:
                click.echo(f"Error: Invalid end date: {e}", err=True)
                ctx.exit(1)

        if start is None and end is None and default_range is not None:
            start, end = default_range

    return start, end
