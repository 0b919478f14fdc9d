"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

PERIODS = [
    "this-month",
    "3-months",
    "6-months",
    "this-year",
    "this-week",
    "last-week",
    "last-month",
    "last-year",
]


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "15/01/2024", "January 15, 2024", etc.
      Slash-separated dates are read day first.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats
        today: Reference day for relative dates (defaults to the current date)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # Handle "last/this/next" + time period
    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            # Monday of last week
            return today - timedelta(days=today.weekday() + 7)
        elif period in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7
            if days_ago == 0:
                days_ago = 7
            return today - timedelta(days=days_ago)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    elif date_str.startswith("next "):
        period = date_str[5:]
        if period == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=1)
        elif period == "week":
            return today + timedelta(days=(7 - today.weekday()))

    # Try parsing as absolute date
    try:
        return date_parser.parse(date_str, dayfirst="/" in date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from None


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Args:
        period: One of PERIODS. "3-months" and "6-months" span the current
            month and the two (five) before it.
        today: Reference day (defaults to the current date)

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return (today.replace(day=1), today)

    elif period == "3-months":
        return ((today - relativedelta(months=2)).replace(day=1), today)

    elif period == "6-months":
        return ((today - relativedelta(months=5)).replace(day=1), today)

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    elif period == "this-week":
        return (today - timedelta(days=today.weekday()), today)

    elif period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        # Day before the first day of the current month
        end_date = today.replace(day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        end_date = today.replace(month=1, day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-week":
        start_date = today - timedelta(days=today.weekday() + 7)
        return (start_date, start_date + timedelta(days=6))

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
