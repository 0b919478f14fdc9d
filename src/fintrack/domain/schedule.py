"""Due-date and installment arithmetic for recurring items.

Recurring bills and incomes repeat monthly on a day of the month. A bill
may be an installment plan: installment k (1-based) falls in calendar month
``start + k - 1``. Nothing here touches the database.
"""

from calendar import monthrange
from datetime import date, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta


def months_between(start: date, end: date) -> int:
    """Whole months elapsed from start to end.

    Day sensitive: Jan 15 to Feb 14 is 0 months, Jan 15 to Feb 15 is 1.
    Negative when end is before start.
    """
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def due_date_in_month(day_of_month: int, year: int, month: int) -> date:
    """Due date in a month, clamped to the month's last day."""
    last_day = monthrange(year, month)[1]
    return date(year, month, min(day_of_month, last_day))


def month_offset(start: date, year: int, month: int) -> int:
    """Calendar-month distance from start's month to (year, month)."""
    return (year - start.year) * 12 + (month - start.month)


def is_active_in_month(
    start_date: date, installments: Optional[int], year: int, month: int
) -> bool:
    """Whether a recurring item has a due date in the given month."""
    offset = month_offset(start_date, year, month)
    if offset < 0:
        return False
    if installments is None:
        return True
    return offset < installments


def next_due_date(
    day_of_month: int,
    today: date,
    start_date: Optional[date] = None,
    installments: Optional[int] = None,
) -> Optional[date]:
    """Next due date on or after today.

    Returns None when an installment plan has no installment left.
    """
    year, month = today.year, today.month
    if start_date is not None and month_offset(start_date, year, month) < 0:
        year, month = start_date.year, start_date.month

    due = due_date_in_month(day_of_month, year, month)
    if due < today:
        following = date(year, month, 1) + relativedelta(months=1)
        due = due_date_in_month(day_of_month, following.year, following.month)

    if start_date is not None and not is_active_in_month(
        start_date, installments, due.year, due.month
    ):
        return None
    return due


def is_due_within(
    day_of_month: int,
    today: date,
    days: int,
    start_date: Optional[date] = None,
    installments: Optional[int] = None,
) -> bool:
    """Whether the next due date falls in [today, today + days]."""
    due = next_due_date(day_of_month, today, start_date, installments)
    return due is not None and due <= today + timedelta(days=days)


def month_start(day: date) -> date:
    return day.replace(day=1)


def add_months(day: date, months: int) -> date:
    return day + relativedelta(months=months)


def month_end(day: date) -> date:
    return day.replace(day=monthrange(day.year, day.month)[1])
