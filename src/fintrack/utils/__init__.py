"""Utility functions for fintrack."""

from fintrack.utils.date_parser import parse_date, get_date_range
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.money import format_money, to_cents

__all__ = ["parse_date", "get_date_range", "parse_amount", "format_money", "to_cents"]
