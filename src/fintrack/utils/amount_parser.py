"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

CURRENCY_SYMBOLS = re.compile(r"R\$|US\$|[$€£¥]|\b[A-Z]{3}\b")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles both dot-decimal and comma-decimal (Brazilian) formats:
    - "123.45", "1,234.56", "$1,234.56"
    - "123,45", "1.234,56", "R$ 1.234,56"
    - "-123.45", "- R$ 50,00"
    - "(123.45)" (negative in parentheses)

    When both separators appear the last one is the decimal separator. A
    lone comma followed by exactly three digits is a thousands separator.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    original = amount_str
    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = CURRENCY_SYMBOLS.sub("", amount_str)
    amount_str = re.sub(r"\s+", "", amount_str)

    if amount_str.startswith("-"):
        is_negative = not is_negative
        amount_str = amount_str[1:]
    elif amount_str.startswith("+"):
        amount_str = amount_str[1:]

    amount_str = _normalize_separators(amount_str)

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{original}'") from None
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{original}'")
    return -amount if is_negative else amount


def _normalize_separators(value: str) -> str:
    last_dot = value.rfind(".")
    last_comma = value.rfind(",")

    if last_dot >= 0 and last_comma >= 0:
        if last_comma > last_dot:
            return value.replace(".", "").replace(",", ".")
        return value.replace(",", "")

    if last_comma >= 0:
        if value.count(",") == 1 and len(value) - last_comma - 1 != 3:
            return value.replace(",", ".")
        return value.replace(",", "")

    if value.count(".") > 1:
        return value.replace(".", "")
    return value
