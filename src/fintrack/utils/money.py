"""Money formatting helpers."""

from decimal import Decimal, ROUND_HALF_UP

CURRENCY_SYMBOLS = {"BRL": "R$", "USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥"}

CENT = Decimal("0.01")


def to_cents(amount: Decimal | int | str) -> Decimal:
    """Round a money amount to whole cents, half up, as the database stores it."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal, currency: str = "BRL") -> str:
    """Format an amount for display, e.g. "R$ 1.234,56" or "$ -1,234.56".

    BRL uses the Brazilian separators; other currencies use dot decimals.
    """
    amount = to_cents(amount)
    text = f"{amount:,.2f}"
    if currency == "BRL":
        text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{symbol} {text}"
