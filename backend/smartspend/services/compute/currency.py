"""Currency formatting for user-visible insight messages."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from ...config import CURRENCY_SYMBOL

CurrencyFormatter = Callable[[float], str]


def format_currency(amount: float, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format an amount as '<symbol>1,234.56'."""
    return f"{symbol}{amount:,.2f}"


def make_formatter(symbol: str) -> CurrencyFormatter:
    """Bind a symbol so the result can be injected into the generators."""
    return lambda amount: format_currency(amount, symbol)


def format_number(value: float) -> str:
    """Render a percentage the way it reads in prose: 25 -> '25', 33.333 -> '33.33'."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_whole_percent(value: float) -> str:
    """Round half up to a whole number: 62.5 -> '63'."""
    return str(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
