"""Currency formatting for South African Rand (ZAR)."""
from kitchen.utilities.constants import CURRENCY_SYMBOL


def format_zar(amount) -> str:
    """Format a numeric amount as ZAR, e.g. 1234.5 -> 'R 1 234.50'."""
    value = round(float(amount), 2)
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,.2f}".replace(",", " ")
    return f"{sign}{CURRENCY_SYMBOL} {grouped}"


__all__ = ["format_zar"]
