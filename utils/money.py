"""
Money conversion helpers.

All pricing arithmetic runs on integer minor units (cents). Decimal amounts
only appear at the edges: prices coming from the album data service and
amounts shown to buyers.

Rounding is ROUND_HALF_UP, i.e. half away from zero for positive amounts:
    to_minor_units(Decimal("0.125")) == 13
"""

from decimal import Decimal, ROUND_HALF_UP

import config
from enums.currency import Currency


def _as_decimal(amount: Decimal | int | float | str) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        # str() gives the shortest repr, so 0.1 becomes Decimal("0.1")
        return Decimal(str(amount))
    return Decimal(amount)


def to_minor_units(amount: Decimal | int | float | str, currency: Currency | None = None) -> int:
    """
    Convert a major-unit amount to integer minor units.

    Args:
        amount: Amount in major units (e.g., Decimal("12.50") dollars)
        currency: Currency whose exponent is used, defaults to config.CURRENCY

    Returns:
        Integer minor units (e.g., 1250 cents)
    """
    currency = currency or config.CURRENCY
    scaled = _as_decimal(amount).scaleb(currency.get_exponent())
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_minor_units(minor_units: int, currency: Currency | None = None) -> Decimal:
    """Convert integer minor units back to a Decimal with the currency's precision."""
    currency = currency or config.CURRENCY
    exponent = currency.get_exponent()
    return Decimal(minor_units).scaleb(-exponent).quantize(Decimal(1).scaleb(-exponent))


def format_money(minor_units: int, currency: Currency | None = None) -> str:
    """Format minor units for display, e.g. 1250 -> "$12.50"."""
    currency = currency or config.CURRENCY
    return f"{currency.get_symbol()}{from_minor_units(minor_units, currency):,}"
