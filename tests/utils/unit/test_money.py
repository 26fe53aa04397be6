"""
Unit Tests: money helpers (utils/money.py)
"""

from decimal import Decimal

import pytest

from enums.currency import Currency
from utils.money import to_minor_units, from_minor_units, format_money


class TestToMinorUnits:

    @pytest.mark.parametrize("amount, expected", [
        (Decimal("12.50"), 1250),
        (Decimal("0.125"), 13),
        (Decimal("0.124"), 12),
        ("19.99", 1999),
        (0.1, 10),
        (0.29, 29),
        (7, 700),
    ])
    def test_usd(self, amount, expected):
        assert to_minor_units(amount, Currency.USD) == expected

    def test_zero_exponent_currency(self):
        assert to_minor_units(Decimal("1500.5"), Currency.JPY) == 1501

    def test_default_currency_from_config(self):
        assert to_minor_units(Decimal("1.00")) == 100


class TestFromMinorUnits:

    def test_precision(self):
        assert str(from_minor_units(1250, Currency.EUR)) == "12.50"
        assert str(from_minor_units(0, Currency.EUR)) == "0.00"
        assert str(from_minor_units(1500, Currency.JPY)) == "1500"


class TestFormatMoney:

    @pytest.mark.parametrize("minor_units, currency, expected", [
        (1250, Currency.USD, "$12.50"),
        (123450, Currency.USD, "$1,234.50"),
        (800, Currency.EUR, "€8.00"),
    ])
    def test_format(self, minor_units, currency, expected):
        assert format_money(minor_units, currency) == expected
