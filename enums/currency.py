from enum import Enum


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CHF = "CHF"
    JPY = "JPY"

    def get_exponent(self) -> int:
        """
        Returns the number of decimal places of the currency's minor unit.

        Payment gateways expect amounts in minor units (cents for USD/EUR),
        JPY has no minor unit.
        """
        match self:
            case Currency.JPY:
                return 0
            case _:
                return 2

    def get_symbol(self) -> str:
        match self:
            case Currency.USD:
                return "$"
            case Currency.EUR:
                return "€"
            case Currency.GBP:
                return "£"
            case Currency.CHF:
                return "CHF "
            case Currency.JPY:
                return "¥"
