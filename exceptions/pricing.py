"""
Pricing-related exceptions.

Both indicate a bug in pricing configuration or in a commission function,
not a buyer error, so they propagate to the caller.
"""

from decimal import Decimal

from .base import PhotoMarketException


class PricingException(PhotoMarketException):
    """Base exception for pricing-related errors."""
    pass


class ConfigurationError(PricingException):
    """Raised when a pricing package or album price breaks the pricing contract."""

    def __init__(self, reason: str, album_id: str | None = None):
        if album_id:
            message = f"Invalid pricing configuration for album {album_id}: {reason}"
        else:
            message = f"Invalid pricing configuration: {reason}"
        super().__init__(message, details={'album_id': album_id, 'reason': reason})
        self.album_id = album_id
        self.reason = reason


class InvalidCommissionError(PricingException):
    """Raised when a commission function returns a value outside 0..gross."""

    def __init__(self, gross_amount: Decimal, commission_amount: Decimal):
        super().__init__(
            f"Invalid commission: {commission_amount} is outside 0..{gross_amount}",
            details={'gross_amount': gross_amount, 'commission_amount': commission_amount}
        )
        self.gross_amount = gross_amount
        self.commission_amount = commission_amount
