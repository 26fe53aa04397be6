"""
Payment-related exceptions.
"""

from .base import PhotoMarketException


class PaymentException(PhotoMarketException):
    """Base exception for payment-related errors."""
    pass


class MissingPayoutAccountException(PaymentException):
    """Raised when the photographer has no connected account to receive the transfer."""

    def __init__(self, photographer_id: str):
        super().__init__(
            f"Photographer {photographer_id} has no payout account",
            details={'photographer_id': photographer_id}
        )
        self.photographer_id = photographer_id


class PaymentGatewayException(PaymentException):
    """Raised when the payment gateway rejects a request or cannot be reached."""

    def __init__(self, reason: str, status_code: int | None = None):
        if status_code:
            message = f"Payment gateway error (HTTP {status_code}): {reason}"
        else:
            message = f"Payment gateway error: {reason}"
        super().__init__(message, details={'status_code': status_code, 'reason': reason})
        self.status_code = status_code
        self.reason = reason
