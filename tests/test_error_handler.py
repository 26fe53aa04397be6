"""
Tests for Error Handler Utility

Tests the centralized error handling system that converts
custom exceptions to buyer-facing messages.
"""

import logging
from decimal import Decimal

from exceptions import (
    PhotoMarketException,
    CartException,
    EmptyCartException,
    InvalidCartItemException,
    CartStorageException,
    ConfigurationError,
    InvalidCommissionError,
    MissingPayoutAccountException,
    PaymentGatewayException,
)
from utils.error_handler import (
    handle_service_error,
    handle_unexpected_error,
    UNEXPECTED_ERROR_MESSAGE,
)


class TestErrorHandler:
    """Test error handling utility"""

    def test_empty_cart_exception(self):
        result = handle_service_error(EmptyCartException("album-1"))
        assert result == "There are no photos from this album in your cart."

    def test_invalid_cart_item_exception(self):
        result = handle_service_error(InvalidCartItemException("missing fields: title", item_id="p1"))
        assert result == "This photo could not be added to your cart."

    def test_storage_exception(self):
        result = handle_service_error(CartStorageException("cart:1", "save", "quota exceeded"))
        assert "could not be saved" in result

    def test_missing_payout_account(self):
        result = handle_service_error(MissingPayoutAccountException("ph-1"))
        assert result == "This photographer has not set up payments yet."

    def test_gateway_exception_with_reason_formatting(self):
        result = handle_service_error(PaymentGatewayException("Your card was declined.", 402))
        assert result == "Payment failed: Your card was declined."

    def test_pricing_errors_logged_as_errors(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = handle_service_error(InvalidCommissionError(Decimal("10.00"), Decimal("12.00")))

        assert result == "This album's pricing is not available right now."
        assert caplog.records[0].levelno == logging.ERROR

    def test_configuration_error(self):
        result = handle_service_error(ConfigurationError("duplicate tier threshold 5", "album-1"))
        assert "pricing is not available" in result

    def test_buyer_errors_logged_as_warnings(self, caplog):
        with caplog.at_level(logging.WARNING):
            handle_service_error(EmptyCartException("album-1"))

        assert caplog.records[0].levelno == logging.WARNING

    def test_unmapped_subclass_uses_generic_message(self):
        class CartLockedException(CartException):
            pass

        result = handle_service_error(CartLockedException("locked"))
        assert result == UNEXPECTED_ERROR_MESSAGE

    def test_unmapped_base_exception(self):
        assert handle_service_error(PhotoMarketException("boom")) == UNEXPECTED_ERROR_MESSAGE

    def test_mapped_subclass_uses_parent_message(self):
        class CardDeclinedException(PaymentGatewayException):
            pass

        result = handle_service_error(CardDeclinedException("insufficient funds", 402))
        assert result == "Payment failed: insufficient funds"

    def test_unexpected_error(self, caplog):
        with caplog.at_level(logging.ERROR):
            result = handle_unexpected_error(RuntimeError("database locked"))

        assert result == UNEXPECTED_ERROR_MESSAGE
        assert "database locked" in caplog.text


class TestExceptionContext:
    """Test structured context carried by the exceptions"""

    def test_to_dict_skips_missing_values(self):
        exc = InvalidCartItemException("photo id is empty")

        assert exc.to_dict() == {
            "error": "InvalidCartItemException",
            "message": "Invalid cart item (unknown): photo id is empty",
            "reason": "photo id is empty",
        }

    def test_to_dict_stringifies_amounts(self):
        exc = InvalidCommissionError(Decimal("10.00"), Decimal("12.00"))

        assert exc.to_dict()["commission_amount"] == "12.00"

    def test_repr_includes_details(self):
        exc = EmptyCartException("album-1")

        assert repr(exc) == "EmptyCartException('Cart has no photos from album album-1', album_id='album-1')"
        assert str(exc) == "Cart has no photos from album album-1"

    def test_all_engine_errors_share_the_base(self):
        assert issubclass(CartStorageException, CartException)
        assert issubclass(MissingPayoutAccountException, PhotoMarketException)
