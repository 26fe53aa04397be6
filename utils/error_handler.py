"""
Error Handler Utility for the application shell

Provides centralized error handling for UI event handlers with:
- Consistent buyer-facing messages
- Automatic exception to message mapping
- Logging for debugging

Usage in handlers:
    from utils.error_handler import handle_service_error

    try:
        session = await CheckoutService.checkout_album(...)
    except PhotoMarketException as e:
        show_alert(handle_service_error(e))
"""

import logging

from exceptions import (
    PhotoMarketException,
    EmptyCartException,
    InvalidCartItemException,
    CartStorageException,
    ConfigurationError,
    InvalidCommissionError,
    MissingPayoutAccountException,
    PaymentGatewayException,
)

ERROR_MESSAGES = {
    # Cart exceptions
    EmptyCartException: "There are no photos from this album in your cart.",
    InvalidCartItemException: "This photo could not be added to your cart.",
    CartStorageException: "Your cart could not be saved. It will be kept until you close this page.",

    # Pricing exceptions (configuration bugs, buyer sees a generic message)
    ConfigurationError: "This album's pricing is not available right now.",
    InvalidCommissionError: "This album's pricing is not available right now.",

    # Payment exceptions
    MissingPayoutAccountException: "This photographer has not set up payments yet.",
    PaymentGatewayException: "Payment failed: {reason}",
}

UNEXPECTED_ERROR_MESSAGE = "Something went wrong. Please try again."


def handle_service_error(exception: PhotoMarketException) -> str:
    """
    Convert service exception to a buyer-facing error message.

    Args:
        exception: The custom exception raised by a service

    Returns:
        Error message string

    Example:
        try:
            await CheckoutService.checkout_album(store, album_id, None, gateway)
        except MissingPayoutAccountException as e:
            message = handle_service_error(e)
            # "This photographer has not set up payments yet."
    """
    # Pricing errors are bugs, not buyer errors
    if isinstance(exception, (ConfigurationError, InvalidCommissionError)):
        logging.error(f"Service error handled: {exception.to_dict()}")
    else:
        logging.warning(f"Service error handled: {exception.to_dict()}")

    # Most specific mapped class wins
    template = None
    for exception_class in type(exception).__mro__:
        if exception_class in ERROR_MESSAGES:
            template = ERROR_MESSAGES[exception_class]
            break

    if template is None:
        logging.error(f"Unmapped exception type: {type(exception).__name__}")
        return UNEXPECTED_ERROR_MESSAGE

    exception_data = {}
    if hasattr(exception, 'reason'):
        exception_data['reason'] = exception.reason
    if hasattr(exception, 'album_id'):
        exception_data['album_id'] = exception.album_id

    try:
        return template.format(**exception_data)
    except KeyError as e:
        # Missing formatting parameter - log and return without formatting
        logging.error(f"Missing format parameter in error message: {e}")
        return template


def handle_unexpected_error(exception: Exception) -> str:
    """
    Handle unexpected exceptions (non-PhotoMarketException).

    Note:
        Also logs the full exception for debugging
    """
    logging.error(f"Unexpected error: {type(exception).__name__} - {str(exception)}", exc_info=True)
    return UNEXPECTED_ERROR_MESSAGE
