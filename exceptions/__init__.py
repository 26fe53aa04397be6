"""
Custom exceptions for the PhotoMarket cart engine.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the engine.

Exception Hierarchy:
--------------------
PhotoMarketException (base)
├── CartException
│   ├── EmptyCartException
│   ├── InvalidCartItemException
│   └── CartStorageException
├── PricingException
│   ├── ConfigurationError
│   └── InvalidCommissionError
└── PaymentException
    ├── MissingPayoutAccountException
    └── PaymentGatewayException

Usage:
------
Services raise specific exceptions:
    raise MissingPayoutAccountException(photographer_id="ph_1")

The application shell catches and displays user-friendly messages:
    try:
        session = await CheckoutService.checkout_album(...)
    except PhotoMarketException as e:
        show_alert(handle_service_error(e))
"""

from .base import PhotoMarketException
from .cart import CartException, EmptyCartException, InvalidCartItemException, CartStorageException
from .pricing import PricingException, ConfigurationError, InvalidCommissionError
from .payment import PaymentException, MissingPayoutAccountException, PaymentGatewayException

__all__ = [
    # Base
    'PhotoMarketException',

    # Cart
    'CartException',
    'EmptyCartException',
    'InvalidCartItemException',
    'CartStorageException',

    # Pricing
    'PricingException',
    'ConfigurationError',
    'InvalidCommissionError',

    # Payment
    'PaymentException',
    'MissingPayoutAccountException',
    'PaymentGatewayException',
]
