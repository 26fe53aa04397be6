"""
Cart-related exceptions.
"""

from .base import PhotoMarketException


class CartException(PhotoMarketException):
    """Base exception for cart-related errors."""
    pass


class EmptyCartException(CartException):
    """Raised when trying to checkout an album with no photos in the cart."""

    def __init__(self, album_id: str | None = None):
        if album_id:
            message = f"Cart has no photos from album {album_id}"
            details = {'album_id': album_id}
        else:
            message = "Cart is empty"
            details = {}
        super().__init__(message, details)
        self.album_id = album_id


class InvalidCartItemException(CartException):
    """Raised when a photo or album is missing fields required to build a cart item."""

    def __init__(self, reason: str, item_id: str | None = None):
        super().__init__(
            f"Invalid cart item {item_id or '(unknown)'}: {reason}",
            details={'item_id': item_id, 'reason': reason}
        )
        self.item_id = item_id
        self.reason = reason


class CartStorageException(CartException):
    """
    Raised by persistence backends when the cart cannot be read or written.

    CartStore catches it and continues in memory, so it never reaches the buyer.
    """

    def __init__(self, storage_key: str, operation: str, reason: str):
        super().__init__(
            f"Cart storage {operation} failed for key {storage_key}: {reason}",
            details={'storage_key': storage_key, 'operation': operation, 'reason': reason}
        )
        self.storage_key = storage_key
        self.operation = operation
        self.reason = reason
