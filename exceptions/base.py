"""
Root of the cart engine's exception hierarchy.
"""


class PhotoMarketException(Exception):
    """
    Common parent of cart, pricing and payment errors.

    Callers that only need to tell engine failures from programming errors
    catch this one class.

    Attributes:
        message: Text suitable for logs (not for buyers, see utils.error_handler)
        details: Structured context such as album_id, storage_key or amounts
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        """Serializable form for structured logs and API error bodies."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            **{key: str(value) for key, value in self.details.items() if value is not None}
        }

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        context = ''.join(f", {key}={value!r}" for key, value in self.details.items())
        return f"{self.__class__.__name__}({self.message!r}{context})"
