"""
Cart persistence backends.

The cart engine only needs a durable key-value slot holding the serialized
cart. Backends implement CartPersistence and report failures as
CartStorageException, which CartStore turns into in-memory operation.

Available backends:
- InMemoryCartPersistence: dict-backed, for tests and as a fallback
- RedisCartPersistence (repositories/redis_cart.py): per-device carts with optional TTL
- SqlCartPersistence (repositories/sql_cart.py): server-side carts shared across devices

All backends are last-write-wins: concurrent writers to the same key simply
overwrite each other.
"""

from abc import ABC, abstractmethod


class CartPersistence(ABC):
    """Durable key-value slot for serialized carts."""

    @abstractmethod
    async def load(self, key: str) -> str | None:
        """
        Read the serialized cart stored under key.

        Returns:
            Serialized cart, or None if nothing is stored

        Raises:
            CartStorageException: If the backend cannot be read
        """

    @abstractmethod
    async def save(self, key: str, serialized_cart: str) -> None:
        """
        Store the serialized cart under key, replacing any previous value.

        Raises:
            CartStorageException: If the backend cannot be written
        """


class InMemoryCartPersistence(CartPersistence):
    def __init__(self, initial: dict[str, str] | None = None):
        self._entries: dict[str, str] = dict(initial or {})

    async def load(self, key: str) -> str | None:
        return self._entries.get(key)

    async def save(self, key: str, serialized_cart: str) -> None:
        self._entries[key] = serialized_cart
