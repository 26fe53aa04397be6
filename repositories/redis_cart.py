from redis.asyncio import Redis
from redis.exceptions import RedisError

import config
from exceptions.cart import CartStorageException
from repositories.cart_persistence import CartPersistence


class RedisCartPersistence(CartPersistence):
    """
    Redis-backed cart storage.

    Usage:
        persistence = RedisCartPersistence(Redis(host=config.REDIS_HOST, password=config.REDIS_PASSWORD))
        store = await CartStore.restore(persistence, f"{config.CART_STORAGE_KEY}:{buyer_id}")
    """

    def __init__(self, redis: Redis, ttl_seconds: int | None = None):
        """
        Args:
            redis: Redis client
            ttl_seconds: Expiry of abandoned carts, defaults to config.CART_TTL_SECONDS (0 = never)
        """
        self.redis = redis
        self.ttl_seconds = config.CART_TTL_SECONDS if ttl_seconds is None else ttl_seconds

    async def load(self, key: str) -> str | None:
        try:
            data = await self.redis.get(key)
        except RedisError as e:
            raise CartStorageException(key, "load", str(e)) from e
        if isinstance(data, bytes):
            # Clients created without decode_responses=True return bytes
            return data.decode("utf-8", errors="replace")
        return data

    async def save(self, key: str, serialized_cart: str) -> None:
        try:
            await self.redis.set(key, serialized_cart, ex=self.ttl_seconds or None)
        except RedisError as e:
            raise CartStorageException(key, "save", str(e)) from e
