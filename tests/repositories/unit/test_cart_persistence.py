"""
Unit Tests: Cart persistence backends

- RedisCartPersistence against fakeredis
- SqlCartPersistence against in-memory SQLite (aiosqlite)
- CartStore on top of both, including multi-device restore
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import sessionmaker

from db import create_session_maker, create_tables
from exceptions.cart import CartStorageException
from repositories.redis_cart import RedisCartPersistence
from repositories.sql_cart import SqlCartPersistence
from services.cart import CartStore


class TestRedisCartPersistence:

    @pytest.mark.asyncio
    async def test_round_trip(self, redis_client):
        persistence = RedisCartPersistence(redis_client, ttl_seconds=0)

        assert await persistence.load("cart:1") is None
        await persistence.save("cart:1", '{"items": []}')

        assert await persistence.load("cart:1") == '{"items": []}'

    @pytest.mark.asyncio
    async def test_ttl(self, redis_client):
        await RedisCartPersistence(redis_client, ttl_seconds=3600).save("cart:ttl", "{}")
        await RedisCartPersistence(redis_client, ttl_seconds=0).save("cart:forever", "{}")

        assert 0 < await redis_client.ttl("cart:ttl") <= 3600
        assert await redis_client.ttl("cart:forever") == -1

    @pytest.mark.asyncio
    async def test_bytes_are_decoded(self):
        redis = AsyncMock()
        redis.get.return_value = b'{"items": []}'

        assert await RedisCartPersistence(redis).load("cart:1") == '{"items": []}'

    @pytest.mark.asyncio
    async def test_redis_errors_are_wrapped(self):
        redis = AsyncMock()
        redis.get.side_effect = RedisConnectionError("Connection refused")
        redis.set.side_effect = RedisConnectionError("Connection refused")
        persistence = RedisCartPersistence(redis)

        with pytest.raises(CartStorageException) as exc_info:
            await persistence.load("cart:1")
        assert exc_info.value.operation == "load"

        with pytest.raises(CartStorageException) as exc_info:
            await persistence.save("cart:1", "{}")
        assert exc_info.value.operation == "save"

    @pytest.mark.asyncio
    async def test_store_survives_redis_outage(self, flat_album, photo_factory):
        redis = AsyncMock()
        redis.get.return_value = None
        redis.set.side_effect = RedisConnectionError("Connection refused")

        store = await CartStore.restore(RedisCartPersistence(redis), "cart:1")
        await store.add_item(photo_factory("p1"), flat_album)

        assert store.count() == 1
        assert store.is_persistent is False

    @pytest.mark.asyncio
    async def test_store_round_trip(self, redis_client, tiered_album, photo_factory):
        persistence = RedisCartPersistence(redis_client)
        store = await CartStore.restore(persistence, "cart:buyer-1")
        for photo_id in ("p1", "p2", "p3", "p4", "p5"):
            await store.add_item(photo_factory(photo_id), tiered_album)

        restored = await CartStore.restore(persistence, "cart:buyer-1")

        assert restored.items == store.items
        assert restored.total() == Decimal("40.00")


class TestSqlCartPersistence:

    @pytest.mark.asyncio
    async def test_round_trip(self, test_session_maker):
        persistence = SqlCartPersistence(test_session_maker)

        assert await persistence.load("cart:1") is None
        await persistence.save("cart:1", '{"items": []}')

        assert await persistence.load("cart:1") == '{"items": []}'

    @pytest.mark.asyncio
    async def test_save_overwrites(self, test_session_maker):
        persistence = SqlCartPersistence(test_session_maker)

        await persistence.save("cart:1", '{"version": 1}')
        await persistence.save("cart:1", '{"version": 2}')

        assert await persistence.load("cart:1") == '{"version": 2}'

    @pytest.mark.asyncio
    async def test_database_errors_are_wrapped(self):
        session_maker = MagicMock(side_effect=OperationalError("SELECT", {}, Exception("no such table")))
        persistence = SqlCartPersistence(session_maker)

        with pytest.raises(CartStorageException):
            await persistence.load("cart:1")

    @pytest.mark.asyncio
    async def test_cart_follows_buyer_across_devices(self, test_session_maker, flat_album, tiered_album, photo_factory):
        """Two devices share the key; the last write wins"""
        laptop = await CartStore.restore(SqlCartPersistence(test_session_maker), "cart:buyer-7")
        await laptop.add_item(photo_factory("p1"), tiered_album)

        phone = await CartStore.restore(SqlCartPersistence(test_session_maker), "cart:buyer-7")
        assert phone.contains("p1")
        await phone.add_item(photo_factory("f1"), flat_album)

        # Laptop works on its stale copy and overwrites the phone's addition
        await laptop.add_item(photo_factory("p2"), tiered_album)

        reopened = await CartStore.restore(SqlCartPersistence(test_session_maker), "cart:buyer-7")
        assert [item.item_id for item in reopened.items] == ["p1", "p2"]


class TestSessionMakers:

    def test_async_driver_gets_async_session_maker(self):
        assert isinstance(create_session_maker("sqlite+aiosqlite:///:memory:"), async_sessionmaker)

    def test_sync_driver_gets_sync_session_maker(self):
        session_maker = create_session_maker("sqlite://")
        assert isinstance(session_maker, sessionmaker)
        assert not isinstance(session_maker, async_sessionmaker)

    @pytest.mark.asyncio
    async def test_sql_backend_with_sync_session(self):
        session_maker = create_session_maker("sqlite://")
        await create_tables(session_maker.kw["bind"])
        persistence = SqlCartPersistence(session_maker)

        await persistence.save("cart:sync", '{"version": 1}')

        assert await persistence.load("cart:sync") == '{"version": 1}'
