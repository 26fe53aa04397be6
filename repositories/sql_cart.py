from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import sessionmaker

from db import get_db_session, session_get, session_commit, session_rollback
from exceptions.cart import CartStorageException
from models.saved_cart import SavedCart
from repositories.cart_persistence import CartPersistence


class SqlCartPersistence(CartPersistence):
    """
    Database-backed cart storage (table saved_carts).

    Lets a buyer see the same cart on every device. Writes are plain upserts,
    the last device to save wins.
    """

    def __init__(self, session_maker: sessionmaker | async_sessionmaker):
        self.session_maker = session_maker

    async def load(self, key: str) -> str | None:
        try:
            async with get_db_session(self.session_maker) as session:
                saved_cart = await session_get(SavedCart, key, session)
                return saved_cart.payload if saved_cart else None
        except SQLAlchemyError as e:
            raise CartStorageException(key, "load", str(e)) from e

    async def save(self, key: str, serialized_cart: str) -> None:
        try:
            async with get_db_session(self.session_maker) as session:
                try:
                    saved_cart = await session_get(SavedCart, key, session)
                    if saved_cart is None:
                        session.add(SavedCart(storage_key=key, payload=serialized_cart))
                    else:
                        saved_cart.payload = serialized_cart
                    await session_commit(session)
                except SQLAlchemyError:
                    await session_rollback(session)
                    raise
        except SQLAlchemyError as e:
            raise CartStorageException(key, "save", str(e)) from e
