from contextlib import asynccontextmanager

from sqlalchemy import Engine, create_engine
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession, AsyncEngine
from sqlalchemy.orm import sessionmaker, Session

from models.base import Base
"""
Imports of these models are needed to correctly create tables in the database.
For more information see https://stackoverflow.com/questions/7478403/sqlalchemy-classes-across-files
"""
from models.saved_cart import SavedCart

# HARD DISABLE SQL echo, statements would drown the cart logs
sql_echo = False


def create_session_maker(url: str) -> sessionmaker | async_sessionmaker:
    """
    Build a session factory for the given database URL.

    Async drivers (e.g. sqlite+aiosqlite, postgresql+asyncpg) get an
    async_sessionmaker, everything else a plain sessionmaker.
    """
    if "+aiosqlite" in url or "+asyncpg" in url or "+aiomysql" in url:
        engine = create_async_engine(url, echo=sql_echo)
        return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    engine = create_engine(url, echo=sql_echo)
    return sessionmaker(engine, expire_on_commit=False)


@asynccontextmanager
async def get_db_session(session_maker: sessionmaker | async_sessionmaker) -> AsyncSession | Session:
    session = None
    try:
        if isinstance(session_maker, async_sessionmaker):
            async with session_maker() as async_session:
                session = async_session
                yield session
        else:
            with session_maker() as sync_session:
                session = sync_session
                yield session
    finally:
        if isinstance(session, AsyncSession):
            await session.close()
        elif isinstance(session, Session):
            session.close()


async def create_tables(engine: Engine | AsyncEngine) -> None:
    if isinstance(engine, AsyncEngine):
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    else:
        Base.metadata.create_all(engine)


async def session_get(model, primary_key, session: AsyncSession | Session):
    if isinstance(session, AsyncSession):
        return await session.get(model, primary_key)
    else:
        return session.get(model, primary_key)


async def session_commit(session: AsyncSession | Session) -> None:
    if isinstance(session, AsyncSession):
        await session.commit()
    else:
        session.commit()


async def session_rollback(session: AsyncSession | Session) -> None:
    if isinstance(session, AsyncSession):
        await session.rollback()
    else:
        session.rollback()
