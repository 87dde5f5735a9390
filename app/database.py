import logging
from collections.abc import AsyncGenerator
from functools import lru_cache

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings

logger = logging.getLogger(__name__)

# The relational store is provisioned and wired, but no query operation reads
# or writes it. The engine is created on first use only.


def to_async_url(database_url: str) -> str:
    """Ensure a PostgreSQL URL uses the asyncpg driver."""
    if "+asyncpg" in database_url:
        return database_url
    for prefix in ("postgresql://", "postgres://"):
        if database_url.startswith(prefix):
            return database_url.replace(prefix, "postgresql+asyncpg://", 1)
    logger.warning(
        "DATABASE_URL scheme is not PostgreSQL; using it as-is for the async engine."
    )
    return database_url

@lru_cache
def get_engine() -> AsyncEngine:
    return create_async_engine(to_async_url(settings.DATABASE_URL), pool_pre_ping=True)

@lru_cache
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    session: AsyncSession = get_sessionmaker()()
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Database error in async session: {e}", exc_info=True)
        await session.rollback()
        raise
    except Exception as e:
        logger.error(f"Unexpected error in async session: {e}", exc_info=True)
        await session.rollback()
        raise
    finally:
        await session.close()


async def dispose_engine() -> None:
    """Dispose the engine if it was ever created."""
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
        get_engine.cache_clear()
        get_sessionmaker.cache_clear()
        logger.info("Database engine disposed.")
