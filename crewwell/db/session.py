import asyncio
import logging
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from crewwell.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def normalize_database_url(url: str) -> str:
    """
    Force the async driver for plain postgres URLs.
    """
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


@lru_cache
def get_engine(database_url: str) -> AsyncEngine:
    url = normalize_database_url(database_url)
    logger.info("Creating database engine for %s...", url.split("@")[-1][:50])
    return create_async_engine(url, poolclass=NullPool, pool_pre_ping=True, echo=False)


def get_sessionmaker(settings: Settings) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(get_engine(settings.DATABASE_URL), expire_on_commit=False, class_=AsyncSession)


async def get_db(settings: Settings = Depends(get_settings)) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session, retrying transient network failures on open.
    """
    max_retries = 3
    retry_delay = 1

    for attempt in range(max_retries):
        session = get_sessionmaker(settings)()
        try:
            await session.connection()
        except OSError as e:
            await session.close()
            if attempt < max_retries - 1:
                logger.warning("Database connection issue, attempt %s/%s. Retrying in %ss... Error: %s", attempt + 1, max_retries, retry_delay, e)
                await asyncio.sleep(retry_delay)
                retry_delay *= 2
                continue
            logger.error("Database connection failed after %s attempts: %s", max_retries, e)
            raise
        async with session:
            yield session
        return
