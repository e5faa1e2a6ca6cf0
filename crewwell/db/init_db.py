import asyncio
import logging

from crewwell.core.config import get_settings
from crewwell.db.models import Base
from crewwell.db.session import get_engine

logger = logging.getLogger(__name__)


async def init_db(database_url: str) -> None:
    """Create tables directly from the models (local development without alembic)."""
    try:
        async with get_engine(database_url).begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database: %s", e)
        raise


if __name__ == "__main__":
    asyncio.run(init_db(get_settings().DATABASE_URL))
