from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool, NullPool
from lostfound.config import settings
from typing import AsyncGenerator
import logging

logger = logging.getLogger(__name__)

def engine_options(url: str) -> dict:
    """Pool settings for the configured store"""
    if url.startswith("sqlite"):
        # one shared connection keeps an in-memory database alive
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    if settings.is_testing:
        return {"poolclass": NullPool}
    return {
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_pre_ping": True,
    }

engine = create_async_engine(
    settings.database_url,
    echo=settings.DEBUG,
    **engine_options(settings.database_url)
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request; committed when the handler returns cleanly"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Request transaction rolled back: {e}")
            raise

async def init_db():
    """Create the users, posts, images, conversations and messages tables"""
    from lostfound.models import Base
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Schema ready: {', '.join(sorted(Base.metadata.tables))}")

async def close_db():
    await engine.dispose()
    logger.info("Database engine disposed")
