from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
)

from busline.core import Settings
from busline.models import Base


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured DSN"""
    options = {
        "echo": settings.DB_ECHO,
        "pool_pre_ping": True,  # Enable connection health checks
    }
    if not settings.DB_DSN.startswith("sqlite"):
        options["pool_size"] = settings.DB_POOL_SIZE
    return create_async_engine(settings.DB_DSN, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables (development convenience; production uses Alembic)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
