"""Async SQLAlchemy engine, session factory and FastAPI session dependency.

The relational store is the Supabase project's Postgres database. Every
repository receives an ``AsyncSession`` produced here.
"""

from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from tailormate.core.config import settings
from tailormate.utils.logging import get_logger

LOGGER = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


# Create async engine
engine = create_async_engine(
    settings.database_url,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    echo=settings.database_echo,
    # Disable prepared statement cache for PgBouncer (Supabase pooler) compatibility
    connect_args={"statement_cache_size": 0},
)

# Create async session factory
async_session_maker = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting async database session.

    Yields:
        AsyncSession: Database session
    """
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def ping(session: AsyncSession) -> None:
    """Round-trip ``SELECT 1``; raises when the database is unreachable."""
    await session.execute(text("SELECT 1"))


async def init_database(auto_create: bool = False) -> None:
    """Check connectivity and optionally create missing tables.

    Alembic owns the schema; ``auto_create`` is for local development only.
    """
    LOGGER.info("Initializing database connection...")
    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        if auto_create:
            # Register every model on Base.metadata
            from tailormate.database import models  # noqa: F401

            await conn.run_sync(Base.metadata.create_all)
            LOGGER.info("Database tables created/verified")

    LOGGER.info("Database initialization completed")


async def close_database() -> None:
    """Dispose of the engine's connection pool."""
    await engine.dispose()
    LOGGER.info("Database connection closed")
