"""Database connection and session management."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from employee_api.config import Settings, get_settings
from employee_api.models.orm import Base


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database."""
    engine_kwargs: dict[str, Any] = {
        # Security: Never echo SQL statements as they may contain sensitive data
        "echo": False,
    }
    if not settings.is_sqlite:
        engine_kwargs.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            # Validate connections before checkout to detect stale connections
            pool_pre_ping=True,
            # Recycle connections after 1 hour (important for cloud proxies)
            pool_recycle=3600,
        )
    return create_async_engine(settings.async_database_url, **engine_kwargs)


settings = get_settings()

engine = build_engine(settings)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency.

    One session per request; it is the unit-of-work boundary. Work that
    was not committed (error or cancellation) is rolled back on close.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except SQLAlchemyError:
            await session.rollback()
            raise


async def create_schema(bind: AsyncEngine | None = None) -> None:
    """Create all tables that do not exist yet."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
