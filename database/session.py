"""
Database Session Management

Provides SQLAlchemy engine and session factory for async database access.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from loguru import logger

from config import settings
from .models import Base


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_database_url() -> str:
    """Get async database URL for SQLAlchemy."""
    if settings.DATABASE_URL:
        return settings.DATABASE_URL
    return f"sqlite+aiosqlite:///{settings.DATABASE_PATH}"


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    In-memory SQLite shares one connection so every session sees the
    same database.
    """
    kwargs = {
        "echo": settings.LOG_LEVEL == "DEBUG",
    }
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url.rstrip("/").endswith("sqlite+aiosqlite:"):
            kwargs["poolclass"] = StaticPool
    return create_async_engine(database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory with the project's session defaults."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_engine() -> AsyncEngine:
    """
    Initialize the database engine.

    Called once at application startup.
    """
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    database_url = get_database_url()
    logger.info(f"Initializing database engine: {database_url}")

    _engine = build_engine(database_url)
    _session_factory = build_session_factory(_engine)

    logger.info("Database engine initialized successfully")
    return _engine


async def close_engine() -> None:
    """Close the database engine."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database engine closed")


async def create_tables() -> None:
    """Create all tables in the database."""
    engine = await init_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session as async context manager.

    Usage:
        async with get_session() as session:
            result = await session.execute(...)

    The session is automatically committed on success,
    or rolled back on exception.
    """
    if _session_factory is None:
        await init_engine()

    session = _session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_session_dependency() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for getting database session.

    Usage in FastAPI:
        @router.get("/items")
        async def get_items(session: AsyncSession = Depends(get_session_dependency)):
            ...
    """
    async with get_session() as session:
        yield session
