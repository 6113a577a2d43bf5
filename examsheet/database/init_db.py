"""
Database initialization and connection management.

This module provides functions for:
1. Creating the global async engine and session factory
2. Creating the schema for development and tests
3. Handing out per-request sessions to FastAPI routes
4. Disposing of the engine on shutdown
"""

from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from examsheet.common.db.connection import is_sqlite_url
from examsheet.common.logger import app_logger

logger = app_logger.getChild("database.init_db")

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> AsyncEngine:
    """Get the global async engine instance."""
    if _engine is None:
        raise RuntimeError("Database engine not initialized. Call initialize_database() first.")
    return _engine


def get_session_factory() -> sessionmaker:
    """Get the factory producing ``AsyncSession`` objects bound to the global engine."""
    if _session_factory is None:
        raise RuntimeError("Database engine not initialized. Call initialize_database() first.")
    return _session_factory


def get_engine_kwargs(
    database_url: str,
    echo: bool,
    pool_size: int,
    max_overflow: int,
    pool_timeout: int,
) -> Dict[str, Any]:
    """
    Engine keyword arguments for the target database.

    SQLite drivers run without a sized connection pool, so the pool options
    are only passed to server databases.
    """
    kwargs: Dict[str, Any] = {"echo": echo, "future": True}

    if not is_sqlite_url(database_url):
        kwargs.update({
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
            "pool_pre_ping": True,
        })

    return kwargs


async def initialize_database(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
    pool_timeout: int = 30,
) -> AsyncEngine:
    """
    Initialize the async database engine.

    Args:
        database_url: Database connection URL
        echo: Whether to echo SQL statements
        pool_size: Connection pool size
        max_overflow: Maximum number of connections to allow above pool_size
        pool_timeout: Timeout for getting a connection from the pool

    Returns:
        AsyncEngine instance
    """
    global _engine, _session_factory

    try:
        logger.info(f"Initializing database with URL: {database_url[:10]}... and pool size: {pool_size}")

        _engine = create_async_engine(
            database_url,
            **get_engine_kwargs(database_url, echo, pool_size, max_overflow, pool_timeout)
        )

        _session_factory = sessionmaker(
            _engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

        logger.info("Database engine initialized successfully")
        return _engine

    except Exception as e:
        logger.error(f"Failed to initialize async database: {str(e)}")
        raise


async def create_schema() -> None:
    """
    Create all tables known to the shared metadata.

    Production schemas are managed by the Alembic revisions; this is for
    local development and tests.
    """
    # Register every mapped table on the shared metadata
    from examsheet.database.base import metadata
    from examsheet.registry import models as _registry_models  # noqa: F401
    from examsheet.evaluations import models as _evaluation_models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(metadata.create_all)

    logger.info(f"Schema created with {len(metadata.tables)} tables")


async def close_database() -> None:
    """Close the database engine and all connections."""
    global _engine, _session_factory

    if _engine:
        try:
            await _engine.dispose()
            logger.info("Database engine closed successfully")
        except Exception as e:
            logger.error(f"Error closing database engine: {str(e)}")
            raise
        finally:
            _engine = None
            _session_factory = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides an async database session.

    Writers commit explicitly; anything left uncommitted when the request
    fails or is cancelled is rolled back.
    """
    session = get_session_factory()()
    try:
        yield session
    except BaseException:
        await session.rollback()
        raise
    finally:
        await session.close()
