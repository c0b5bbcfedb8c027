"""
Product API Backend: Database Session Management
=================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine with connection pooling, provides a session
       dependency that auto-commits on success and auto-rolls-back on error.
Who:   Used by route endpoints via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

The product store is the only shared mutable state in the service. Nothing
here serialises concurrent writers; each request gets its own session and
transaction, and the database decides the rest.
"""

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

logger = logging.getLogger(__name__)


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(
    settings.database_url,
    # Echo SQL queries in DEBUG mode for development visibility
    echo=settings.log_level == "DEBUG",
    **settings.engine_options(),
)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: handlers serialise ORM objects after the commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object between the app (init_models) and Alembic.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the endpoint (the handler performs queries)
        3. On success: commits the transaction
        4. On error: rolls back the transaction
        5. Always: closes the session (returns connection to pool)

    A request rejected by validation never touches the session, so no
    connection is checked out for it.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise  # Re-raise so the global error handler can respond appropriately
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def init_models() -> None:
    """
    What:  Connects to the database and creates missing tables.
    When:  Called once during application startup (lifespan handler).
    Why:   Lets a fresh database serve requests without running Alembic first.
           Existing tables are left untouched; schema changes go through
           migrations in backend/alembic.
    """
    # Models must be imported so they register with Base.metadata
    from app.models.product import Product  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database connection established")


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
