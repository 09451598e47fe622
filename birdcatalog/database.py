"""
Bird Catalogue — Database Session Management
==============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings and are only
    passed for server databases. SQLite URLs (used by the test suite) get
    SQLAlchemy's default pool for the driver.
"""

import logging
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from birdcatalog.config import settings

logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    Build create_async_engine keyword arguments for the given URL.

    SQLite drivers reject pool sizing arguments, so those are only added
    for server databases.
    """
    options: Dict[str, Any] = {
        # Echo SQL only when debugging
        "echo": settings.log_level == "DEBUG",
    }
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """
    SQLite leaves foreign key enforcement off per connection; switch it on
    so ON DELETE CASCADE / SET NULL behave as they do on PostgreSQL.
    """

    @event.listens_for(async_engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()


# ── Engine Configuration ──────────────────────────────────────────────────
engine: AsyncEngine = create_async_engine(
    settings.database_url,
    **engine_options(settings.database_url),
)
if settings.is_sqlite:
    enable_sqlite_foreign_keys(engine)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False keeps loaded attributes readable after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object; `create_schema()` builds every table
    registered against it.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (the handler performs queries)
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/birds/{bird_id}")
        async def get_bird(bird_id: str, db: AsyncSession = Depends(get_db_session)):
            return await bird_service.find(db, bird_id)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise  # Re-raise so the global error handler can respond
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_schema(bind: Optional[AsyncEngine] = None) -> None:
    """
    Create every table registered on Base.metadata that does not exist yet.

    Called from the application lifespan when settings.create_schema is set,
    and by the test suite against its throwaway SQLite database.
    """
    # Models must be imported so their tables are registered on the metadata
    from birdcatalog import models  # noqa: F401

    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured (%d tables)", len(Base.metadata.tables))


async def dispose_engine() -> None:
    """Gracefully closes all connections in the pool (application shutdown)."""
    await engine.dispose()
