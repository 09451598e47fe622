"""
Bird Catalogue — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite database file (aiosqlite driver) under
       pytest's tmp_path, with all tables created from the ORM metadata.

Fixture Hierarchy (all function-scoped):
    ├── db_engine:        AsyncEngine on a fresh SQLite file
    ├── session_factory:  async_sessionmaker bound to db_engine
    ├── db_session:       AsyncSession for service-level tests
    ├── client:           HTTPX AsyncClient; get_db_session is overridden
    │                     to use session_factory
    └── seeded_birds:     Robin (1), Eagle (2), Crow (4) and two Eagle
                          subspecies (5, 6), committed
"""

import os
import tempfile
from typing import Any, AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any birdcatalog imports
_tmp_dir = tempfile.mkdtemp(prefix="birdcatalog_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_dir}/app.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CREATE_SCHEMA"] = "false"
os.environ.pop("PUBLIC_URL", None)

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from birdcatalog.database import create_schema, enable_sqlite_foreign_keys, get_db_session  # noqa: E402
from birdcatalog.services.bird_service import bird_service  # noqa: E402
from helpers import bird_payload  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    enable_sqlite_foreign_keys(engine)
    await create_schema(bind=engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    A session for calling services directly.

    Tests commit when they need data to be visible to another session.
    """
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from birdcatalog.main import app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


# ══════════════════════════════════════════════════════════════════════════
# Seed Data
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def seeded_birds(session_factory) -> Dict[str, Any]:
    """
    Three species inserted out of sort order plus two Eagle subspecies.

    Returns the created BirdResponse objects keyed by short name.
    """
    async with session_factory() as session:
        crow = await bird_service.create(session, bird_payload("Crow", "Corvus corax", 4))
        robin = await bird_service.create(session, bird_payload("Robin", "Erithacus rubecula", 1))
        eagle = await bird_service.create(session, bird_payload("Eagle", "Aquila chrysaetos", 2))
        eagle_a = await bird_service.create(
            session,
            bird_payload("Golden Eagle", "Aquila chrysaetos chrysaetos", 5, speciesId=str(eagle.id)),
        )
        eagle_b = await bird_service.create(
            session,
            bird_payload("Kamchatkan Eagle", "Aquila chrysaetos kamtschatica", 6, speciesId=str(eagle.id)),
        )
        await session.commit()
    return {
        "crow": crow,
        "robin": robin,
        "eagle": eagle,
        "eagle_a": eagle_a,
        "eagle_b": eagle_b,
    }
