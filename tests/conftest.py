"""Pytest configuration and fixtures for annoflow.

Unit tests use mocked or in-memory collaborators; repository tests use
the db_session fixture, which needs DATABASE_URL (Postgres).
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from annoflow.core.config import get_settings
from annoflow.infrastructure.persistence import database
from annoflow.infrastructure.persistence import models  # noqa: F401  (register tables)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Reload settings per test so monkeypatched env vars take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL. Skips (pytest.skip) when it is not configured.
    Use @pytest.mark.requires_db to mark tests that need this fixture; run
    without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip("Postgres not configured: set DATABASE_URL")
    async with database.engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.create_all)
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
    # Pooled connections are bound to this test's event loop.
    await database.engine.dispose()
