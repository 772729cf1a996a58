"""Shared fixtures for all tests."""

import os

import pytest
import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from summoning.database.engine import create_engine_for_url
from summoning.database.models import Base


# Set the test database URL before any settings can be cached, so CLI tests
# never touch the real database
@pytest.fixture(scope="session", autouse=True)
def use_test_database(tmp_path_factory):
    """Point the application database at a temporary SQLite file."""
    test_db_dir = tmp_path_factory.mktemp("summoning_test")
    test_db_path = test_db_dir / "test_summoning.db"

    os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{test_db_path}"

    import summoning.database.engine as engine_module

    engine_module._engine = None
    engine_module._async_session_factory = None

    from summoning.config import get_settings

    get_settings.cache_clear()

    yield

    engine_module._engine = None
    engine_module._async_session_factory = None
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any structlog configuration a test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
async def db_session():
    """Create a test database session with in-memory SQLite."""
    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session
        await session.rollback()

    await engine.dispose()
