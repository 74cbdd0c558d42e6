"""Shared fixtures for integration tests.

Integration tests run against a private in-memory SQLite database per test,
created through the same engine factory and schema setup as production.
"""

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.infrastructure.database.record_store import RecordStore
from src.infrastructure.database.session import (
    create_database_engine,
    create_session_factory,
    init_database,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Engine bound to a fresh in-memory database with every record table."""
    engine = create_database_engine(TEST_DATABASE_URL)
    await init_database(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return create_session_factory(db_engine)


@pytest.fixture
def record_store(session_factory: async_sessionmaker[AsyncSession]) -> RecordStore:
    """Record store writing to the test database."""
    return RecordStore(session_factory=session_factory)
