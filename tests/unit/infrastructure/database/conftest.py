"""Fixtures for database infrastructure unit tests."""

from collections.abc import Generator
from typing import cast

import pytest
from pytest_mock import MockerFixture, MockType
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.infrastructure.database.session import _DatabaseManager


@pytest.fixture
def mock_async_engine(mocker: MockerFixture) -> MockType:
    """Mock AsyncEngine with connect, begin and dispose.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        MockType: Mock AsyncEngine.
    """
    engine = mocker.Mock(spec=AsyncEngine)
    engine.dispose = mocker.AsyncMock()
    engine.sync_engine = mocker.Mock()
    engine.dialect = mocker.Mock()
    engine.dialect.name = "sqlite"

    mock_connection = mocker.AsyncMock()
    mock_connection.__aenter__ = mocker.AsyncMock(return_value=mock_connection)
    mock_connection.__aexit__ = mocker.AsyncMock(return_value=None)

    mock_result = mocker.Mock()
    mock_result.scalar = mocker.Mock(return_value=1)
    mock_connection.execute = mocker.AsyncMock(return_value=mock_result)
    mock_connection.run_sync = mocker.AsyncMock()

    engine.connect = mocker.Mock(return_value=mock_connection)
    engine.begin = mocker.Mock(return_value=mock_connection)

    return cast("MockType", engine)


@pytest.fixture
def mock_async_session(mocker: MockerFixture) -> MockType:
    """Mock AsyncSession with lifecycle methods.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        MockType: Mock AsyncSession with commit, rollback, close methods
            and context manager protocol.
    """
    session = mocker.Mock(spec=AsyncSession)
    session.commit = mocker.AsyncMock()
    session.rollback = mocker.AsyncMock()
    session.close = mocker.AsyncMock()
    session.execute = mocker.AsyncMock()
    session.flush = mocker.AsyncMock()
    session.refresh = mocker.AsyncMock()
    session.add = mocker.Mock()

    session.__aenter__ = mocker.AsyncMock(return_value=session)
    session.__aexit__ = mocker.AsyncMock(return_value=None)

    return cast("MockType", session)


@pytest.fixture
def mock_session_factory(
    mocker: MockerFixture, mock_async_session: MockType
) -> MockType:
    """Mock async_sessionmaker returning the mock session.

    Args:
        mocker: Pytest mocker fixture.
        mock_async_session: Mock async session fixture.

    Returns:
        MockType: Callable factory.
    """
    factory = mocker.Mock(return_value=mock_async_session)
    return cast("MockType", factory)


@pytest.fixture
def mock_query_result(mocker: MockerFixture) -> MockType:
    """Mock database query result.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        MockType: Mock result with scalar accessors.
    """
    result = mocker.Mock()
    result.scalar = mocker.Mock(return_value=1)
    result.scalar_one_or_none = mocker.Mock(return_value=None)
    result.rowcount = 0

    return cast("MockType", result)


@pytest.fixture
def database_manager_fixture() -> Generator[_DatabaseManager]:
    """Clean database manager instance for testing.

    Returns:
        _DatabaseManager: Fresh _DatabaseManager instance, resets after test.
    """
    manager = _DatabaseManager()
    yield manager
    manager.reset()


@pytest.fixture
def mock_create_async_engine(
    mocker: MockerFixture, mock_async_engine: MockType
) -> MockType:
    """Mock create_async_engine function.

    Args:
        mocker: Pytest mocker fixture.
        mock_async_engine: Mock async engine fixture.

    Returns:
        MockType: Mock create_async_engine function.
    """
    return mocker.patch(
        "src.infrastructure.database.session.create_async_engine",
        return_value=mock_async_engine,
    )


@pytest.fixture
def mock_event_listen(mocker: MockerFixture) -> MockType:
    """Mock SQLAlchemy event.listen function.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        MockType: Mock event.listen function.
    """
    return mocker.patch("src.infrastructure.database.session.event.listen")
