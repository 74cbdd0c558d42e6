"""Unit tests for src/infrastructure/database/repository.py module."""

import pytest
from pytest_mock import MockerFixture, MockType
from sqlalchemy.exc import IntegrityError

from src.core.exceptions import DuplicateKeyError
from src.infrastructure.database.models import Contact, User
from src.infrastructure.database.repository import (
    BaseRepository,
    is_unique_violation,
)


class _PgError(Exception):
    """Driver error exposing a SQLSTATE like asyncpg does."""

    def __init__(self, message: str, sqlstate: str) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate


def _integrity_error(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, orig)


@pytest.fixture
def user() -> User:
    """Unsaved user instance."""
    return User(
        name="John Doe",
        email="unique@example.com",
        password="securepassword",
        role="donor",
    )


@pytest.mark.unit
class TestIsUniqueViolation:
    """Tests for driver-independent unique violation detection."""

    @pytest.mark.parametrize(
        ("orig", "expected"),
        [
            (_PgError("duplicate key value violates unique constraint", "23505"), True),
            (_PgError("null value in column violates not-null", "23502"), False),
            (Exception("UNIQUE constraint failed: users.email"), True),
            (Exception("NOT NULL constraint failed: users.name"), False),
        ],
    )
    def test_detection(self, orig: Exception, expected: bool) -> None:
        """Verify SQLSTATE is preferred and SQLite messages are recognized."""
        assert is_unique_violation(_integrity_error(orig)) is expected


@pytest.mark.unit
class TestBaseRepository:
    """Tests for BaseRepository with a mocked session."""

    def test_initialization(
        self, mock_async_session: MockType, mocker: MockerFixture
    ) -> None:
        """Verify repository keeps its session and model class."""
        mock_logger = mocker.patch("src.infrastructure.database.repository.logger")

        repository = BaseRepository(mock_async_session, User)

        assert repository.session is mock_async_session
        assert repository.model_class is User
        mock_logger.debug.assert_called_once_with(
            "Initialized repository for {}", "User"
        )

    @pytest.mark.parametrize(
        ("model", "expected"),
        [(User, ("email",)), (Contact, ())],
    )
    def test_unique_columns(
        self,
        mock_async_session: MockType,
        model: type[User] | type[Contact],
        expected: tuple[str, ...],
    ) -> None:
        """Verify unique columns are read from the table."""
        assert BaseRepository(mock_async_session, model).unique_columns == expected

    async def test_create(self, mock_async_session: MockType, user: User) -> None:
        """Verify create adds, flushes and refreshes the instance."""
        repository = BaseRepository(mock_async_session, User)

        result = await repository.create(user)

        assert result is user
        mock_async_session.add.assert_called_once_with(user)
        mock_async_session.flush.assert_awaited_once()
        mock_async_session.refresh.assert_awaited_once_with(user)

    @pytest.mark.parametrize(
        "orig",
        [
            _PgError(
                'duplicate key value violates unique constraint "uq_users_email"',
                "23505",
            ),
            Exception("UNIQUE constraint failed: users.email"),
        ],
    )
    async def test_create_duplicate(
        self, mock_async_session: MockType, user: User, orig: Exception
    ) -> None:
        """Verify unique violations become DuplicateKeyError."""
        error = _integrity_error(orig)
        mock_async_session.flush.side_effect = error
        repository = BaseRepository(mock_async_session, User)

        with pytest.raises(DuplicateKeyError) as exc_info:
            await repository.create(user)

        assert exc_info.value.kind == "user"
        assert exc_info.value.field == "email"
        assert exc_info.value.cause is error
        assert str(exc_info.value) == (
            "[DUPLICATE_KEY] A user with this email already exists"
        )
        mock_async_session.refresh.assert_not_awaited()

    async def test_create_duplicate_field_from_single_unique_column(
        self, mock_async_session: MockType, user: User
    ) -> None:
        """Verify the field falls back to the only unique column."""
        mock_async_session.flush.side_effect = _integrity_error(
            _PgError("duplicate key value violates unique constraint", "23505")
        )
        repository = BaseRepository(mock_async_session, User)

        with pytest.raises(DuplicateKeyError) as exc_info:
            await repository.create(user)

        assert exc_info.value.field == "email"

    async def test_create_other_integrity_error(
        self, mock_async_session: MockType, user: User
    ) -> None:
        """Verify other constraint violations propagate unchanged."""
        error = _integrity_error(Exception("NOT NULL constraint failed: users.name"))
        mock_async_session.flush.side_effect = error
        repository = BaseRepository(mock_async_session, User)

        with pytest.raises(IntegrityError) as exc_info:
            await repository.create(user)

        assert exc_info.value is error

    async def test_get_by_id(
        self,
        mock_async_session: MockType,
        mock_query_result: MockType,
        user: User,
    ) -> None:
        """Verify lookup by primary key returns the instance."""
        mock_query_result.scalar_one_or_none.return_value = user
        mock_async_session.execute.return_value = mock_query_result
        repository = BaseRepository(mock_async_session, User)

        assert await repository.get_by_id(1) is user
        mock_async_session.execute.assert_awaited_once()

    async def test_get_by_id_not_found(
        self,
        mock_async_session: MockType,
        mock_query_result: MockType,
        mocker: MockerFixture,
    ) -> None:
        """Verify a missing ID returns None and is logged."""
        mock_logger = mocker.patch("src.infrastructure.database.repository.logger")
        mock_async_session.execute.return_value = mock_query_result
        repository = BaseRepository(mock_async_session, User)

        assert await repository.get_by_id(999) is None
        mock_logger.debug.assert_any_call(
            "{} instance not found with ID: {}", "User", 999
        )

    async def test_find_one_by_ignores_unknown_fields(
        self,
        mock_async_session: MockType,
        mock_query_result: MockType,
        mocker: MockerFixture,
    ) -> None:
        """Verify unknown filter fields are skipped with a warning."""
        mock_logger = mocker.patch("src.infrastructure.database.repository.logger")
        mock_async_session.execute.return_value = mock_query_result
        repository = BaseRepository(mock_async_session, User)

        await repository.find_one_by(email="a@b.co", nickname="ace")

        mock_logger.warning.assert_called_once_with(
            "Attempted to filter by non-existent field '{}' on {}",
            "nickname",
            "User",
        )

    @pytest.mark.parametrize(("scalar", "expected"), [(3, 3), (None, 0)])
    async def test_count(
        self,
        mock_async_session: MockType,
        mock_query_result: MockType,
        scalar: int | None,
        expected: int,
    ) -> None:
        """Verify count returns the scalar result, defaulting to zero."""
        mock_query_result.scalar.return_value = scalar
        mock_async_session.execute.return_value = mock_query_result
        repository = BaseRepository(mock_async_session, User)

        assert await repository.count() == expected

    @pytest.mark.parametrize(("rowcount", "expected"), [(4, 4), (-1, 0), (None, 0)])
    async def test_delete_all(
        self,
        mock_async_session: MockType,
        mock_query_result: MockType,
        rowcount: int | None,
        expected: int,
    ) -> None:
        """Verify delete_all reports the number of removed rows."""
        mock_query_result.rowcount = rowcount
        mock_async_session.execute.return_value = mock_query_result
        repository = BaseRepository(mock_async_session, User)

        assert await repository.delete_all() == expected
