"""Base repository pattern implementation for database operations.

This module provides a generic repository base class implementing the
operations the record store needs on any SQLAlchemy model: insert, lookup,
count and bulk delete. Storage-driver unique index violations are translated
into ``DuplicateKeyError`` here so nothing above this layer depends on
driver error codes.
"""

from typing import Generic, TypeVar

from loguru import logger
from sqlalchemy import delete as sql_delete
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import DuplicateKeyError
from src.infrastructure.constants import UNIQUE_VIOLATION_SQLSTATE
from src.infrastructure.database.base import BaseModel

# Type variable for generic model type
T = TypeVar("T", bound=BaseModel)


def is_unique_violation(error: IntegrityError) -> bool:
    """Whether an IntegrityError was caused by a unique index.

    PostgreSQL drivers expose the SQLSTATE; SQLite only reports a message
    such as ``UNIQUE constraint failed: users.email``.
    """
    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return str(sqlstate) == UNIQUE_VIOLATION_SQLSTATE
    return "unique" in str(orig).lower()


class BaseRepository(Generic[T]):
    """Base repository class providing common database operations.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.

    Example:
        class UserRepository(BaseRepository[User]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, User)
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class
        logger.debug("Initialized repository for {}", model_class.__name__)

    @property
    def unique_columns(self) -> tuple[str, ...]:
        """Names of the model's columns backed by a unique index."""
        return tuple(
            column.name
            for column in self.model_class.__table__.columns
            if column.unique
        )

    async def get_by_id(self, entity_id: int) -> T | None:
        """Retrieve a model instance by its ID.

        Args:
            entity_id: The primary key ID of the model to retrieve.

        Returns:
            T | None: The model instance if found, None otherwise.
        """
        logger.debug("Fetching {} by ID: {}", self.model_class.__name__, entity_id)

        stmt = select(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        instance = result.scalar_one_or_none()

        if instance is None:
            logger.debug(
                "{} instance not found with ID: {}",
                self.model_class.__name__,
                entity_id,
            )

        return instance

    async def find_one_by(self, **kwargs: object) -> T | None:
        """Find the first model instance matching the given conditions.

        Args:
            **kwargs: Field-value pairs to filter by.

        Returns:
            T | None: The first matching instance if found, None otherwise.
        """
        stmt = select(self.model_class)
        for field, value in kwargs.items():
            if hasattr(self.model_class, field):
                stmt = stmt.where(getattr(self.model_class, field) == value)
            else:
                logger.warning(
                    "Attempted to filter by non-existent field '{}' on {}",
                    field,
                    self.model_class.__name__,
                )

        stmt = stmt.order_by(self.model_class.id).limit(1)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count(self) -> int:
        """Count all instances of the model.

        Returns:
            int: The total number of instances.
        """
        stmt = select(func.count()).select_from(self.model_class)
        result = await self.session.execute(stmt)
        count_value = result.scalar() or 0

        logger.debug("Counted {} {} instances", count_value, self.model_class.__name__)

        return count_value

    async def create(self, obj: T) -> T:
        """Insert a new model instance.

        Args:
            obj: The model instance to create.

        Returns:
            T: The created model instance with populated ID and timestamps.

        Raises:
            DuplicateKeyError: If a unique index rejects the row. The session
                must be rolled back by its owner afterwards.
            IntegrityError: For any other constraint violation.
        """
        logger.debug("Creating new {} instance", self.model_class.__name__)

        self.session.add(obj)
        try:
            await self.session.flush()
        except IntegrityError as e:
            if not is_unique_violation(e):
                raise
            raise self._duplicate_key_error(e) from e

        # Refresh to get server-generated values (ID, timestamps)
        await self.session.refresh(obj)

        logger.info(
            "Created {} instance with ID: {}", self.model_class.__name__, obj.id
        )

        return obj

    async def delete_all(self) -> int:
        """Delete every instance of the model.

        Returns:
            int: Number of deleted rows.
        """
        result = await self.session.execute(sql_delete(self.model_class))
        deleted = max(result.rowcount or 0, 0)

        logger.info("Deleted {} {} instances", deleted, self.model_class.__name__)

        return deleted

    def _duplicate_key_error(self, error: IntegrityError) -> DuplicateKeyError:
        message = str(error.orig)
        columns = self.unique_columns
        field = next((name for name in columns if name in message), None)
        if field is None and len(columns) == 1:
            field = columns[0]

        kind = self.model_class.__name__.lower()
        logger.info(
            "Rejected duplicate {} - unique field: {}",
            self.model_class.__name__,
            field,
            kind=kind,
        )
        return DuplicateKeyError(
            f"A {kind} with this {field or 'key'} already exists",
            kind=kind,
            field=field,
            cause=error,
        )
