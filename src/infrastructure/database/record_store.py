"""Persistence adapter for validated records.

``RecordStore`` is what callers use to store Contact, Post, Request and User
records. Each write runs in its own session and transaction, so a rejected
insert never affects other records. Uniqueness is enforced by the database's
unique indexes and surfaces as ``DuplicateKeyError``.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.error_context import sanitize_dict
from src.core.exceptions import ValidationError
from src.core.types import NormalizedFields, RawFields
from src.domain.records.kinds import RecordKind
from src.domain.records.registry import SchemaRegistry, get_schema_registry
from src.domain.records.results import ValidationResult
from src.domain.records.validator import validate
from src.infrastructure.database.base import BaseModel
from src.infrastructure.database.models import RECORD_MODELS
from src.infrastructure.database.repository import BaseRepository
from src.infrastructure.database.session import get_async_session


class RecordStore:
    """Validate and store records of every registered kind.

    Args:
        session_factory: Factory for the sessions each operation runs in;
            the global one when omitted.
        registry: Schema registry to validate against; the process-wide one
            when omitted.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        registry: SchemaRegistry | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._registry = registry or get_schema_registry()

    def validate(self, kind: RecordKind | str, fields: RawFields) -> ValidationResult:
        """Validate a candidate record without storing it."""
        return validate(kind, fields, self._registry)

    async def save(self, kind: RecordKind | str, fields: RawFields) -> BaseModel:
        """Validate a candidate record and store it.

        Args:
            kind: Record kind, or its name.
            fields: Candidate field values.

        Returns:
            BaseModel: The stored record with its generated ID.

        Raises:
            ValidationError: If any field rule fails; nothing is stored.
            DuplicateKeyError: If a unique field value is already taken.
        """
        result = self.validate(kind, fields)
        if result.record is None:
            raise ValidationError(
                f"{result.kind.value} validation failed: "
                + ", ".join(
                    f"{name}: {error.message}" for name, error in result.errors.items()
                ),
                field_errors=result.errors,
                context={"kind": result.kind.value},
            )
        return await self.persist(result.kind, result.record)

    async def persist(
        self, kind: RecordKind | str, record: NormalizedFields
    ) -> BaseModel:
        """Store an already normalized record.

        Args:
            kind: Record kind, or its name.
            record: Field values produced by the validator.

        Returns:
            BaseModel: The stored record with its generated ID.

        Raises:
            DuplicateKeyError: If a unique field value is already taken.
        """
        record_kind = self._registry.resolve(kind)
        model_class = RECORD_MODELS[record_kind]

        async with get_async_session(self._session_factory) as session:
            repository = BaseRepository(session, model_class)
            stored = await repository.create(model_class(**record))

        logger.info(
            "Stored {} record {}",
            record_kind.value,
            stored.id,
            kind=record_kind.value,
            record_id=stored.id,
            fields=sanitize_dict(record),
        )
        return stored

    async def get(self, kind: RecordKind | str, record_id: int) -> BaseModel | None:
        """Load a stored record by ID."""
        model_class = RECORD_MODELS[self._registry.resolve(kind)]
        async with get_async_session(self._session_factory) as session:
            return await BaseRepository(session, model_class).get_by_id(record_id)

    async def find_one(
        self, kind: RecordKind | str, **filters: object
    ) -> BaseModel | None:
        """Load the first stored record matching all field filters."""
        model_class = RECORD_MODELS[self._registry.resolve(kind)]
        async with get_async_session(self._session_factory) as session:
            return await BaseRepository(session, model_class).find_one_by(**filters)

    async def count(self, kind: RecordKind | str) -> int:
        """Number of stored records of a kind."""
        model_class = RECORD_MODELS[self._registry.resolve(kind)]
        async with get_async_session(self._session_factory) as session:
            return await BaseRepository(session, model_class).count()

    async def reset_all(self, kind: RecordKind | str) -> int:
        """Delete every stored record of a kind.

        Intended for test fixtures resetting state between cases.

        Returns:
            int: Number of deleted records.
        """
        record_kind = self._registry.resolve(kind)
        async with get_async_session(self._session_factory) as session:
            repository = BaseRepository(session, RECORD_MODELS[record_kind])
            deleted = await repository.delete_all()
        logger.warning(
            "Cleared all {} records", record_kind.value, kind=record_kind.value
        )
        return deleted
