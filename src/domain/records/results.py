"""Validation outcome types."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.domain.records.kinds import RecordKind


class FieldErrorKind(Enum):
    """Why a field was rejected by the validator."""

    MISSING_FIELD = "missing_field"
    """A required field is absent and has no default."""

    INVALID_ENUM = "invalid_enum"
    """The value is not one of the field's enumerated values."""

    INVALID_FORMAT = "invalid_format"
    """The value does not match the field's pattern."""

    INVALID_TYPE = "invalid_type"
    """The value cannot be read as the field's semantic type."""


class FieldError(BaseModel):
    """A single rejected field."""

    model_config = ConfigDict(frozen=True)

    field: str
    kind: FieldErrorKind
    message: str
    value: Any = None


class ValidationResult(BaseModel):
    """Either a normalized record or the errors that prevented one.

    Exactly one of ``record`` and ``errors`` is populated.
    """

    model_config = ConfigDict(frozen=True)

    kind: RecordKind
    record: dict[str, Any] | None = None
    errors: dict[str, FieldError] = Field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        """Whether the candidate satisfied every rule."""
        return not self.errors
