"""Declarative field rules.

A rule describes one field of a record kind: its semantic type, whether it is
required, how its default is produced and which constraints its value must
satisfy. Constraints are tagged variants discriminated by ``kind`` so a single
rule walker can evaluate every record kind.
"""

import re
from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_FORMAT_MESSAGE = "Value does not match the expected format"


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


class FieldType(Enum):
    """Semantic type of a field value."""

    TEXT = "text"
    IDENTIFIER = "identifier"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"


class EnumConstraint(BaseModel):
    """Value must be one of a fixed set of strings."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["enum"] = "enum"
    values: tuple[str, ...]


class PatternConstraint(BaseModel):
    """Value must contain a match for a regular expression."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pattern"] = "pattern"
    pattern: re.Pattern[str]
    message: str = DEFAULT_FORMAT_MESSAGE


class UniqueConstraint(BaseModel):
    """Value must not be held by another stored record of the same kind.

    Enforced by the persistence layer, never by the validator.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["unique"] = "unique"


Constraint = Annotated[
    EnumConstraint | PatternConstraint | UniqueConstraint,
    Field(discriminator="kind"),
]


class FieldRule(BaseModel):
    """Rule set for a single field of a record kind."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    field_type: FieldType = FieldType.TEXT
    required: bool = False
    default: Any = None
    default_factory: Callable[[], Any] | None = None
    constraints: tuple[Constraint, ...] = ()

    @model_validator(mode="after")
    def _check_default_sources(self) -> "FieldRule":
        if self.default is not None and self.default_factory is not None:
            msg = f"Field '{self.name}' declares both a default and a default_factory"
            raise ValueError(msg)
        return self

    @property
    def has_default(self) -> bool:
        """Whether an absent value can be filled in."""
        return self.default is not None or self.default_factory is not None

    def resolve_default(self) -> Any:
        """Produce the default value.

        Factories are called on every invocation, so time-based defaults
        reflect the moment of validation.
        """
        if self.default_factory is not None:
            return self.default_factory()
        return self.default

    @property
    def enum(self) -> EnumConstraint | None:
        """The enum constraint on this field, if any."""
        return next(
            (c for c in self.constraints if isinstance(c, EnumConstraint)), None
        )

    @property
    def pattern(self) -> PatternConstraint | None:
        """The pattern constraint on this field, if any."""
        return next(
            (c for c in self.constraints if isinstance(c, PatternConstraint)), None
        )

    @property
    def unique(self) -> bool:
        """Whether the persistence layer must keep this value unique."""
        return any(isinstance(c, UniqueConstraint) for c in self.constraints)
