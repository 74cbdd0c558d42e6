"""Record schemas and the validation engine.

- **kinds**: the record kinds (Contact, Post, Request, User)
- **rules**: declarative field rules and constraint variants
- **registry**: the per-kind rule tables
- **validator**: default resolution and rule checking
- **results**: validation outcome types
"""

from src.domain.records.kinds import RecordKind
from src.domain.records.registry import SchemaRegistry, get_schema_registry
from src.domain.records.results import FieldError, FieldErrorKind, ValidationResult
from src.domain.records.rules import (
    EnumConstraint,
    FieldRule,
    FieldType,
    PatternConstraint,
    UniqueConstraint,
)
from src.domain.records.validator import validate

__all__ = [
    "EnumConstraint",
    "FieldError",
    "FieldErrorKind",
    "FieldRule",
    "FieldType",
    "PatternConstraint",
    "RecordKind",
    "SchemaRegistry",
    "UniqueConstraint",
    "ValidationResult",
    "get_schema_registry",
    "validate",
]
