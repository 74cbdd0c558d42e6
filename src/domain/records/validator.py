"""Field-validation and default-resolution engine.

``validate`` walks a record kind's rules in schema order and, for each field:

1. fills the default when the value is absent;
2. reports ``missing_field`` when a required value is still absent;
3. checks and normalizes the semantic type (``invalid_type``);
4. checks enum membership (``invalid_enum``);
5. checks the pattern (``invalid_format``).

Every field is checked, so all violations are reported together. Uniqueness
is left to the persistence layer. Apart from evaluating default factories the
function has no side effects.
"""

import uuid
from collections.abc import Callable
from datetime import UTC, date, datetime, time
from typing import Any

from loguru import logger

from src.core.error_context import sanitize_dict
from src.core.types import NormalizedFields, RawFields
from src.domain.records.kinds import RecordKind
from src.domain.records.registry import SchemaRegistry, get_schema_registry
from src.domain.records.results import FieldError, FieldErrorKind, ValidationResult
from src.domain.records.rules import FieldRule, FieldType

STRING_TYPES = (FieldType.TEXT, FieldType.IDENTIFIER)


def _to_text(value: object) -> str:
    """Strings pass through; numbers and booleans are cast to their text form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    if not isinstance(value, str):
        msg = f"expected text, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def _to_identifier(value: object) -> str:
    if isinstance(value, bool):
        msg = "expected an identifier, got bool"
        raise TypeError(msg)
    if isinstance(value, str | int | uuid.UUID):
        return str(value)
    msg = f"expected an identifier, got {type(value).__name__}"
    raise TypeError(msg)


def _to_boolean(value: object) -> bool:
    if not isinstance(value, bool):
        msg = f"expected a boolean, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def _to_timestamp(value: object) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)
    msg = f"expected a timestamp, got {type(value).__name__}"
    raise TypeError(msg)


COERCERS: dict[FieldType, Callable[[object], Any]] = {
    FieldType.TEXT: _to_text,
    FieldType.IDENTIFIER: _to_identifier,
    FieldType.BOOLEAN: _to_boolean,
    FieldType.TIMESTAMP: _to_timestamp,
}


def _is_absent(rule: FieldRule, value: object) -> bool:
    """None is always absent; an empty string is absent for string-typed fields."""
    if value is None:
        return True
    return rule.field_type in STRING_TYPES and value == ""


def _check_field(
    rule: FieldRule, fields: RawFields, record: NormalizedFields
) -> FieldError | None:
    """Apply one rule, writing the normalized value into ``record`` on success."""
    value = fields.get(rule.name)

    if _is_absent(rule, value) and rule.has_default:
        value = rule.resolve_default()

    if _is_absent(rule, value):
        if rule.required:
            return FieldError(
                field=rule.name,
                kind=FieldErrorKind.MISSING_FIELD,
                message=f"Path `{rule.name}` is required.",
            )
        return None

    try:
        value = COERCERS[rule.field_type](value)
    except (TypeError, ValueError) as e:
        return FieldError(
            field=rule.name,
            kind=FieldErrorKind.INVALID_TYPE,
            message=f"Cast to {rule.field_type.value} failed for `{rule.name}`: {e}",
            value=value,
        )

    if (enum := rule.enum) is not None and value not in enum.values:
        return FieldError(
            field=rule.name,
            kind=FieldErrorKind.INVALID_ENUM,
            message=f"`{value}` is not a valid enum value for path `{rule.name}`.",
            value=value,
        )

    if (pattern := rule.pattern) is not None and pattern.pattern.search(value) is None:
        return FieldError(
            field=rule.name,
            kind=FieldErrorKind.INVALID_FORMAT,
            message=pattern.message,
            value=value,
        )

    record[rule.name] = value
    return None


def validate(
    kind: RecordKind | str,
    fields: RawFields,
    registry: SchemaRegistry | None = None,
) -> ValidationResult:
    """Validate a candidate record against its kind's rules.

    Args:
        kind: Record kind, or its name.
        fields: Candidate field values.
        registry: Registry to read rules from; the process-wide one by default.

    Returns:
        ValidationResult: The normalized record, or every field error found.

    Raises:
        NotFoundError: If ``kind`` is not a registered record kind.
    """
    registry = registry or get_schema_registry()
    record_kind = registry.resolve(kind)
    rules = registry.rules_for(record_kind)

    undeclared = sorted(set(fields) - {rule.name for rule in rules})
    if undeclared:
        logger.debug(
            "Dropping undeclared fields {} from {} record",
            undeclared,
            record_kind.value,
            kind=record_kind.value,
        )

    record: NormalizedFields = {}
    errors: dict[str, FieldError] = {}
    for rule in rules:
        if (error := _check_field(rule, fields, record)) is not None:
            errors[rule.name] = error

    if errors:
        logger.debug(
            "Rejected {} record with {} field error(s)",
            record_kind.value,
            len(errors),
            kind=record_kind.value,
            fields={name: error.kind.value for name, error in errors.items()},
            candidate=sanitize_dict(dict(fields)),
        )
        return ValidationResult(kind=record_kind, errors=errors)

    return ValidationResult(kind=record_kind, record=record)
