"""Schema registry: the field rules of every record kind.

The tables below are the single source of truth for what a valid Contact,
Post, Request or User looks like. They are frozen into a read-only mapping
when the module is imported and served through ``get_schema_registry()``.
"""

import re
from collections.abc import Iterable, Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Final

from src.core.exceptions import NotFoundError
from src.domain.records.kinds import RecordKind
from src.domain.records.rules import (
    EnumConstraint,
    FieldRule,
    FieldType,
    PatternConstraint,
    UniqueConstraint,
    utc_now,
)

EMAIL_PATTERN: Final = PatternConstraint(
    pattern=re.compile(r".+@.+\..+"),
    message="Please enter a valid email address",
)

FOOD_TYPES: Final = ("Veg", "Non-Veg")
DIETARY_CATEGORIES: Final = (
    "None",
    "Vegetarian",
    "Vegan",
    "Gluten-Free",
    "Dairy-Free",
    "Halal",
    "Kosher",
)
REQUEST_STATUSES: Final = ("Pending", "Accepted", "Rejected")
USER_ROLES: Final = ("donor", "beneficiary")


def _created_at() -> FieldRule:
    return FieldRule(
        name="created_at",
        field_type=FieldType.TIMESTAMP,
        default_factory=utc_now,
    )


CONTACT_RULES: Final = (
    FieldRule(name="name", required=True),
    FieldRule(name="email", required=True, constraints=(EMAIL_PATTERN,)),
    FieldRule(name="message", required=True),
    _created_at(),
)

POST_RULES: Final = (
    FieldRule(name="donor", field_type=FieldType.IDENTIFIER, required=True),
    FieldRule(name="title", required=True),
    FieldRule(name="description"),
    FieldRule(name="quantity"),
    FieldRule(
        name="food_type",
        required=True,
        constraints=(EnumConstraint(values=FOOD_TYPES),),
    ),
    FieldRule(
        name="dietary_category",
        default="None",
        constraints=(EnumConstraint(values=DIETARY_CATEGORIES),),
    ),
    FieldRule(name="contains_nuts", field_type=FieldType.BOOLEAN, default=False),
    FieldRule(name="expiry_date", field_type=FieldType.TIMESTAMP),
    FieldRule(name="pickup_address"),
    FieldRule(name="contact_info"),
    _created_at(),
)

REQUEST_RULES: Final = (
    FieldRule(name="post", field_type=FieldType.IDENTIFIER, required=True),
    FieldRule(name="beneficiary", field_type=FieldType.IDENTIFIER, required=True),
    FieldRule(name="donor", field_type=FieldType.IDENTIFIER, required=True),
    FieldRule(
        name="status",
        default="Pending",
        constraints=(EnumConstraint(values=REQUEST_STATUSES),),
    ),
    _created_at(),
)

USER_RULES: Final = (
    FieldRule(name="name", required=True),
    FieldRule(name="email", required=True, constraints=(UniqueConstraint(),)),
    FieldRule(name="password", required=True),
    FieldRule(
        name="role",
        required=True,
        constraints=(EnumConstraint(values=USER_ROLES),),
    ),
)


class SchemaRegistry:
    """Read-only lookup from record kind to its ordered field rules.

    Args:
        tables: Rules per record kind, in validation order.

    Raises:
        ValueError: If a kind declares the same field twice.
    """

    def __init__(self, tables: Mapping[RecordKind, Iterable[FieldRule]]) -> None:
        frozen: dict[RecordKind, tuple[FieldRule, ...]] = {}
        for kind, rules in tables.items():
            rules_tuple = tuple(rules)
            names = [rule.name for rule in rules_tuple]
            if len(names) != len(set(names)):
                msg = f"Duplicate field names in {kind.value} schema: {names}"
                raise ValueError(msg)
            frozen[kind] = rules_tuple
        self._tables = MappingProxyType(frozen)

    def resolve(self, kind: RecordKind | str) -> RecordKind:
        """Turn a kind or kind name into a registered RecordKind.

        Names are matched case-insensitively ("Post" and "post" both work).

        Raises:
            NotFoundError: If no schema is registered for the kind.
        """
        if isinstance(kind, RecordKind):
            record_kind = kind
        else:
            try:
                record_kind = RecordKind(str(kind).lower())
            except ValueError as e:
                raise self._unknown(kind, e) from e

        if record_kind not in self._tables:
            raise self._unknown(kind)
        return record_kind

    def rules_for(self, kind: RecordKind | str) -> tuple[FieldRule, ...]:
        """Ordered field rules for a record kind."""
        return self._tables[self.resolve(kind)]

    def kinds(self) -> tuple[RecordKind, ...]:
        """All registered record kinds."""
        return tuple(self._tables)

    def unique_fields(self, kind: RecordKind | str) -> tuple[str, ...]:
        """Names of the fields the persistence layer must keep unique."""
        return tuple(rule.name for rule in self.rules_for(kind) if rule.unique)

    def _unknown(
        self, kind: RecordKind | str, cause: Exception | None = None
    ) -> NotFoundError:
        name = kind.value if isinstance(kind, RecordKind) else str(kind)
        return NotFoundError(
            f"Unknown record kind: {name}",
            context={
                "kind": name,
                "known_kinds": [k.value for k in self._tables],
            },
            cause=cause,
        )


RECORD_SCHEMAS: Final[Mapping[RecordKind, tuple[FieldRule, ...]]] = MappingProxyType(
    {
        RecordKind.CONTACT: CONTACT_RULES,
        RecordKind.POST: POST_RULES,
        RecordKind.REQUEST: REQUEST_RULES,
        RecordKind.USER: USER_RULES,
    }
)


@lru_cache(maxsize=1)
def get_schema_registry() -> SchemaRegistry:
    """Get the process-wide schema registry."""
    return SchemaRegistry(RECORD_SCHEMAS)
