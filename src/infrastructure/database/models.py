"""ORM models, one table per record kind.

Column names match the field names in the schema registry so a normalized
record can be passed straight to the model constructor. References between
records (``donor``, ``post``, ``beneficiary``) are opaque identifiers stored
as text; no foreign keys are declared.
"""

from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType
from typing import Final

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.domain.records.kinds import RecordKind
from src.infrastructure.database.base import BaseModel, TimestampMixin, UTCDateTime

IDENTIFIER_LENGTH = 64
EMAIL_LENGTH = 320


class Contact(TimestampMixin, BaseModel):
    """Message submitted through the contact form."""

    __tablename__ = "contacts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(EMAIL_LENGTH), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)


class Post(TimestampMixin, BaseModel):
    """Food offered by a donor."""

    __tablename__ = "posts"

    donor: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    quantity: Mapped[str | None] = mapped_column(String(255), nullable=True)
    food_type: Mapped[str] = mapped_column(String(16), nullable=False)
    dietary_category: Mapped[str] = mapped_column(
        String(32), nullable=False, default="None"
    )
    contains_nuts: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    expiry_date: Mapped[datetime | None] = mapped_column(
        UTCDateTime(), nullable=True
    )
    pickup_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_info: Mapped[str | None] = mapped_column(String(255), nullable=True)


class Request(TimestampMixin, BaseModel):
    """A beneficiary's request for a donor's post."""

    __tablename__ = "requests"

    post: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH), nullable=False, index=True
    )
    beneficiary: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH), nullable=False, index=True
    )
    donor: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="Pending")


class User(BaseModel):
    """Registered donor or beneficiary."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(EMAIL_LENGTH), nullable=False, unique=True
    )
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False)


RECORD_MODELS: Final[Mapping[RecordKind, type[BaseModel]]] = MappingProxyType(
    {
        RecordKind.CONTACT: Contact,
        RecordKind.POST: Post,
        RecordKind.REQUEST: Request,
        RecordKind.USER: User,
    }
)
