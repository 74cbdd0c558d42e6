"""create record tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
        autoincrement=True,
        nullable=False,
    )


def _created_at_column() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "contacts",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_contacts")),
    )

    op.create_table(
        "posts",
        _id_column(),
        sa.Column("donor", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("quantity", sa.String(length=255), nullable=True),
        sa.Column("food_type", sa.String(length=16), nullable=False),
        sa.Column("dietary_category", sa.String(length=32), nullable=False),
        sa.Column("contains_nuts", sa.Boolean(), nullable=False),
        sa.Column("expiry_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("pickup_address", sa.Text(), nullable=True),
        sa.Column("contact_info", sa.String(length=255), nullable=True),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_posts")),
    )
    op.create_index(op.f("ix_posts_donor"), "posts", ["donor"])

    op.create_table(
        "requests",
        _id_column(),
        sa.Column("post", sa.String(length=64), nullable=False),
        sa.Column("beneficiary", sa.String(length=64), nullable=False),
        sa.Column("donor", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_requests")),
    )
    op.create_index(op.f("ix_requests_post"), "requests", ["post"])
    op.create_index(op.f("ix_requests_beneficiary"), "requests", ["beneficiary"])
    op.create_index(op.f("ix_requests_donor"), "requests", ["donor"])

    op.create_table(
        "users",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
        sa.UniqueConstraint("email", name=op.f("uq_users_email")),
    )


def downgrade() -> None:
    op.drop_table("users")
    op.drop_index(op.f("ix_requests_donor"), table_name="requests")
    op.drop_index(op.f("ix_requests_beneficiary"), table_name="requests")
    op.drop_index(op.f("ix_requests_post"), table_name="requests")
    op.drop_table("requests")
    op.drop_index(op.f("ix_posts_donor"), table_name="posts")
    op.drop_table("posts")
    op.drop_table("contacts")
