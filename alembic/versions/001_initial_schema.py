"""initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID

from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    ad_status = sa.Enum("pending", "active", "rejected", "sold", name="ad_status")
    product_condition = sa.Enum("new", "used", name="product_condition")
    actor_role = sa.Enum("owner", "moderator", name="actor_role")
    for enum_type in (ad_status, product_condition, actor_role):
        enum_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "listings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_id", sa.String(128), nullable=False),
        sa.Column("owner_username", sa.String(128), nullable=True),
        # Content
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("subcategory", sa.String(64), nullable=False, server_default=""),
        sa.Column("images", JSONB, nullable=False, server_default=sa.text("'[]'")),
        sa.Column("contact_info", sa.String(256), nullable=False),
        sa.Column("city", sa.String(128), nullable=False),
        sa.Column("condition", product_condition, nullable=False),
        # Moderation
        sa.Column("status", ad_status, nullable=False),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("status_changed_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_index("ix_listings_owner_id", "listings", ["owner_id"])
    op.create_index("ix_listings_category", "listings", ["category"])
    op.create_index("ix_listings_city", "listings", ["city"])
    op.create_index("ix_listings_status", "listings", ["status"])
    op.create_index("ix_listings_status_created_at", "listings", ["status", "created_at"])

    # Chat messages; no FK so threads survive listing removal
    op.create_table(
        "messages",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("listing_id", UUID(as_uuid=True), nullable=False),
        sa.Column("sender_id", sa.String(128), nullable=False),
        sa.Column("receiver_id", sa.String(128), nullable=False),
        sa.Column("sender_username", sa.String(128), nullable=True),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_messages_listing_id", "messages", ["listing_id"])
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"])
    op.create_index("ix_messages_receiver_id", "messages", ["receiver_id"])
    op.create_index("ix_messages_receiver_read", "messages", ["receiver_id", "read"])

    # Status history table for the moderation audit trail
    op.create_table(
        "listing_status_history",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "listing_id",
            UUID(as_uuid=True),
            sa.ForeignKey("listings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("from_status", ad_status, nullable=True),
        sa.Column("to_status", ad_status, nullable=False),
        sa.Column(
            "transitioned_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("triggered_by", sa.String(128), nullable=False),
        sa.Column("actor_role", actor_role, nullable=False),
        sa.Column("metadata", JSONB, nullable=False, server_default=sa.text("'{}'")),
    )
    op.create_index(
        "ix_listing_status_history_listing_id", "listing_status_history", ["listing_id"]
    )


def downgrade() -> None:
    op.drop_table("listing_status_history")
    op.drop_table("messages")
    op.drop_table("listings")
    for name in ("actor_role", "product_condition", "ad_status"):
        sa.Enum(name=name).drop(op.get_bind(), checkfirst=True)
