"""
SQLAlchemy ORM models.

These are purely infrastructure concerns: domain entities are mapped to/from
these models inside the repository implementations.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.domain.enums.ad_status import ActorRole, AdStatus, ProductCondition
from src.infrastructure.database.connection import Base


def _values(enum_cls: type) -> list[str]:
    return [e.value for e in enum_cls]


_ad_status_enum = SAEnum(AdStatus, name="ad_status", values_callable=_values)
_condition_enum = SAEnum(ProductCondition, name="product_condition", values_callable=_values)
_actor_role_enum = SAEnum(ActorRole, name="actor_role", values_callable=_values)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ListingModel(Base):
    __tablename__ = "listings"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    owner_username: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # Content
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(Numeric(12, 2), nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    subcategory: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    images: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)  # type: ignore[type-arg]
    contact_info: Mapped[str] = mapped_column(String(256), nullable=False)
    city: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    condition: Mapped[ProductCondition] = mapped_column(_condition_enum, nullable=False)

    # Moderation
    status: Mapped[AdStatus] = mapped_column(_ad_status_enum, nullable=False, index=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
    status_changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    status_history: Mapped[list["ListingStatusHistoryModel"]] = relationship(
        "ListingStatusHistoryModel",
        back_populates="listing",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="select",
    )

    __table_args__ = (
        Index("ix_listings_status_created_at", "status", "created_at"),
    )


class MessageModel(Base):
    __tablename__ = "messages"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # No foreign key: threads outlive a deleted listing
    listing_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    sender_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    receiver_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    sender_username: Mapped[str | None] = mapped_column(String(128), nullable=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_messages_receiver_read", "receiver_id", "read"),
    )


class ListingStatusHistoryModel(Base):
    __tablename__ = "listing_status_history"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    listing_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    from_status: Mapped[AdStatus | None] = mapped_column(_ad_status_enum, nullable=True)
    to_status: Mapped[AdStatus] = mapped_column(_ad_status_enum, nullable=False)
    transitioned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    triggered_by: Mapped[str] = mapped_column(String(128), nullable=False)
    actor_role: Mapped[ActorRole] = mapped_column(_actor_role_enum, nullable=False)
    metadata_: Mapped[dict] = mapped_column(  # type: ignore[type-arg]
        "metadata", JSONB, nullable=False, default=dict
    )

    listing: Mapped[ListingModel] = relationship(
        "ListingModel", back_populates="status_history"
    )
