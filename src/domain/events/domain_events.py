from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from src.domain.enums.ad_status import ActorRole, AdStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ListingSubmittedEvent(DomainEvent):
    """Published when an owner submits a new listing for moderation."""

    listing_id: UUID = field(default_factory=uuid4)
    owner_id: str = ""
    category: str = ""
    city: str = ""
    price: float = 0.0


@dataclass(frozen=True)
class ListingEditedEvent(DomainEvent):
    """Published whenever the owner changes listing content."""

    listing_id: UUID = field(default_factory=uuid4)
    owner_id: str = ""
    changed_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class ListingStatusChangedEvent(DomainEvent):
    """Published whenever a listing moves between statuses."""

    listing_id: UUID = field(default_factory=uuid4)
    from_status: AdStatus | None = None
    to_status: AdStatus = AdStatus.PENDING
    triggered_by: str = ""
    actor_role: ActorRole = ActorRole.OWNER
    reason: str | None = None


@dataclass(frozen=True)
class ListingRemovedEvent(DomainEvent):
    listing_id: UUID = field(default_factory=uuid4)
    removed_by: str = ""
    actor_role: ActorRole = ActorRole.OWNER
    last_status: AdStatus = AdStatus.PENDING


@dataclass(frozen=True)
class MessageSentEvent(DomainEvent):
    message_id: UUID = field(default_factory=uuid4)
    listing_id: UUID = field(default_factory=uuid4)
    sender_id: str = ""
    receiver_id: str = ""


@dataclass(frozen=True)
class ThreadReadEvent(DomainEvent):
    """Published when a receiver marks one listing's thread as read."""

    listing_id: UUID = field(default_factory=uuid4)
    reader_id: str = ""
    marked_count: int = 0
