from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from uuid import UUID, uuid4

from src.domain.entities.actor import Actor
from src.domain.enums.ad_status import ActorRole, AdStatus, ProductCondition
from src.domain.errors import InvalidArgumentError, UnauthorizedError, ValidationError
from src.domain.events.domain_events import (
    DomainEvent,
    ListingEditedEvent,
    ListingStatusChangedEvent,
    ListingSubmittedEvent,
)
from src.domain.state_machine.lifecycle_state_machine import (
    InvalidStateTransitionError,
    LifecycleStateMachine,
)

_state_machine = LifecycleStateMachine()
_CENTS = Decimal("0.01")

# Content fields an owner may change through an edit
EDITABLE_FIELDS: frozenset[str] = frozenset(
    {
        "title",
        "description",
        "price",
        "category",
        "subcategory",
        "images",
        "contact_info",
        "city",
        "condition",
    }
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def normalize_listing_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """
    Structurally validate listing content and return the cleaned values.

    Raises ValidationError naming every missing or malformed required field.
    """
    missing: list[str] = []
    cleaned: dict[str, Any] = {}

    for name in ("title", "description", "category", "city", "contact_info"):
        value = _text(fields.get(name))
        if not value:
            missing.append(name)
        cleaned[name] = value

    cleaned["subcategory"] = _text(fields.get("subcategory"))

    try:
        price = Decimal(str(fields.get("price")).strip())
        if not price.is_finite():
            raise InvalidOperation
        # Stored as NUMERIC(12, 2); the positivity check applies to the stored value
        price = price.quantize(_CENTS, rounding=ROUND_HALF_UP)
        if price <= 0:
            raise InvalidOperation
        cleaned["price"] = price
    except (InvalidOperation, ValueError):
        missing.append("price")

    try:
        cleaned["condition"] = ProductCondition(fields.get("condition"))
    except ValueError:
        missing.append("condition")

    raw_images = fields.get("images")
    if isinstance(raw_images, str):
        raw_images = [raw_images]
    elif not isinstance(raw_images, (list, tuple)):
        raw_images = []
    images = [img.strip() for img in raw_images if isinstance(img, str) and img.strip()]
    if not images:
        missing.append("images")
    cleaned["images"] = images

    if missing:
        raise ValidationError(missing)
    return cleaned


@dataclass
class Listing:
    """
    A single marketplace ad moving through the moderation lifecycle.

    Transition methods validate first and mutate only on success, so a failed
    call leaves the entity untouched. Pending domain events and changed fields
    are buffered for the application layer to collect.
    """

    # Identity
    id: UUID = field(default_factory=uuid4)
    owner_id: str = ""
    # Snapshot of the owner's display name at write time
    owner_username: str | None = None

    # Content
    title: str = ""
    description: str = ""
    price: Decimal = Decimal("0")
    category: str = ""
    subcategory: str = ""
    images: list[str] = field(default_factory=list)
    contact_info: str = ""
    city: str = ""
    condition: ProductCondition = ProductCondition.USED

    # Moderation
    status: AdStatus = AdStatus.PENDING
    rejection_reason: str | None = None

    # Timestamps
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    status_changed_at: datetime = field(default_factory=_utcnow)

    _events: list[DomainEvent] = field(default_factory=list, repr=False, compare=False)
    _changes: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -------------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------------

    @classmethod
    def submit(
        cls,
        *,
        owner_id: str,
        fields: dict[str, Any],
        owner_username: str | None = None,
    ) -> "Listing":
        if not _text(owner_id):
            raise ValidationError(["owner_id"])
        cleaned = normalize_listing_fields(fields)
        listing = cls(owner_id=owner_id, owner_username=owner_username, **cleaned)
        listing._events.append(
            ListingSubmittedEvent(
                listing_id=listing.id,
                owner_id=owner_id,
                category=listing.category,
                city=listing.city,
                price=float(listing.price),
            )
        )
        return listing

    # -------------------------------------------------------------------------
    # Owner actions
    # -------------------------------------------------------------------------

    def edit(self, actor: Actor, fields: dict[str, Any]) -> None:
        """Apply an owner edit; any edit of a moderated listing re-enters the queue."""
        if not actor.owns(self.owner_id):
            raise UnauthorizedError(f"Only the owner may edit listing {self.id}.")

        unknown = sorted(set(fields) - EDITABLE_FIELDS)
        if unknown:
            raise InvalidArgumentError(f"Fields cannot be edited: {', '.join(unknown)}")

        if self.status is AdStatus.SOLD:
            raise InvalidStateTransitionError(self.status, AdStatus.PENDING)

        merged = {name: getattr(self, name) for name in EDITABLE_FIELDS}
        merged["condition"] = self.condition.value
        merged.update(fields)
        cleaned = normalize_listing_fields(merged)

        changed = tuple(sorted(name for name, value in cleaned.items() if getattr(self, name) != value))
        for name in changed:
            self._set(name, cleaned[name])
        if actor.username is not None and actor.username != self.owner_username:
            self._set("owner_username", actor.username)
        self._touch()

        if self.status is not AdStatus.PENDING:
            self._transition(AdStatus.PENDING, actor)
        elif self.rejection_reason is not None:
            self._set("rejection_reason", None)

        self._events.append(
            ListingEditedEvent(listing_id=self.id, owner_id=self.owner_id, changed_fields=changed)
        )

    def mark_sold(self, actor: Actor) -> None:
        if not actor.owns(self.owner_id):
            raise UnauthorizedError(f"Only the owner may mark listing {self.id} as sold.")
        self._transition(AdStatus.SOLD, actor)

    # -------------------------------------------------------------------------
    # Moderator actions
    # -------------------------------------------------------------------------

    def approve(self, actor: Actor) -> None:
        if not actor.is_moderator:
            raise UnauthorizedError("Only moderators may approve listings.")
        self._transition(AdStatus.ACTIVE, actor)

    def reject(self, actor: Actor, reason: str) -> None:
        if not actor.is_moderator:
            raise UnauthorizedError("Only moderators may reject listings.")
        reason = _text(reason)
        if not reason:
            raise InvalidArgumentError("A rejection reason is required.")
        self._transition(AdStatus.REJECTED, actor, reason=reason)

    def can_be_removed_by(self, actor: Actor) -> bool:
        return actor.owns(self.owner_id) or actor.is_moderator

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _transition(self, new_status: AdStatus, actor: Actor, reason: str | None = None) -> None:
        """Validate and apply a status change, recording the domain event."""
        role: ActorRole = _state_machine.required_role(self.status, new_status)

        old_status = self.status
        now = _utcnow()

        self._set("status", new_status)
        # Reason is kept only while rejected
        self._set("rejection_reason", reason if new_status is AdStatus.REJECTED else None)
        self._set("status_changed_at", now)
        self._touch(now)

        self._events.append(
            ListingStatusChangedEvent(
                listing_id=self.id,
                from_status=old_status,
                to_status=new_status,
                triggered_by=actor.user_id,
                actor_role=role,
                reason=reason,
            )
        )

    def _set(self, name: str, value: Any) -> None:
        setattr(self, name, value)
        self._changes[name] = value

    def _touch(self, now: datetime | None = None) -> None:
        self._set("updated_at", now or _utcnow())

    # -------------------------------------------------------------------------
    # Event / change collection
    # -------------------------------------------------------------------------

    def collect_events(self) -> list[DomainEvent]:
        """Return pending events and clear the internal buffer."""
        events = list(self._events)
        self._events.clear()
        return events

    def collect_changes(self) -> dict[str, Any]:
        """Return fields changed since the last collection and clear the buffer."""
        changes = dict(self._changes)
        self._changes.clear()
        return changes

    def content(self) -> dict[str, Any]:
        """Persistable field values, excluding identity and buffers."""
        return {
            "owner_id": self.owner_id,
            "owner_username": self.owner_username,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "subcategory": self.subcategory,
            "images": list(self.images),
            "contact_info": self.contact_info,
            "city": self.city,
            "condition": self.condition,
            "status": self.status,
            "rejection_reason": self.rejection_reason,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "status_changed_at": self.status_changed_at,
        }
