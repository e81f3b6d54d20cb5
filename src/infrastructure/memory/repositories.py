"""
In-process implementations of the store ports.

Records are copied on the way in and out so callers never share mutable
state with the store. Timestamps come from an injectable clock and never go
backwards, which keeps newest-first ordering total.
"""
import copy
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from src.application.interfaces.listing_repository import ListingRepository
from src.application.interfaces.message_repository import MessageRepository
from src.application.interfaces.state_history_repository import (
    StatusHistoryRecord,
    StatusHistoryRepository,
)
from src.domain.entities.listing import Listing
from src.domain.entities.message import Message
from src.domain.enums.ad_status import ActorRole, AdStatus
from src.domain.errors import ListingNotFoundError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _MonotonicClock:
    def __init__(self, clock: Callable[[], datetime]) -> None:
        self._clock = clock
        self._last: datetime | None = None

    def __call__(self) -> datetime:
        now = self._clock()
        if self._last is not None and now < self._last:
            now = self._last
        self._last = now
        return now


class InMemoryListingRepository(ListingRepository):
    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = _MonotonicClock(clock)
        self._listings: dict[UUID, Listing] = {}

    def _newest_first(self, listings: list[Listing]) -> list[Listing]:
        ordered = sorted(listings, key=lambda l: l.created_at, reverse=True)
        return [copy.deepcopy(l) for l in ordered]

    async def get_by_status(self, status: AdStatus) -> list[Listing]:
        return self._newest_first([l for l in self._listings.values() if l.status is status])

    async def get_by_id(self, listing_id: UUID) -> Listing | None:
        listing = self._listings.get(listing_id)
        return copy.deepcopy(listing) if listing is not None else None

    async def get_by_owner(self, owner_id: str) -> list[Listing]:
        return self._newest_first([l for l in self._listings.values() if l.owner_id == owner_id])

    async def list_all(self) -> list[Listing]:
        return self._newest_first(list(self._listings.values()))

    async def create(self, listing: Listing) -> Listing:
        stored = copy.deepcopy(listing)
        stored._events.clear()
        stored._changes.clear()
        now = self._clock()
        stored.status = AdStatus.PENDING
        stored.rejection_reason = None
        stored.created_at = stored.updated_at = stored.status_changed_at = now
        self._listings[stored.id] = stored
        return copy.deepcopy(stored)

    async def update(self, listing_id: UUID, changes: dict[str, Any]) -> Listing:
        stored = self._listings.get(listing_id)
        if stored is None:
            raise ListingNotFoundError(listing_id)
        for name, value in changes.items():
            setattr(stored, name, copy.deepcopy(value))
        return copy.deepcopy(stored)

    async def delete(self, listing_id: UUID) -> bool:
        return self._listings.pop(listing_id, None) is not None


class InMemoryMessageRepository(MessageRepository):
    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = _MonotonicClock(clock)
        self._messages: list[Message] = []

    def _select(self, predicate: Callable[[Message], bool]) -> list[Message]:
        return [copy.deepcopy(m) for m in self._messages if predicate(m)]

    async def get_by_listing(self, listing_id: UUID) -> list[Message]:
        return self._select(lambda m: m.listing_id == listing_id)

    async def get_for_participant(self, user_id: str) -> list[Message]:
        return self._select(lambda m: m.involves(user_id))

    async def append(self, message: Message) -> Message:
        stored = copy.deepcopy(message)
        stored._events.clear()
        stored.timestamp = self._clock()
        stored.read = False
        self._messages.append(stored)
        return copy.deepcopy(stored)

    async def update_read_flags(self, listing_id: UUID, receiver_id: str) -> int:
        marked = 0
        for message in self._messages:
            if message.listing_id == listing_id and message.is_unread_for(receiver_id):
                message.read = True
                marked += 1
        return marked


class InMemoryStatusHistoryRepository(StatusHistoryRepository):
    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = _MonotonicClock(clock)
        self._records: list[StatusHistoryRecord] = []

    async def save(
        self,
        *,
        listing_id: UUID,
        from_status: AdStatus | None,
        to_status: AdStatus,
        triggered_by: str,
        actor_role: ActorRole,
        metadata: dict | None = None,  # type: ignore[type-arg]
    ) -> StatusHistoryRecord:
        record = StatusHistoryRecord(
            id=uuid.uuid4(),
            listing_id=listing_id,
            from_status=from_status,
            to_status=to_status,
            transitioned_at=self._clock(),
            triggered_by=triggered_by,
            actor_role=actor_role,
            metadata=dict(metadata or {}),
        )
        self._records.append(record)
        return record

    async def get_history_for_listing(self, listing_id: UUID) -> list[StatusHistoryRecord]:
        return [r for r in self._records if r.listing_id == listing_id]
