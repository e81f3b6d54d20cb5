from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.domain.enums.ad_status import ActorRole, AdStatus


@dataclass
class StatusHistoryRecord:
    id: UUID
    listing_id: UUID
    from_status: AdStatus | None
    to_status: AdStatus
    transitioned_at: datetime
    triggered_by: str
    actor_role: ActorRole
    metadata: dict  # type: ignore[type-arg]


class StatusHistoryRepository(ABC):
    """Port for persisting and querying listing status history."""

    @abstractmethod
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
        ...

    @abstractmethod
    async def get_history_for_listing(
        self, listing_id: UUID
    ) -> list[StatusHistoryRecord]:
        ...
