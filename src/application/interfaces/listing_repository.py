from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from src.domain.entities.listing import Listing
from src.domain.enums.ad_status import AdStatus


class ListingRepository(ABC):
    """Port for persisting and querying Listing aggregates."""

    @abstractmethod
    async def get_by_status(self, status: AdStatus) -> list[Listing]:
        """Listings in the given status, newest first."""
        ...

    @abstractmethod
    async def get_by_id(self, listing_id: UUID) -> Listing | None:
        ...

    @abstractmethod
    async def get_by_owner(self, owner_id: str) -> list[Listing]:
        """All of one owner's listings regardless of status, newest first."""
        ...

    @abstractmethod
    async def list_all(self) -> list[Listing]:
        ...

    @abstractmethod
    async def create(self, listing: Listing) -> Listing:
        """Persist a new listing in PENDING and return it with its store-assigned created_at."""
        ...

    @abstractmethod
    async def update(self, listing_id: UUID, changes: dict[str, Any]) -> Listing:
        """Apply a partial update; raise ListingNotFoundError if the id is unknown."""
        ...

    @abstractmethod
    async def delete(self, listing_id: UUID) -> bool:
        """Return False when nothing was deleted."""
        ...
