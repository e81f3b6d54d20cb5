from dataclasses import dataclass
from uuid import UUID

from src.application.interfaces.listing_repository import ListingRepository
from src.application.interfaces.state_history_repository import (
    StatusHistoryRecord,
    StatusHistoryRepository,
)
from src.domain.discovery.filter_spec import FilterSpec
from src.domain.discovery.pipeline import discover, filter_for_admin, newest_first, status_summary
from src.domain.entities.listing import Listing
from src.domain.enums.ad_status import AdStatus
from src.domain.errors import ListingNotFoundError


@dataclass
class OwnerListingsOutput:
    listings: list[Listing]
    summary: dict[str, int]


class ListingQueries:
    """Read-side operations: browsing, owner tabs and moderator views."""

    def __init__(
        self,
        listing_repo: ListingRepository,
        history_repo: StatusHistoryRepository,
    ) -> None:
        self._listing_repo = listing_repo
        self._history_repo = history_repo

    async def active_listings(self) -> list[Listing]:
        return await self._listing_repo.get_by_status(AdStatus.ACTIVE)

    async def discover(self, spec: FilterSpec | None = None) -> list[Listing]:
        """Fetch the active set and run it through the discovery pipeline."""
        return discover(await self.active_listings(), spec or FilterSpec())

    async def get(self, listing_id: UUID) -> Listing:
        listing = await self._listing_repo.get_by_id(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return listing

    async def history(self, listing_id: UUID) -> list[StatusHistoryRecord]:
        """Status audit trail for one listing, oldest first."""
        await self.get(listing_id)
        return await self._history_repo.get_history_for_listing(listing_id)

    async def owned_by(self, owner_id: str) -> OwnerListingsOutput:
        listings = newest_first(await self._listing_repo.get_by_owner(owner_id))
        return OwnerListingsOutput(listings=listings, summary=status_summary(listings))

    async def moderation_queue(self) -> list[Listing]:
        return newest_first(await self._listing_repo.get_by_status(AdStatus.PENDING))

    async def admin_search(
        self,
        *,
        term: str = "",
        status: AdStatus | None = None,
        owner_id: str | None = None,
    ) -> list[Listing]:
        return filter_for_admin(
            await self._listing_repo.list_all(), term=term, status=status, owner_id=owner_id
        )

    async def dashboard_stats(self) -> dict[str, int]:
        return status_summary(await self._listing_repo.list_all())
