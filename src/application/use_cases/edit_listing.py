from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

import structlog

from src.application.interfaces.event_publisher import EventPublisher
from src.application.interfaces.listing_repository import ListingRepository
from src.application.interfaces.state_history_repository import StatusHistoryRepository
from src.application.use_cases.transition_listing_state import persist_listing_changes
from src.domain.entities.actor import Actor
from src.domain.entities.listing import Listing
from src.domain.enums.ad_status import AdStatus
from src.domain.errors import ListingNotFoundError

logger = structlog.get_logger(__name__)


@dataclass
class EditListingInput:
    listing_id: UUID
    actor: Actor
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass
class EditListingOutput:
    listing: Listing
    from_status: AdStatus


class EditListing:
    """Use case: Apply an owner's edit; edited listings go back to moderation."""

    def __init__(
        self,
        listing_repo: ListingRepository,
        history_repo: StatusHistoryRepository,
        event_publisher: EventPublisher,
    ) -> None:
        self._listing_repo = listing_repo
        self._history_repo = history_repo
        self._event_publisher = event_publisher

    async def execute(self, input_data: EditListingInput) -> EditListingOutput:
        listing = await self._listing_repo.get_by_id(input_data.listing_id)
        if listing is None:
            raise ListingNotFoundError(input_data.listing_id)

        from_status = listing.status
        listing.edit(input_data.actor, input_data.fields)

        stored = await persist_listing_changes(
            listing, self._listing_repo, self._history_repo, self._event_publisher
        )

        logger.info(
            "listing_edited",
            listing_id=str(stored.id),
            from_status=from_status.value,
            to_status=stored.status.value,
            fields=sorted(input_data.fields),
        )
        return EditListingOutput(listing=stored, from_status=from_status)
