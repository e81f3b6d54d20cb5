from dataclasses import dataclass, field
from typing import Any

import structlog

from src.application.interfaces.event_publisher import EventPublisher
from src.application.interfaces.listing_repository import ListingRepository
from src.application.interfaces.state_history_repository import StatusHistoryRepository
from src.domain.entities.listing import Listing
from src.domain.enums.ad_status import ActorRole, AdStatus

logger = structlog.get_logger(__name__)


@dataclass
class SubmitListingInput:
    owner_id: str
    fields: dict[str, Any] = field(default_factory=dict)
    owner_username: str | None = None


@dataclass
class SubmitListingOutput:
    listing: Listing


class SubmitListing:
    """
    Use case: Validate an owner's new ad and store it in PENDING, awaiting
    moderation.
    """

    def __init__(
        self,
        listing_repo: ListingRepository,
        history_repo: StatusHistoryRepository,
        event_publisher: EventPublisher,
    ) -> None:
        self._listing_repo = listing_repo
        self._history_repo = history_repo
        self._event_publisher = event_publisher

    async def execute(self, input_data: SubmitListingInput) -> SubmitListingOutput:
        # ValidationError propagates before anything is stored
        listing = Listing.submit(
            owner_id=input_data.owner_id,
            fields=input_data.fields,
            owner_username=input_data.owner_username,
        )
        listing.collect_changes()

        stored = await self._listing_repo.create(listing)

        await self._history_repo.save(
            listing_id=stored.id,
            from_status=None,
            to_status=AdStatus.PENDING,
            triggered_by=input_data.owner_id,
            actor_role=ActorRole.OWNER,
            metadata={"event": "submitted"},
        )

        await self._event_publisher.publish_many(listing.collect_events())

        logger.info(
            "listing_submitted",
            listing_id=str(stored.id),
            owner_id=stored.owner_id,
            category=stored.category,
            city=stored.city,
        )
        return SubmitListingOutput(listing=stored)
