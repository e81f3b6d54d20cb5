from dataclasses import dataclass
from uuid import UUID

import structlog

from src.application.interfaces.event_publisher import EventPublisher
from src.application.interfaces.listing_repository import ListingRepository
from src.domain.entities.actor import Actor
from src.domain.errors import ListingNotFoundError, UnauthorizedError
from src.domain.events.domain_events import ListingRemovedEvent

logger = structlog.get_logger(__name__)


@dataclass
class RemoveListingInput:
    listing_id: UUID
    actor: Actor


class RemoveListing:
    """
    Use case: Permanently delete a listing, whatever its status.

    Allowed for the owner and for moderators; deletion sits outside the
    status machine.
    """

    def __init__(self, listing_repo: ListingRepository, event_publisher: EventPublisher) -> None:
        self._listing_repo = listing_repo
        self._event_publisher = event_publisher

    async def execute(self, input_data: RemoveListingInput) -> None:
        listing = await self._listing_repo.get_by_id(input_data.listing_id)
        if listing is None:
            raise ListingNotFoundError(input_data.listing_id)

        actor = input_data.actor
        if not listing.can_be_removed_by(actor):
            raise UnauthorizedError(f"User {actor.user_id} may not delete listing {listing.id}.")

        if not await self._listing_repo.delete(listing.id):
            raise ListingNotFoundError(listing.id)

        await self._event_publisher.publish(
            ListingRemovedEvent(
                listing_id=listing.id,
                removed_by=actor.user_id,
                actor_role=actor.role_for(listing.owner_id),
                last_status=listing.status,
            )
        )
        logger.info(
            "listing_removed",
            listing_id=str(listing.id),
            removed_by=actor.user_id,
            last_status=listing.status.value,
        )
