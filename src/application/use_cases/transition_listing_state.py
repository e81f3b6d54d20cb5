from dataclasses import dataclass
from enum import Enum
from uuid import UUID

import structlog

from src.application.interfaces.event_publisher import EventPublisher
from src.application.interfaces.listing_repository import ListingRepository
from src.application.interfaces.state_history_repository import StatusHistoryRepository
from src.domain.entities.actor import Actor
from src.domain.entities.listing import Listing
from src.domain.enums.ad_status import AdStatus
from src.domain.errors import ListingNotFoundError
from src.domain.events.domain_events import DomainEvent, ListingStatusChangedEvent

logger = structlog.get_logger(__name__)


class ListingAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    MARK_SOLD = "mark_sold"


@dataclass
class TransitionListingStateInput:
    listing_id: UUID
    actor: Actor
    action: ListingAction
    reason: str | None = None


@dataclass
class TransitionListingStateOutput:
    listing: Listing
    from_status: AdStatus
    to_status: AdStatus


async def persist_listing_changes(
    listing: Listing,
    listing_repo: ListingRepository,
    history_repo: StatusHistoryRepository,
    event_publisher: EventPublisher,
) -> Listing:
    """
    Write the entity's buffered changes, then record one history entry per
    status change and publish the collected events.
    """
    stored = await listing_repo.update(listing.id, listing.collect_changes())

    events: list[DomainEvent] = listing.collect_events()
    for event in events:
        if not isinstance(event, ListingStatusChangedEvent):
            continue
        metadata: dict = {"triggered_by": event.triggered_by}  # type: ignore[type-arg]
        if event.reason:
            metadata["reason"] = event.reason
        await history_repo.save(
            listing_id=event.listing_id,
            from_status=event.from_status,
            to_status=event.to_status,
            triggered_by=event.triggered_by,
            actor_role=event.actor_role,
            metadata=metadata,
        )

    await event_publisher.publish_many(events)
    return stored


class TransitionListingState:
    """
    Use case: Approve, reject or mark a listing as sold.

    The entity checks the actor and the state machine before anything is
    written, so a failed call leaves the stored listing unchanged.
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

    async def execute(
        self, input_data: TransitionListingStateInput
    ) -> TransitionListingStateOutput:
        listing = await self._listing_repo.get_by_id(input_data.listing_id)
        if listing is None:
            raise ListingNotFoundError(input_data.listing_id)

        from_status = listing.status

        # Unauthorized / InvalidState / InvalidArgument propagate to the caller
        if input_data.action is ListingAction.APPROVE:
            listing.approve(input_data.actor)
        elif input_data.action is ListingAction.REJECT:
            listing.reject(input_data.actor, input_data.reason or "")
        else:
            listing.mark_sold(input_data.actor)

        stored = await persist_listing_changes(
            listing, self._listing_repo, self._history_repo, self._event_publisher
        )

        logger.info(
            "listing_status_transitioned",
            listing_id=str(listing.id),
            action=input_data.action.value,
            from_status=from_status.value,
            to_status=stored.status.value,
            triggered_by=input_data.actor.user_id,
        )

        return TransitionListingStateOutput(
            listing=stored,
            from_status=from_status,
            to_status=stored.status,
        )
