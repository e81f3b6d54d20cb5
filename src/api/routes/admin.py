from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import (
    get_listing_queries,
    get_moderator,
    get_transition_state_use_case,
)
from src.api.schemas.listing_schemas import (
    DashboardStatsResponse,
    ListingHistoryResponse,
    ListingResponse,
    RejectRequest,
    StatusHistoryEntryResponse,
)
from src.application.use_cases.listing_queries import ListingQueries
from src.application.use_cases.transition_listing_state import (
    ListingAction,
    TransitionListingState,
    TransitionListingStateInput,
)
from src.domain.entities.actor import Actor
from src.domain.enums.ad_status import AdStatus

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/moderation-queue", response_model=list[ListingResponse])
async def moderation_queue(
    _: Actor = Depends(get_moderator),
    queries: ListingQueries = Depends(get_listing_queries),
) -> list[ListingResponse]:
    """Pending listings awaiting review, newest first."""
    return [ListingResponse.from_listing(l) for l in await queries.moderation_queue()]


@router.get("/listings", response_model=list[ListingResponse])
async def search_listings(
    term: str = Query(default=""),
    status: AdStatus | None = Query(default=None),
    owner_id: str | None = Query(default=None),
    _: Actor = Depends(get_moderator),
    queries: ListingQueries = Depends(get_listing_queries),
) -> list[ListingResponse]:
    """Listings in any status, optionally narrowed by owner, status and search term."""
    listings = await queries.admin_search(term=term, status=status, owner_id=owner_id)
    return [ListingResponse.from_listing(l) for l in listings]


@router.get("/stats", response_model=DashboardStatsResponse)
async def dashboard_stats(
    _: Actor = Depends(get_moderator),
    queries: ListingQueries = Depends(get_listing_queries),
) -> DashboardStatsResponse:
    return DashboardStatsResponse(**await queries.dashboard_stats())


@router.post("/listings/{listing_id}/approve", response_model=ListingResponse)
async def approve_listing(
    listing_id: UUID,
    moderator: Actor = Depends(get_moderator),
    use_case: TransitionListingState = Depends(get_transition_state_use_case),
) -> ListingResponse:
    result = await use_case.execute(
        TransitionListingStateInput(
            listing_id=listing_id, actor=moderator, action=ListingAction.APPROVE
        )
    )
    return ListingResponse.from_listing(result.listing)


@router.post("/listings/{listing_id}/reject", response_model=ListingResponse)
async def reject_listing(
    listing_id: UUID,
    body: RejectRequest,
    moderator: Actor = Depends(get_moderator),
    use_case: TransitionListingState = Depends(get_transition_state_use_case),
) -> ListingResponse:
    result = await use_case.execute(
        TransitionListingStateInput(
            listing_id=listing_id,
            actor=moderator,
            action=ListingAction.REJECT,
            reason=body.reason,
        )
    )
    return ListingResponse.from_listing(result.listing)


@router.get("/listings/{listing_id}/history", response_model=ListingHistoryResponse)
async def get_listing_history(
    listing_id: UUID,
    _: Actor = Depends(get_moderator),
    queries: ListingQueries = Depends(get_listing_queries),
) -> ListingHistoryResponse:
    history = await queries.history(listing_id)
    return ListingHistoryResponse(
        listing_id=listing_id,
        history=[
            StatusHistoryEntryResponse(
                id=entry.id,
                from_status=entry.from_status,
                to_status=entry.to_status,
                transitioned_at=entry.transitioned_at,
                triggered_by=entry.triggered_by,
                actor_role=entry.actor_role,
                metadata=entry.metadata,
            )
            for entry in history
        ],
    )
