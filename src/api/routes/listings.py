from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import (
    get_actor,
    get_edit_listing_use_case,
    get_listing_queries,
    get_remove_listing_use_case,
    get_submit_listing_use_case,
    get_transition_state_use_case,
)
from src.api.schemas.listing_schemas import (
    ListingCreateRequest,
    ListingResponse,
    ListingUpdateRequest,
    OwnerListingsResponse,
)
from src.application.use_cases.edit_listing import EditListing, EditListingInput
from src.application.use_cases.listing_queries import ListingQueries
from src.application.use_cases.remove_listing import RemoveListing, RemoveListingInput
from src.application.use_cases.submit_listing import SubmitListing, SubmitListingInput
from src.application.use_cases.transition_listing_state import (
    ListingAction,
    TransitionListingState,
    TransitionListingStateInput,
)
from src.domain.discovery.filter_spec import FilterSpec
from src.domain.entities.actor import Actor

router = APIRouter(tags=["listings"])


@router.get("/listings", response_model=list[ListingResponse])
async def browse_listings(
    term: str = Query(default=""),
    category: str | None = Query(default=None),
    subcategory: str | None = Query(default=None),
    city: str | None = Query(default=None),
    condition: str | None = Query(default=None),
    # Raw strings: a malformed bound is ignored rather than rejected
    min_price: str | None = Query(default=None),
    max_price: str | None = Query(default=None),
    sort: str = Query(default="newest"),
    queries: ListingQueries = Depends(get_listing_queries),
) -> list[ListingResponse]:
    """Active listings filtered and sorted for the browse page."""
    spec = FilterSpec(
        term=term,
        category=category,
        subcategory=subcategory,
        city=city,
        condition=condition,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
    )
    return [ListingResponse.from_listing(l) for l in await queries.discover(spec)]


@router.post("/listings", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
async def submit_listing(
    body: ListingCreateRequest,
    actor: Actor = Depends(get_actor),
    use_case: SubmitListing = Depends(get_submit_listing_use_case),
) -> ListingResponse:
    result = await use_case.execute(
        SubmitListingInput(
            owner_id=actor.user_id,
            fields=body.to_fields(),
            owner_username=actor.username,
        )
    )
    return ListingResponse.from_listing(result.listing)


@router.get("/listings/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: UUID,
    queries: ListingQueries = Depends(get_listing_queries),
) -> ListingResponse:
    return ListingResponse.from_listing(await queries.get(listing_id))


@router.patch("/listings/{listing_id}", response_model=ListingResponse)
async def edit_listing(
    listing_id: UUID,
    body: ListingUpdateRequest,
    actor: Actor = Depends(get_actor),
    use_case: EditListing = Depends(get_edit_listing_use_case),
) -> ListingResponse:
    result = await use_case.execute(
        EditListingInput(listing_id=listing_id, actor=actor, fields=body.to_fields())
    )
    return ListingResponse.from_listing(result.listing)


@router.post("/listings/{listing_id}/sold", response_model=ListingResponse)
async def mark_listing_sold(
    listing_id: UUID,
    actor: Actor = Depends(get_actor),
    use_case: TransitionListingState = Depends(get_transition_state_use_case),
) -> ListingResponse:
    result = await use_case.execute(
        TransitionListingStateInput(
            listing_id=listing_id, actor=actor, action=ListingAction.MARK_SOLD
        )
    )
    return ListingResponse.from_listing(result.listing)


@router.delete("/listings/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_listing(
    listing_id: UUID,
    actor: Actor = Depends(get_actor),
    use_case: RemoveListing = Depends(get_remove_listing_use_case),
) -> Response:
    await use_case.execute(RemoveListingInput(listing_id=listing_id, actor=actor))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me/listings", response_model=OwnerListingsResponse)
async def my_listings(
    actor: Actor = Depends(get_actor),
    queries: ListingQueries = Depends(get_listing_queries),
) -> OwnerListingsResponse:
    """The caller's listings in every status, with per-status counts for the tabs."""
    result = await queries.owned_by(actor.user_id)
    return OwnerListingsResponse(
        listings=[ListingResponse.from_listing(l) for l in result.listings],
        summary=result.summary,
    )
