from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.domain.entities.listing import Listing
from src.domain.enums.ad_status import ActorRole, AdStatus, ProductCondition


class ListingResponse(BaseModel):
    id: UUID
    owner_id: str
    owner_username: str | None = None
    title: str
    description: str
    price: Decimal
    category: str
    subcategory: str
    images: list[str]
    contact_info: str
    city: str
    condition: ProductCondition
    status: AdStatus
    rejection_reason: str | None = None
    created_at: datetime
    updated_at: datetime
    status_changed_at: datetime

    model_config = {"from_attributes": True}

    @classmethod
    def from_listing(cls, listing: Listing) -> "ListingResponse":
        return cls.model_validate(listing)


class ListingCreateRequest(BaseModel):
    # Everything optional here so the domain can report every missing field at once
    title: str = ""
    description: str = ""
    price: Decimal | None = None
    category: str = ""
    subcategory: str = ""
    images: list[str] = []
    contact_info: str = ""
    city: str = ""
    condition: ProductCondition | None = None

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump()


class ListingUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    price: Decimal | None = None
    category: str | None = None
    subcategory: str | None = None
    images: list[str] | None = None
    contact_info: str | None = None
    city: str | None = None
    condition: ProductCondition | None = None

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class OwnerListingsResponse(BaseModel):
    listings: list[ListingResponse]
    summary: dict[str, int]


class RejectRequest(BaseModel):
    reason: str = ""


class StatusHistoryEntryResponse(BaseModel):
    id: UUID
    from_status: AdStatus | None
    to_status: AdStatus
    transitioned_at: datetime
    triggered_by: str
    actor_role: ActorRole
    metadata: dict  # type: ignore[type-arg]


class ListingHistoryResponse(BaseModel):
    listing_id: UUID
    history: list[StatusHistoryEntryResponse]


class DashboardStatsResponse(BaseModel):
    pending: int
    active: int
    rejected: int
    sold: int
    total: int
