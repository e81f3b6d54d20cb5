from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.listing_repository import ListingRepository
from src.domain.entities.listing import Listing
from src.domain.enums.ad_status import AdStatus, ProductCondition
from src.domain.errors import ListingNotFoundError
from src.infrastructure.database.models import ListingModel

# Columns an update may touch; identity and creation time are immutable
_UPDATABLE_COLUMNS: frozenset[str] = frozenset(
    {
        "owner_username",
        "title",
        "description",
        "price",
        "category",
        "subcategory",
        "images",
        "contact_info",
        "city",
        "condition",
        "status",
        "rejection_reason",
        "updated_at",
        "status_changed_at",
    }
)


def _to_domain(model: ListingModel) -> Listing:
    return Listing(
        id=model.id,
        owner_id=model.owner_id,
        owner_username=model.owner_username,
        title=model.title,
        description=model.description,
        price=Decimal(str(model.price)),
        category=model.category,
        subcategory=model.subcategory or "",
        images=list(model.images or []),
        contact_info=model.contact_info,
        city=model.city,
        condition=ProductCondition(model.condition),
        status=AdStatus(model.status),
        rejection_reason=model.rejection_reason,
        created_at=model.created_at,
        updated_at=model.updated_at,
        status_changed_at=model.status_changed_at,
    )


def _to_model(listing: Listing) -> ListingModel:
    # created_at/updated_at are left to the database defaults
    return ListingModel(
        id=listing.id,
        owner_id=listing.owner_id,
        owner_username=listing.owner_username,
        title=listing.title,
        description=listing.description,
        price=listing.price,
        category=listing.category,
        subcategory=listing.subcategory,
        images=list(listing.images),
        contact_info=listing.contact_info,
        city=listing.city,
        condition=listing.condition,
        status=AdStatus.PENDING,
        rejection_reason=None,
        status_changed_at=listing.status_changed_at,
    )


class SqlAlchemyListingRepository(ListingRepository):
    """SQLAlchemy implementation for listing persistence."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _select(self, *criteria: Any) -> list[Listing]:
        query = select(ListingModel).where(*criteria).order_by(ListingModel.created_at.desc())
        result = await self._session.execute(query)
        return [_to_domain(m) for m in result.scalars().all()]

    async def get_by_status(self, status: AdStatus) -> list[Listing]:
        return await self._select(ListingModel.status == status)

    async def get_by_id(self, listing_id: UUID) -> Listing | None:
        model = await self._session.get(ListingModel, listing_id)
        return _to_domain(model) if model is not None else None

    async def get_by_owner(self, owner_id: str) -> list[Listing]:
        return await self._select(ListingModel.owner_id == owner_id)

    async def list_all(self) -> list[Listing]:
        return await self._select()

    async def create(self, listing: Listing) -> Listing:
        model = _to_model(listing)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return _to_domain(model)

    async def update(self, listing_id: UUID, changes: dict[str, Any]) -> Listing:
        model = await self._session.get(ListingModel, listing_id)
        if model is None:
            raise ListingNotFoundError(listing_id)
        for name, value in changes.items():
            if name not in _UPDATABLE_COLUMNS:
                raise ValueError(f"Column {name} cannot be updated")
            setattr(model, name, list(value) if name == "images" else value)
        await self._session.flush()
        await self._session.refresh(model)
        return _to_domain(model)

    async def delete(self, listing_id: UUID) -> bool:
        result = await self._session.execute(
            delete(ListingModel).where(ListingModel.id == listing_id)
        )
        await self._session.flush()
        return bool(result.rowcount)
