import uuid
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.state_history_repository import (
    StatusHistoryRecord,
    StatusHistoryRepository,
)
from src.domain.enums.ad_status import ActorRole, AdStatus
from src.infrastructure.database.models import ListingStatusHistoryModel


def _to_record(model: ListingStatusHistoryModel) -> StatusHistoryRecord:
    return StatusHistoryRecord(
        id=model.id,
        listing_id=model.listing_id,
        from_status=AdStatus(model.from_status) if model.from_status else None,
        to_status=AdStatus(model.to_status),
        transitioned_at=model.transitioned_at,
        triggered_by=model.triggered_by,
        actor_role=ActorRole(model.actor_role),
        metadata=model.metadata_,
    )


class SqlAlchemyStatusHistoryRepository(StatusHistoryRepository):
    """SQLAlchemy-backed implementation of StatusHistoryRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(
        self,
        *,
        listing_id: UUID,
        from_status: AdStatus | None,
        to_status: AdStatus,
        triggered_by: str,
        actor_role: ActorRole,
        metadata: dict | None = None,  # type: ignore[type-arg]
    ) -> StatusHistoryRecord:
        model = ListingStatusHistoryModel(
            id=uuid.uuid4(),
            listing_id=listing_id,
            from_status=from_status,
            to_status=to_status,
            triggered_by=triggered_by,
            actor_role=actor_role,
            metadata_=metadata or {},
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return _to_record(model)

    async def get_history_for_listing(self, listing_id: UUID) -> list[StatusHistoryRecord]:
        result = await self._session.execute(
            select(ListingStatusHistoryModel)
            .where(ListingStatusHistoryModel.listing_id == listing_id)
            .order_by(ListingStatusHistoryModel.transitioned_at.asc())
        )
        return [_to_record(m) for m in result.scalars().all()]
