from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.message_repository import MessageRepository
from src.domain.entities.message import Message
from src.infrastructure.database.models import MessageModel


def _to_domain(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        listing_id=model.listing_id,
        sender_id=model.sender_id,
        receiver_id=model.receiver_id,
        sender_username=model.sender_username,
        text=model.text,
        timestamp=model.timestamp,
        read=model.read,
    )


class SqlAlchemyMessageRepository(MessageRepository):
    """SQLAlchemy implementation of the chat message store."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_listing(self, listing_id: UUID) -> list[Message]:
        result = await self._session.execute(
            select(MessageModel)
            .where(MessageModel.listing_id == listing_id)
            .order_by(MessageModel.timestamp.asc())
        )
        return [_to_domain(m) for m in result.scalars().all()]

    async def get_for_participant(self, user_id: str) -> list[Message]:
        result = await self._session.execute(
            select(MessageModel)
            .where(or_(MessageModel.sender_id == user_id, MessageModel.receiver_id == user_id))
            .order_by(MessageModel.timestamp.asc())
        )
        return [_to_domain(m) for m in result.scalars().all()]

    async def append(self, message: Message) -> Message:
        model = MessageModel(
            id=message.id,
            listing_id=message.listing_id,
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            sender_username=message.sender_username,
            text=message.text,
            read=False,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return _to_domain(model)

    async def update_read_flags(self, listing_id: UUID, receiver_id: str) -> int:
        result = await self._session.execute(
            update(MessageModel)
            .where(
                MessageModel.listing_id == listing_id,
                MessageModel.receiver_id == receiver_id,
                MessageModel.read.is_(False),
            )
            .values(read=True)
        )
        await self._session.flush()
        return result.rowcount or 0
