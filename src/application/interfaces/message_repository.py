from abc import ABC, abstractmethod
from uuid import UUID

from src.domain.entities.message import Message


class MessageRepository(ABC):
    """Port for the chat message store."""

    @abstractmethod
    async def get_by_listing(self, listing_id: UUID) -> list[Message]:
        ...

    @abstractmethod
    async def get_for_participant(self, user_id: str) -> list[Message]:
        """Every message the user sent or received, across listings."""
        ...

    @abstractmethod
    async def append(self, message: Message) -> Message:
        """Store a new message and return it with its store-assigned timestamp."""
        ...

    @abstractmethod
    async def update_read_flags(self, listing_id: UUID, receiver_id: str) -> int:
        """Flip read=True for the receiver's messages in one thread; return how many changed."""
        ...
