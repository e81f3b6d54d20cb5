"""Chat use cases: sending, marking threads read and the unread/thread views."""
from dataclasses import dataclass
from uuid import UUID

import structlog

from src.application.interfaces.event_publisher import EventPublisher
from src.application.interfaces.listing_repository import ListingRepository
from src.application.interfaces.message_repository import MessageRepository
from src.domain.chat.unread_tracker import ChatPreview, ChatUnreadTracker
from src.domain.entities.message import Message
from src.domain.errors import InvalidArgumentError, ListingNotFoundError
from src.domain.events.domain_events import ThreadReadEvent

logger = structlog.get_logger(__name__)


@dataclass
class SendMessageInput:
    listing_id: UUID
    sender_id: str
    receiver_id: str
    text: str
    sender_username: str | None = None


class SendMessage:
    """
    Use case: Append a message to a listing's thread.

    Validation happens before the store is touched, so a rejected send never
    shows up as a thread for either participant.
    """

    def __init__(
        self,
        listing_repo: ListingRepository,
        message_repo: MessageRepository,
        event_publisher: EventPublisher,
    ) -> None:
        self._listing_repo = listing_repo
        self._message_repo = message_repo
        self._event_publisher = event_publisher

    async def execute(self, input_data: SendMessageInput) -> Message:
        message = Message.compose(
            listing_id=input_data.listing_id,
            sender_id=input_data.sender_id,
            receiver_id=input_data.receiver_id,
            text=input_data.text,
            sender_username=input_data.sender_username,
        )

        if await self._listing_repo.get_by_id(input_data.listing_id) is None:
            raise ListingNotFoundError(input_data.listing_id)

        stored = await self._message_repo.append(message)
        await self._event_publisher.publish_many(message.collect_events())

        logger.info(
            "message_sent",
            message_id=str(stored.id),
            listing_id=str(stored.listing_id),
            sender_id=stored.sender_id,
            receiver_id=stored.receiver_id,
        )
        return stored


class MarkThreadRead:
    """Use case: The receiver marks every message addressed to them in one thread as read."""

    def __init__(self, message_repo: MessageRepository, event_publisher: EventPublisher) -> None:
        self._message_repo = message_repo
        self._event_publisher = event_publisher

    async def execute(self, listing_id: UUID, reader_id: str) -> int:
        if not reader_id:
            raise InvalidArgumentError("A reader is required to mark a thread as read.")

        marked = await self._message_repo.update_read_flags(listing_id, reader_id)
        if marked:
            await self._event_publisher.publish(
                ThreadReadEvent(listing_id=listing_id, reader_id=reader_id, marked_count=marked)
            )
        logger.debug("thread_marked_read", listing_id=str(listing_id), reader_id=reader_id, marked=marked)
        return marked


class ChatQueries:
    """Polled read-side views over a user's messages."""

    def __init__(
        self,
        listing_repo: ListingRepository,
        message_repo: MessageRepository,
        tracker: ChatUnreadTracker | None = None,
    ) -> None:
        self._listing_repo = listing_repo
        self._message_repo = message_repo
        self._tracker = tracker or ChatUnreadTracker()

    async def threads_for(self, user_id: str) -> set[UUID]:
        return self._tracker.threads_for(user_id, await self._message_repo.get_for_participant(user_id))

    async def unread_count_for(self, user_id: str) -> int:
        return self._tracker.unread_count_for(
            user_id, await self._message_repo.get_for_participant(user_id)
        )

    async def thread(self, listing_id: UUID, user_id: str) -> list[Message]:
        return self._tracker.thread_messages(
            listing_id, user_id, await self._message_repo.get_by_listing(listing_id)
        )

    async def previews(self, user_id: str) -> list[ChatPreview]:
        messages = await self._message_repo.get_for_participant(user_id)
        listings = {}
        for listing_id in self._tracker.threads_for(user_id, messages):
            listing = await self._listing_repo.get_by_id(listing_id)
            if listing is not None:
                listings[listing_id] = listing
        return self._tracker.chat_previews(user_id, messages, listings)
