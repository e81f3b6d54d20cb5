from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from src.domain.errors import InvalidArgumentError
from src.domain.events.domain_events import DomainEvent, MessageSentEvent


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Message:
    """One chat message between two participants about a listing."""

    id: UUID = field(default_factory=uuid4)
    listing_id: UUID = field(default_factory=uuid4)
    sender_id: str = ""
    receiver_id: str = ""
    # Snapshot of the sender's display name at write time
    sender_username: str | None = None
    text: str = ""
    timestamp: datetime = field(default_factory=_utcnow)
    read: bool = False

    _events: list[DomainEvent] = field(default_factory=list, repr=False, compare=False)

    @classmethod
    def compose(
        cls,
        *,
        listing_id: UUID,
        sender_id: str,
        receiver_id: str,
        text: str,
        sender_username: str | None = None,
    ) -> "Message":
        body = text.strip() if isinstance(text, str) else ""
        if not body:
            raise InvalidArgumentError("Message text must not be empty.")
        if not sender_id or not receiver_id:
            raise InvalidArgumentError("Both sender and receiver are required.")
        if sender_id == receiver_id:
            raise InvalidArgumentError("Cannot send a message to yourself.")

        message = cls(
            listing_id=listing_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            sender_username=sender_username,
            text=body,
        )
        message._events.append(
            MessageSentEvent(
                message_id=message.id,
                listing_id=listing_id,
                sender_id=sender_id,
                receiver_id=receiver_id,
            )
        )
        return message

    def involves(self, user_id: str) -> bool:
        return user_id in (self.sender_id, self.receiver_id)

    def is_unread_for(self, user_id: str) -> bool:
        return self.receiver_id == user_id and not self.read

    def collect_events(self) -> list[DomainEvent]:
        events = list(self._events)
        self._events.clear()
        return events
