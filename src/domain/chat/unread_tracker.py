from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from uuid import UUID

from src.domain.entities.listing import Listing
from src.domain.entities.message import Message


@dataclass(frozen=True)
class ChatPreview:
    listing_id: UUID
    listing_title: str
    listing_image: str | None
    last_message: Message | None
    unread_count: int


class ChatUnreadTracker:
    """
    Derives threads and unread counters from a message snapshot.

    Holds no state; every call works on the messages it is given, so the
    polling consumer can simply re-run it on each fresh fetch.
    """

    def threads_for(self, user_id: str, messages: Iterable[Message]) -> set[UUID]:
        """Listings where user_id sent or received at least one message."""
        return {m.listing_id for m in messages if m.involves(user_id)}

    def unread_count_for(self, user_id: str, messages: Iterable[Message]) -> int:
        return sum(1 for m in messages if m.is_unread_for(user_id))

    def unread_count_in_thread(
        self, user_id: str, listing_id: UUID, messages: Iterable[Message]
    ) -> int:
        return sum(1 for m in messages if m.listing_id == listing_id and m.is_unread_for(user_id))

    def thread_messages(
        self, listing_id: UUID, user_id: str, messages: Iterable[Message]
    ) -> list[Message]:
        """The user's side of one listing's thread, oldest first."""
        return sorted(
            (m for m in messages if m.listing_id == listing_id and m.involves(user_id)),
            key=lambda m: m.timestamp,
        )

    def chat_previews(
        self,
        user_id: str,
        messages: Iterable[Message],
        listings: Mapping[UUID, Listing],
    ) -> list[ChatPreview]:
        """
        One preview per thread the user takes part in.

        Threads whose listing has been deleted are skipped. Threads with unread
        messages come first, then the most recently active ones.
        """
        snapshot = list(messages)
        previews: list[ChatPreview] = []

        for listing_id in self.threads_for(user_id, snapshot):
            listing = listings.get(listing_id)
            if listing is None:
                continue
            thread = self.thread_messages(listing_id, user_id, snapshot)
            previews.append(
                ChatPreview(
                    listing_id=listing_id,
                    listing_title=listing.title,
                    listing_image=listing.images[0] if listing.images else None,
                    last_message=thread[-1] if thread else None,
                    unread_count=sum(1 for m in thread if m.is_unread_for(user_id)),
                )
            )

        # Two passes: recency first, then the stable unread-first partition
        previews.sort(
            key=lambda p: p.last_message.timestamp.timestamp() if p.last_message else float("-inf"),
            reverse=True,
        )
        previews.sort(key=lambda p: p.unread_count == 0)
        return previews
