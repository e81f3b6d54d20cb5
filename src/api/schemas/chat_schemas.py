from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.domain.chat.unread_tracker import ChatPreview


class SendMessageRequest(BaseModel):
    text: str
    # Defaults to the listing owner, which is what a buyer's first message needs
    receiver_id: str | None = None


class MessageResponse(BaseModel):
    id: UUID
    listing_id: UUID
    sender_id: str
    receiver_id: str
    sender_username: str | None = None
    text: str
    timestamp: datetime
    read: bool

    model_config = {"from_attributes": True}


class ChatPreviewResponse(BaseModel):
    listing_id: UUID
    listing_title: str
    listing_image: str | None = None
    last_message: MessageResponse | None = None
    unread_count: int

    @classmethod
    def from_preview(cls, preview: ChatPreview) -> "ChatPreviewResponse":
        return cls(
            listing_id=preview.listing_id,
            listing_title=preview.listing_title,
            listing_image=preview.listing_image,
            last_message=(
                MessageResponse.model_validate(preview.last_message)
                if preview.last_message is not None
                else None
            ),
            unread_count=preview.unread_count,
        )


class UnreadCountResponse(BaseModel):
    count: int


class ThreadsResponse(BaseModel):
    listing_ids: list[UUID]


class MarkReadResponse(BaseModel):
    listing_id: UUID
    marked: int
