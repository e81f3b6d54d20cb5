from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    get_actor,
    get_chat_queries,
    get_listing_queries,
    get_mark_thread_read_use_case,
    get_send_message_use_case,
)
from src.api.schemas.chat_schemas import (
    ChatPreviewResponse,
    MarkReadResponse,
    MessageResponse,
    SendMessageRequest,
    ThreadsResponse,
    UnreadCountResponse,
)
from src.application.use_cases.chat import ChatQueries, MarkThreadRead, SendMessage, SendMessageInput
from src.application.use_cases.listing_queries import ListingQueries
from src.domain.entities.actor import Actor

router = APIRouter(tags=["chat"])


@router.post(
    "/listings/{listing_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    listing_id: UUID,
    body: SendMessageRequest,
    actor: Actor = Depends(get_actor),
    use_case: SendMessage = Depends(get_send_message_use_case),
    listings: ListingQueries = Depends(get_listing_queries),
) -> MessageResponse:
    receiver_id = body.receiver_id
    if receiver_id is None:
        receiver_id = (await listings.get(listing_id)).owner_id
    message = await use_case.execute(
        SendMessageInput(
            listing_id=listing_id,
            sender_id=actor.user_id,
            receiver_id=receiver_id,
            text=body.text,
            sender_username=actor.username,
        )
    )
    return MessageResponse.model_validate(message)


@router.get("/listings/{listing_id}/messages", response_model=list[MessageResponse])
async def get_thread(
    listing_id: UUID,
    actor: Actor = Depends(get_actor),
    queries: ChatQueries = Depends(get_chat_queries),
) -> list[MessageResponse]:
    """The caller's side of one listing's thread, oldest first."""
    return [MessageResponse.model_validate(m) for m in await queries.thread(listing_id, actor.user_id)]


@router.post("/listings/{listing_id}/messages/read", response_model=MarkReadResponse)
async def mark_thread_read(
    listing_id: UUID,
    actor: Actor = Depends(get_actor),
    use_case: MarkThreadRead = Depends(get_mark_thread_read_use_case),
) -> MarkReadResponse:
    marked = await use_case.execute(listing_id, actor.user_id)
    return MarkReadResponse(listing_id=listing_id, marked=marked)


@router.get("/me/chats", response_model=list[ChatPreviewResponse])
async def my_chats(
    actor: Actor = Depends(get_actor),
    queries: ChatQueries = Depends(get_chat_queries),
) -> list[ChatPreviewResponse]:
    return [ChatPreviewResponse.from_preview(p) for p in await queries.previews(actor.user_id)]


@router.get("/me/threads", response_model=ThreadsResponse)
async def my_threads(
    actor: Actor = Depends(get_actor),
    queries: ChatQueries = Depends(get_chat_queries),
) -> ThreadsResponse:
    return ThreadsResponse(listing_ids=sorted(await queries.threads_for(actor.user_id), key=str))


@router.get("/me/unread-count", response_model=UnreadCountResponse)
async def my_unread_count(
    actor: Actor = Depends(get_actor),
    queries: ChatQueries = Depends(get_chat_queries),
) -> UnreadCountResponse:
    return UnreadCountResponse(count=await queries.unread_count_for(actor.user_id))
