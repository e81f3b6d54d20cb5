"""
FastAPI dependency injection wiring.

Each dependency function returns a fully-constructed object with its
collaborators injected, keeping the route handlers thin.
"""
from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.event_publisher import EventPublisher
from src.application.interfaces.listing_repository import ListingRepository
from src.application.interfaces.message_repository import MessageRepository
from src.application.interfaces.state_history_repository import StatusHistoryRepository
from src.application.use_cases.chat import ChatQueries, MarkThreadRead, SendMessage
from src.application.use_cases.edit_listing import EditListing
from src.application.use_cases.listing_queries import ListingQueries
from src.application.use_cases.remove_listing import RemoveListing
from src.application.use_cases.submit_listing import SubmitListing
from src.application.use_cases.transition_listing_state import TransitionListingState
from src.config import settings
from src.domain.entities.actor import Actor
from src.domain.errors import UnauthorizedError
from src.infrastructure.database.connection import get_db_session
from src.infrastructure.database.repositories.listing_repository import (
    SqlAlchemyListingRepository,
)
from src.infrastructure.database.repositories.message_repository import (
    SqlAlchemyMessageRepository,
)
from src.infrastructure.database.repositories.state_history_repository import (
    SqlAlchemyStatusHistoryRepository,
)
from src.infrastructure.messaging.logging_publisher import LoggingEventPublisher


# ---- Low-level dependencies ------------------------------------------------

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_db_session():
        yield session


def get_listing_repo(session: AsyncSession = Depends(get_session)) -> ListingRepository:
    return SqlAlchemyListingRepository(session)


def get_message_repo(session: AsyncSession = Depends(get_session)) -> MessageRepository:
    return SqlAlchemyMessageRepository(session)


def get_history_repo(session: AsyncSession = Depends(get_session)) -> StatusHistoryRepository:
    return SqlAlchemyStatusHistoryRepository(session)


def get_event_publisher() -> EventPublisher:
    return LoggingEventPublisher()


# ---- Identity ----------------------------------------------------------------

def get_moderator_ids() -> frozenset[str]:
    return frozenset(settings.moderator_ids)


def get_actor(
    x_user_id: str | None = Header(default=None),
    x_username: str | None = Header(default=None),
    moderator_ids: frozenset[str] = Depends(get_moderator_ids),
) -> Actor:
    """The caller as identified by the upstream auth layer."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="X-User-Id header is required."
        )
    return Actor(user_id=x_user_id, is_moderator=x_user_id in moderator_ids, username=x_username)


def get_moderator(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_moderator:
        raise UnauthorizedError("Moderator access required.")
    return actor


# ---- Use-case dependencies -------------------------------------------------

def get_listing_queries(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    history_repo: StatusHistoryRepository = Depends(get_history_repo),
) -> ListingQueries:
    return ListingQueries(listing_repo, history_repo)


def get_submit_listing_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    history_repo: StatusHistoryRepository = Depends(get_history_repo),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> SubmitListing:
    return SubmitListing(listing_repo, history_repo, event_publisher)


def get_edit_listing_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    history_repo: StatusHistoryRepository = Depends(get_history_repo),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> EditListing:
    return EditListing(listing_repo, history_repo, event_publisher)


def get_transition_state_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    history_repo: StatusHistoryRepository = Depends(get_history_repo),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> TransitionListingState:
    return TransitionListingState(listing_repo, history_repo, event_publisher)


def get_remove_listing_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> RemoveListing:
    return RemoveListing(listing_repo, event_publisher)


def get_send_message_use_case(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    message_repo: MessageRepository = Depends(get_message_repo),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> SendMessage:
    return SendMessage(listing_repo, message_repo, event_publisher)


def get_mark_thread_read_use_case(
    message_repo: MessageRepository = Depends(get_message_repo),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> MarkThreadRead:
    return MarkThreadRead(message_repo, event_publisher)


def get_chat_queries(
    listing_repo: ListingRepository = Depends(get_listing_repo),
    message_repo: MessageRepository = Depends(get_message_repo),
) -> ChatQueries:
    return ChatQueries(listing_repo, message_repo)
