"""
Event publisher that writes domain events to the structured log.

There is no broker behind the marketplace: consumers poll the stores, so
events only feed the audit trail in the logs.
"""
from dataclasses import asdict
from enum import Enum
from uuid import UUID

import structlog

from src.application.interfaces.event_publisher import EventPublisher
from src.domain.events.domain_events import (
    DomainEvent,
    ListingEditedEvent,
    ListingRemovedEvent,
    ListingStatusChangedEvent,
    ListingSubmittedEvent,
    MessageSentEvent,
    ThreadReadEvent,
)

logger = structlog.get_logger(__name__)


def event_name(event: DomainEvent) -> str:
    if isinstance(event, ListingStatusChangedEvent):
        return f"listing.status.{event.to_status.value}"
    if isinstance(event, ListingSubmittedEvent):
        return "listing.submitted"
    if isinstance(event, ListingEditedEvent):
        return "listing.edited"
    if isinstance(event, ListingRemovedEvent):
        return "listing.removed"
    if isinstance(event, MessageSentEvent):
        return "message.sent"
    if isinstance(event, ThreadReadEvent):
        return "thread.read"
    return "event.unknown"


def serialise_event(event: DomainEvent) -> dict:  # type: ignore[type-arg]
    payload: dict = {"event_type": event_name(event)}  # type: ignore[type-arg]
    for key, value in asdict(event).items():
        if isinstance(value, (UUID, Enum)):
            value = value.value if isinstance(value, Enum) else str(value)
        elif hasattr(value, "isoformat"):
            value = value.isoformat()
        payload[key] = value
    return payload


class LoggingEventPublisher(EventPublisher):
    """Logs every event at info level."""

    async def publish(self, event: DomainEvent) -> None:
        payload = serialise_event(event)
        logger.info("domain_event", **payload)
