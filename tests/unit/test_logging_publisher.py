"""Unit tests for event naming and the structured-log publisher."""
from unittest.mock import patch
from uuid import uuid4

import pytest

from src.domain.enums.ad_status import ActorRole, AdStatus
from src.domain.events.domain_events import (
    DomainEvent,
    ListingEditedEvent,
    ListingStatusChangedEvent,
    MessageSentEvent,
)
from src.infrastructure.messaging.logging_publisher import (
    LoggingEventPublisher,
    event_name,
    serialise_event,
)


class TestEventName:
    def test_status_change_uses_target_status(self) -> None:
        event = ListingStatusChangedEvent(to_status=AdStatus.SOLD)
        assert event_name(event) == "listing.status.sold"

    def test_message_sent(self) -> None:
        assert event_name(MessageSentEvent()) == "message.sent"

    def test_unknown(self) -> None:
        assert event_name(DomainEvent()) == "event.unknown"


class TestSerialiseEvent:
    def test_values_are_json_friendly(self) -> None:
        listing_id = uuid4()
        event = ListingStatusChangedEvent(
            listing_id=listing_id,
            from_status=AdStatus.PENDING,
            to_status=AdStatus.REJECTED,
            triggered_by="mod-1",
            actor_role=ActorRole.MODERATOR,
            reason="Blurry photos",
        )

        payload = serialise_event(event)

        assert payload["event_type"] == "listing.status.rejected"
        assert payload["listing_id"] == str(listing_id)
        assert payload["from_status"] == "pending"
        assert payload["actor_role"] == "moderator"
        assert isinstance(payload["occurred_at"], str)

    def test_keeps_changed_fields(self) -> None:
        payload = serialise_event(ListingEditedEvent(changed_fields=("price", "title")))
        assert payload["changed_fields"] == ("price", "title")


class TestLoggingEventPublisher:
    @pytest.mark.asyncio
    async def test_publish_many_logs_each_event(self) -> None:
        events = [MessageSentEvent(), ListingEditedEvent()]
        with patch("src.infrastructure.messaging.logging_publisher.logger") as log:
            await LoggingEventPublisher().publish_many(events)

        assert log.info.call_count == 2
        first = log.info.call_args_list[0]
        assert first.args == ("domain_event",)
        assert first.kwargs["event_type"] == "message.sent"
