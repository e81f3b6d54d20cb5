"""Unit tests for the Message domain entity."""
from uuid import uuid4

import pytest

from src.domain.entities.message import Message
from src.domain.errors import InvalidArgumentError
from src.domain.events.domain_events import MessageSentEvent


def _compose(**overrides):  # type: ignore[no-untyped-def]
    defaults = dict(
        listing_id=uuid4(),
        sender_id="buyer-7",
        receiver_id="seller-1",
        text="Is it still available?",
    )
    defaults.update(overrides)
    return Message.compose(**defaults)


class TestCompose:
    def test_starts_unread(self) -> None:
        message = _compose()
        assert message.read is False

    def test_strips_text(self) -> None:
        assert _compose(text="  Hello  ").text == "Hello"

    def test_emits_sent_event(self) -> None:
        message = _compose()
        events = message.collect_events()
        assert len(events) == 1
        assert isinstance(events[0], MessageSentEvent)
        assert events[0].message_id == message.id

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_rejects_empty_text(self, text: str) -> None:
        with pytest.raises(InvalidArgumentError):
            _compose(text=text)

    def test_rejects_self_message(self) -> None:
        with pytest.raises(InvalidArgumentError):
            _compose(receiver_id="buyer-7")

    def test_requires_receiver(self) -> None:
        with pytest.raises(InvalidArgumentError):
            _compose(receiver_id="")


class TestParticipants:
    def test_involves_both_sides(self) -> None:
        message = _compose()
        assert message.involves("buyer-7")
        assert message.involves("seller-1")
        assert not message.involves("someone-else")

    def test_unread_only_for_receiver(self) -> None:
        message = _compose()
        assert message.is_unread_for("seller-1") is True
        assert message.is_unread_for("buyer-7") is False
        message.read = True
        assert message.is_unread_for("seller-1") is False
