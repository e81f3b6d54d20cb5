"""Unit tests for the in-memory store implementations."""
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from src.domain.entities.listing import Listing
from src.domain.entities.message import Message
from src.domain.enums.ad_status import ActorRole, AdStatus
from src.domain.errors import ListingNotFoundError
from src.infrastructure.memory.repositories import (
    InMemoryListingRepository,
    InMemoryMessageRepository,
    InMemoryStatusHistoryRepository,
)

_NOON = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def _listing(**overrides) -> Listing:  # type: ignore[no-untyped-def]
    values = dict(owner_id="seller-1", title="Kettle", status=AdStatus.ACTIVE)
    values.update(overrides)
    return Listing(**values)


class TestInMemoryListingRepository:
    @pytest.mark.asyncio
    async def test_create_forces_pending(self) -> None:
        repo = InMemoryListingRepository(clock=lambda: _NOON)
        stored = await repo.create(_listing(rejection_reason="stale"))

        assert stored.status == AdStatus.PENDING
        assert stored.rejection_reason is None
        assert stored.created_at == _NOON

    @pytest.mark.asyncio
    async def test_returns_copies(self) -> None:
        repo = InMemoryListingRepository()
        stored = await repo.create(_listing())
        stored.title = "Changed outside"

        fetched = await repo.get_by_id(stored.id)
        assert fetched is not None
        assert fetched.title == "Kettle"

    @pytest.mark.asyncio
    async def test_clock_never_goes_backwards(self) -> None:
        times = iter([_NOON, _NOON - timedelta(minutes=5)])
        repo = InMemoryListingRepository(clock=lambda: next(times))
        first = await repo.create(_listing(title="First"))
        second = await repo.create(_listing(title="Second"))

        assert second.created_at == first.created_at

    @pytest.mark.asyncio
    async def test_update_and_status_query(self) -> None:
        repo = InMemoryListingRepository()
        stored = await repo.create(_listing())

        updated = await repo.update(stored.id, {"status": AdStatus.ACTIVE})

        assert updated.status == AdStatus.ACTIVE
        assert [l.id for l in await repo.get_by_status(AdStatus.ACTIVE)] == [stored.id]
        assert await repo.get_by_status(AdStatus.PENDING) == []

    @pytest.mark.asyncio
    async def test_update_missing_raises(self) -> None:
        with pytest.raises(ListingNotFoundError):
            await InMemoryListingRepository().update(uuid4(), {"title": "x"})

    @pytest.mark.asyncio
    async def test_delete(self) -> None:
        repo = InMemoryListingRepository()
        stored = await repo.create(_listing())

        assert await repo.delete(stored.id) is True
        assert await repo.delete(stored.id) is False
        assert await repo.list_all() == []


class TestInMemoryMessageRepository:
    @pytest.mark.asyncio
    async def test_append_stamps_unread(self) -> None:
        repo = InMemoryMessageRepository(clock=lambda: _NOON)
        stored = await repo.append(
            Message(listing_id=uuid4(), sender_id="a", receiver_id="b", text="hi", read=True)
        )
        assert stored.read is False
        assert stored.timestamp == _NOON

    @pytest.mark.asyncio
    async def test_update_read_flags_only_touches_receiver(self) -> None:
        repo = InMemoryMessageRepository()
        listing_id = uuid4()
        await repo.append(Message(listing_id=listing_id, sender_id="a", receiver_id="b", text="1"))
        await repo.append(Message(listing_id=listing_id, sender_id="b", receiver_id="a", text="2"))
        await repo.append(Message(listing_id=uuid4(), sender_id="a", receiver_id="b", text="3"))

        assert await repo.update_read_flags(listing_id, "b") == 1
        assert await repo.update_read_flags(listing_id, "b") == 0
        unread = [m.text for m in await repo.get_for_participant("b") if m.is_unread_for("b")]
        assert unread == ["3"]


class TestInMemoryStatusHistoryRepository:
    @pytest.mark.asyncio
    async def test_history_per_listing(self) -> None:
        repo = InMemoryStatusHistoryRepository()
        listing_id = uuid4()
        await repo.save(
            listing_id=listing_id,
            from_status=None,
            to_status=AdStatus.PENDING,
            triggered_by="seller-1",
            actor_role=ActorRole.OWNER,
        )
        await repo.save(
            listing_id=uuid4(),
            from_status=None,
            to_status=AdStatus.PENDING,
            triggered_by="seller-2",
            actor_role=ActorRole.OWNER,
        )

        history = await repo.get_history_for_listing(listing_id)
        assert len(history) == 1
        assert history[0].metadata == {}
