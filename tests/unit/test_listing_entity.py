"""Unit tests for the Listing domain entity."""
from decimal import Decimal
from typing import Any

import pytest

from src.domain.entities.actor import Actor
from src.domain.entities.listing import Listing
from src.domain.enums.ad_status import ActorRole, AdStatus, ProductCondition
from src.domain.errors import InvalidArgumentError, UnauthorizedError, ValidationError
from src.domain.events.domain_events import (
    ListingEditedEvent,
    ListingStatusChangedEvent,
    ListingSubmittedEvent,
)
from src.domain.state_machine.lifecycle_state_machine import InvalidStateTransitionError

OWNER = Actor(user_id="seller-1", username="olena")
STRANGER = Actor(user_id="buyer-7")
MODERATOR = Actor(user_id="mod-1", is_moderator=True)


def _fields(**overrides: Any) -> dict[str, Any]:
    fields: dict[str, Any] = dict(
        title="iPhone 12",
        description="128GB, battery 87%",
        price="4200",
        category="electronics",
        subcategory="phones",
        images=["https://cdn.example.com/iphone-1.jpg"],
        contact_info="+380501234567",
        city="Kyiv",
        condition="used",
    )
    fields.update(overrides)
    return fields


def _make_listing(status: AdStatus = AdStatus.PENDING, **overrides: Any) -> Listing:
    listing = Listing.submit(owner_id=OWNER.user_id, fields=_fields(**overrides))
    if status is AdStatus.ACTIVE or status is AdStatus.SOLD:
        listing.approve(MODERATOR)
    if status is AdStatus.SOLD:
        listing.mark_sold(OWNER)
    if status is AdStatus.REJECTED:
        listing.reject(MODERATOR, "Blurry photos")
    listing.collect_events()
    listing.collect_changes()
    return listing


class TestSubmit:
    def test_starts_pending(self) -> None:
        listing = Listing.submit(owner_id="seller-1", fields=_fields())
        assert listing.status == AdStatus.PENDING
        assert listing.rejection_reason is None

    def test_normalizes_values(self) -> None:
        listing = Listing.submit(
            owner_id="seller-1", fields=_fields(title="  iPhone 12  ", price=4200)
        )
        assert listing.title == "iPhone 12"
        assert listing.price == Decimal("4200")
        assert listing.condition is ProductCondition.USED

    def test_emits_submitted_event(self) -> None:
        listing = Listing.submit(owner_id="seller-1", fields=_fields())
        events = listing.collect_events()
        assert len(events) == 1
        assert isinstance(events[0], ListingSubmittedEvent)
        assert events[0].city == "Kyiv"

    def test_events_cleared_after_collect(self) -> None:
        listing = Listing.submit(owner_id="seller-1", fields=_fields())
        listing.collect_events()
        assert listing.collect_events() == []

    def test_reports_every_missing_field(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Listing.submit(owner_id="seller-1", fields={})
        assert set(exc_info.value.missing_fields) == {
            "title",
            "description",
            "category",
            "city",
            "contact_info",
            "price",
            "condition",
            "images",
        }

    def test_subcategory_is_optional(self) -> None:
        listing = Listing.submit(owner_id="seller-1", fields=_fields(subcategory=None))
        assert listing.subcategory == ""

    @pytest.mark.parametrize("price", ["0", "-5", "abc", "NaN", "inf", None])
    def test_rejects_bad_price(self, price: Any) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Listing.submit(owner_id="seller-1", fields=_fields(price=price))
        assert exc_info.value.missing_fields == ["price"]

    def test_rejects_blank_images(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Listing.submit(owner_id="seller-1", fields=_fields(images=["  "]))
        assert exc_info.value.missing_fields == ["images"]

    def test_single_image_string_is_one_image(self) -> None:
        listing = Listing.submit(
            owner_id="seller-1", fields=_fields(images="  https://cdn.example.com/x.jpg ")
        )
        assert listing.images == ["https://cdn.example.com/x.jpg"]

    def test_rejects_non_list_images(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Listing.submit(owner_id="seller-1", fields=_fields(images=42))
        assert exc_info.value.missing_fields == ["images"]

    def test_price_is_kept_to_cents(self) -> None:
        listing = Listing.submit(owner_id="seller-1", fields=_fields(price="19.999"))
        assert listing.price == Decimal("20.00")
        assert listing.price.as_tuple().exponent == -2

    @pytest.mark.parametrize("price", ["0.001", "0.004"])
    def test_rejects_price_that_rounds_to_zero(self, price: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Listing.submit(owner_id="seller-1", fields=_fields(price=price))
        assert exc_info.value.missing_fields == ["price"]

    def test_rejects_unknown_condition(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Listing.submit(owner_id="seller-1", fields=_fields(condition="refurbished"))
        assert exc_info.value.missing_fields == ["condition"]

    def test_requires_owner(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Listing.submit(owner_id="  ", fields=_fields())
        assert exc_info.value.missing_fields == ["owner_id"]


class TestModeration:
    def test_approve(self) -> None:
        listing = _make_listing()
        listing.approve(MODERATOR)
        assert listing.status == AdStatus.ACTIVE
        event = listing.collect_events()[0]
        assert isinstance(event, ListingStatusChangedEvent)
        assert event.actor_role == ActorRole.MODERATOR
        assert event.triggered_by == "mod-1"

    def test_owner_cannot_approve(self) -> None:
        listing = _make_listing()
        with pytest.raises(UnauthorizedError):
            listing.approve(OWNER)
        assert listing.status == AdStatus.PENDING
        assert listing.collect_events() == []

    def test_approve_twice_fails(self) -> None:
        listing = _make_listing(AdStatus.ACTIVE)
        with pytest.raises(InvalidStateTransitionError):
            listing.approve(MODERATOR)

    def test_reject_keeps_reason(self) -> None:
        listing = _make_listing()
        listing.reject(MODERATOR, "  Prohibited item ")
        assert listing.status == AdStatus.REJECTED
        assert listing.rejection_reason == "Prohibited item"

    def test_reject_requires_reason(self) -> None:
        listing = _make_listing()
        with pytest.raises(InvalidArgumentError):
            listing.reject(MODERATOR, "")
        assert listing.status == AdStatus.PENDING
        assert listing.collect_changes() == {}

    def test_reject_active_fails(self) -> None:
        listing = _make_listing(AdStatus.ACTIVE)
        with pytest.raises(InvalidStateTransitionError):
            listing.reject(MODERATOR, "Too late")
        assert listing.status == AdStatus.ACTIVE


class TestMarkSold:
    def test_owner_marks_active_sold(self) -> None:
        listing = _make_listing(AdStatus.ACTIVE)
        listing.mark_sold(OWNER)
        assert listing.status == AdStatus.SOLD
        assert listing.collect_events()[0].actor_role == ActorRole.OWNER

    def test_pending_cannot_be_sold(self) -> None:
        listing = _make_listing()
        with pytest.raises(InvalidStateTransitionError):
            listing.mark_sold(OWNER)

    def test_moderator_cannot_mark_sold(self) -> None:
        listing = _make_listing(AdStatus.ACTIVE)
        with pytest.raises(UnauthorizedError):
            listing.mark_sold(MODERATOR)
        assert listing.status == AdStatus.ACTIVE


class TestEdit:
    def test_edit_active_returns_to_pending(self) -> None:
        listing = _make_listing(AdStatus.ACTIVE)
        listing.edit(OWNER, {"price": "3900"})

        assert listing.status == AdStatus.PENDING
        assert listing.price == Decimal("3900")
        events = listing.collect_events()
        assert [type(e) for e in events] == [ListingStatusChangedEvent, ListingEditedEvent]
        assert events[1].changed_fields == ("price",)

    def test_edit_rejected_clears_reason(self) -> None:
        listing = _make_listing(AdStatus.REJECTED)
        listing.edit(OWNER, {"images": ["https://cdn.example.com/sharp.jpg"]})
        assert listing.status == AdStatus.PENDING
        assert listing.rejection_reason is None

    def test_edit_pending_stays_pending(self) -> None:
        listing = _make_listing()
        listing.edit(OWNER, {"title": "iPhone 12 mini"})
        assert listing.status == AdStatus.PENDING
        events = listing.collect_events()
        assert len(events) == 1
        assert isinstance(events[0], ListingEditedEvent)

    def test_sold_cannot_be_edited(self) -> None:
        listing = _make_listing(AdStatus.SOLD)
        with pytest.raises(InvalidStateTransitionError):
            listing.edit(OWNER, {"title": "Relisted"})
        assert listing.title == "iPhone 12"

    def test_only_owner_may_edit(self) -> None:
        listing = _make_listing(AdStatus.ACTIVE)
        with pytest.raises(UnauthorizedError):
            listing.edit(STRANGER, {"title": "Mine now"})
        with pytest.raises(UnauthorizedError):
            listing.edit(MODERATOR, {"title": "Moderated"})
        assert listing.status == AdStatus.ACTIVE

    def test_edit_with_bare_image_string(self) -> None:
        listing = _make_listing()
        listing.edit(OWNER, {"images": "https://cdn.example.com/new.jpg"})
        assert listing.images == ["https://cdn.example.com/new.jpg"]

    def test_unknown_fields_rejected(self) -> None:
        listing = _make_listing()
        with pytest.raises(InvalidArgumentError):
            listing.edit(OWNER, {"status": "active"})

    def test_invalid_edit_changes_nothing(self) -> None:
        listing = _make_listing(AdStatus.ACTIVE)
        with pytest.raises(ValidationError):
            listing.edit(OWNER, {"price": "-1", "title": "Cheaper"})
        assert listing.status == AdStatus.ACTIVE
        assert listing.title == "iPhone 12"
        assert listing.collect_changes() == {}

    def test_records_changed_fields(self) -> None:
        listing = _make_listing(AdStatus.ACTIVE)
        listing.edit(OWNER, {"city": "Lviv"})
        changes = listing.collect_changes()
        assert changes["city"] == "Lviv"
        assert changes["status"] == AdStatus.PENDING
        assert changes["owner_username"] == "olena"


class TestRemovalRights:
    def test_owner_and_moderator_may_remove(self) -> None:
        listing = _make_listing(AdStatus.SOLD)
        assert listing.can_be_removed_by(OWNER) is True
        assert listing.can_be_removed_by(MODERATOR) is True

    def test_stranger_may_not(self) -> None:
        assert _make_listing().can_be_removed_by(STRANGER) is False
