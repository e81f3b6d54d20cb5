"""Unit tests for the listing lifecycle state machine."""
import pytest

from src.domain.enums.ad_status import ActorRole, AdStatus
from src.domain.errors import InvalidStateError
from src.domain.state_machine.lifecycle_state_machine import (
    InvalidStateTransitionError,
    LifecycleStateMachine,
)


@pytest.fixture()
def sm() -> LifecycleStateMachine:
    return LifecycleStateMachine()


class TestValidTransitions:
    def test_pending_to_active(self, sm: LifecycleStateMachine) -> None:
        assert sm.can_transition(AdStatus.PENDING, AdStatus.ACTIVE) is True

    def test_pending_to_rejected(self, sm: LifecycleStateMachine) -> None:
        assert sm.can_transition(AdStatus.PENDING, AdStatus.REJECTED) is True

    def test_active_to_sold(self, sm: LifecycleStateMachine) -> None:
        assert sm.can_transition(AdStatus.ACTIVE, AdStatus.SOLD) is True

    def test_active_back_to_pending(self, sm: LifecycleStateMachine) -> None:
        assert sm.can_transition(AdStatus.ACTIVE, AdStatus.PENDING) is True

    def test_rejected_back_to_pending(self, sm: LifecycleStateMachine) -> None:
        assert sm.can_transition(AdStatus.REJECTED, AdStatus.PENDING) is True


class TestInvalidTransitions:
    @pytest.mark.parametrize(
        "from_status, to_status",
        [
            (AdStatus.PENDING, AdStatus.SOLD),
            (AdStatus.ACTIVE, AdStatus.ACTIVE),
            (AdStatus.ACTIVE, AdStatus.REJECTED),
            (AdStatus.REJECTED, AdStatus.ACTIVE),
            (AdStatus.REJECTED, AdStatus.SOLD),
        ],
    )
    def test_illegal_pairs(
        self, sm: LifecycleStateMachine, from_status: AdStatus, to_status: AdStatus
    ) -> None:
        assert sm.can_transition(from_status, to_status) is False

    @pytest.mark.parametrize("to_status", list(AdStatus))
    def test_sold_is_terminal(self, sm: LifecycleStateMachine, to_status: AdStatus) -> None:
        assert sm.can_transition(AdStatus.SOLD, to_status) is False

    def test_validate_raises(self, sm: LifecycleStateMachine) -> None:
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            sm.validate_transition(AdStatus.SOLD, AdStatus.PENDING)
        assert exc_info.value.from_status == AdStatus.SOLD
        assert exc_info.value.to_status == AdStatus.PENDING

    def test_error_is_tagged_invalid_state(self, sm: LifecycleStateMachine) -> None:
        with pytest.raises(InvalidStateError) as exc_info:
            sm.validate_transition(AdStatus.PENDING, AdStatus.SOLD)
        assert exc_info.value.kind == "invalid_state"

    def test_error_message_lists_allowed(self, sm: LifecycleStateMachine) -> None:
        with pytest.raises(InvalidStateTransitionError, match="Allowed transitions"):
            sm.validate_transition(AdStatus.PENDING, AdStatus.SOLD)


class TestRequiredRole:
    def test_moderation_is_moderator_driven(self, sm: LifecycleStateMachine) -> None:
        assert sm.required_role(AdStatus.PENDING, AdStatus.ACTIVE) == ActorRole.MODERATOR
        assert sm.required_role(AdStatus.PENDING, AdStatus.REJECTED) == ActorRole.MODERATOR

    def test_sale_and_edits_are_owner_driven(self, sm: LifecycleStateMachine) -> None:
        assert sm.required_role(AdStatus.ACTIVE, AdStatus.SOLD) == ActorRole.OWNER
        assert sm.required_role(AdStatus.REJECTED, AdStatus.PENDING) == ActorRole.OWNER

    def test_illegal_transition_raises(self, sm: LifecycleStateMachine) -> None:
        with pytest.raises(InvalidStateTransitionError):
            sm.required_role(AdStatus.SOLD, AdStatus.ACTIVE)


class TestGetAllowedTransitions:
    def test_from_pending(self, sm: LifecycleStateMachine) -> None:
        assert sm.get_allowed_transitions(AdStatus.PENDING) == frozenset(
            {AdStatus.ACTIVE, AdStatus.REJECTED}
        )

    def test_from_active(self, sm: LifecycleStateMachine) -> None:
        assert sm.get_allowed_transitions(AdStatus.ACTIVE) == frozenset(
            {AdStatus.SOLD, AdStatus.PENDING}
        )

    def test_sold_has_none(self, sm: LifecycleStateMachine) -> None:
        assert sm.get_allowed_transitions(AdStatus.SOLD) == frozenset()
