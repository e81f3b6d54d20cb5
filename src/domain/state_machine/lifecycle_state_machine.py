from src.domain.enums.ad_status import ActorRole, AdStatus
from src.domain.errors import InvalidStateError


# Mapping of valid transitions: (from_status, to_status) -> actor class allowed to drive it
VALID_TRANSITIONS: dict[tuple[AdStatus, AdStatus], ActorRole] = {
    (AdStatus.PENDING, AdStatus.ACTIVE): ActorRole.MODERATOR,
    (AdStatus.PENDING, AdStatus.REJECTED): ActorRole.MODERATOR,
    (AdStatus.ACTIVE, AdStatus.SOLD): ActorRole.OWNER,
    # Any edit of a moderated listing sends it back to the queue
    (AdStatus.ACTIVE, AdStatus.PENDING): ActorRole.OWNER,
    (AdStatus.REJECTED, AdStatus.PENDING): ActorRole.OWNER,
    # Sold is terminal: no outgoing transitions
}


class InvalidStateTransitionError(InvalidStateError):
    """Raised when an invalid status transition is attempted."""

    def __init__(self, from_status: AdStatus, to_status: AdStatus) -> None:
        self.from_status = from_status
        self.to_status = to_status
        allowed = sorted(s.value for s in LifecycleStateMachine().get_allowed_transitions(from_status))
        super().__init__(
            f"Invalid transition from {from_status.value} to {to_status.value}. "
            f"Allowed transitions: {allowed}"
        )


class LifecycleStateMachine:
    """
    Validates status transitions for the listing moderation lifecycle.

    Holds no state; call validate_transition() or required_role() with explicit statuses.
    """

    def can_transition(self, from_status: AdStatus, to_status: AdStatus) -> bool:
        """Return True if moving from_status -> to_status is legal for some actor."""
        if from_status.is_terminal:
            return False
        return (from_status, to_status) in VALID_TRANSITIONS

    def validate_transition(self, from_status: AdStatus, to_status: AdStatus) -> None:
        """Raise InvalidStateTransitionError if the transition is not legal."""
        if not self.can_transition(from_status, to_status):
            raise InvalidStateTransitionError(from_status, to_status)

    def required_role(self, from_status: AdStatus, to_status: AdStatus) -> ActorRole:
        """Return the actor class that drives the transition, raising if it is illegal."""
        self.validate_transition(from_status, to_status)
        return VALID_TRANSITIONS[(from_status, to_status)]

    def get_allowed_transitions(self, from_status: AdStatus) -> frozenset[AdStatus]:
        """Return the set of statuses reachable from from_status."""
        return frozenset(to for (src, to) in VALID_TRANSITIONS if src is from_status)
