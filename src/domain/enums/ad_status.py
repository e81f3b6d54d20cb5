from enum import Enum


class AdStatus(str, Enum):
    """Moderation lifecycle of a marketplace listing."""

    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
    SOLD = "sold"

    @property
    def is_terminal(self) -> bool:
        """Sold listings cannot be edited or re-moderated."""
        return self is AdStatus.SOLD

    @property
    def is_visible(self) -> bool:
        """Only active listings are shown to ordinary discovery."""
        return self is AdStatus.ACTIVE


class ProductCondition(str, Enum):
    NEW = "new"
    USED = "used"


class ActorRole(str, Enum):
    """Actor class that drives a status change."""

    OWNER = "owner"
    MODERATOR = "moderator"
