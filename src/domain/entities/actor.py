from dataclasses import dataclass

from src.domain.enums.ad_status import ActorRole


@dataclass(frozen=True)
class Actor:
    """The user performing an operation, as vouched for by the auth layer."""

    user_id: str
    is_moderator: bool = False
    username: str | None = None

    def owns(self, owner_id: str) -> bool:
        return self.user_id == owner_id

    def role_for(self, owner_id: str) -> ActorRole:
        """Actor class this user acts in for a listing owned by owner_id."""
        if self.owns(owner_id):
            return ActorRole.OWNER
        return ActorRole.MODERATOR if self.is_moderator else ActorRole.OWNER
