from abc import ABC, abstractmethod
from collections.abc import Iterable

from src.domain.events.domain_events import DomainEvent


class EventPublisher(ABC):
    """
    Port for handing listing and chat domain events to observers.

    Events are published only after the store write they describe has
    succeeded, in the order the entity raised them.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        ...

    async def publish_many(self, events: Iterable[DomainEvent]) -> int:
        """Publish events in order; return how many went out."""
        published = 0
        for event in events:
            await self.publish(event)
            published += 1
        return published
