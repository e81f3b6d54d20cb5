"""
Polling feeds for UI consumers.

Nothing in the service starts these; a client process (the browse page, the
unread badge in the header, the chat list) owns one feed per view and drives
it through start(), refresh_now() and stop():

    feed = DiscoveryFeed(ListingQueries(listing_repo, history_repo), FilterSpec(city="Kyiv"))
    feed.start()
    ...
    feed.apply_filter(FilterSpec(city="Kyiv", sort="price_asc"))
    ...
    await feed.stop()
"""
from src.application.polling.poller import Poller
from src.application.use_cases.chat import ChatQueries
from src.application.use_cases.listing_queries import ListingQueries
from src.config import settings
from src.domain.chat.unread_tracker import ChatPreview
from src.domain.discovery.filter_spec import FilterSpec
from src.domain.discovery.pipeline import discover
from src.domain.entities.listing import Listing


class DiscoveryFeed:
    """
    Holds the latest active-listing snapshot and the current filters.

    Each poll replaces the snapshot and recomputes the results from scratch;
    a filter change recomputes over the snapshot right away.
    """

    def __init__(
        self,
        queries: ListingQueries,
        spec: FilterSpec | None = None,
        interval_seconds: float = settings.discovery_poll_interval_seconds,
    ) -> None:
        self._spec = spec or FilterSpec()
        self._snapshot: list[Listing] = []
        self.results: list[Listing] = []
        self.poller: Poller[list[Listing]] = Poller(
            queries.active_listings,
            interval_seconds=interval_seconds,
            on_result=self._on_snapshot,
            name="discovery",
        )

    @property
    def spec(self) -> FilterSpec:
        return self._spec

    def apply_filter(self, spec: FilterSpec) -> list[Listing]:
        self._spec = spec
        self._recompute()
        return self.results

    def _on_snapshot(self, listings: list[Listing]) -> None:
        self._snapshot = list(listings)
        self._recompute()

    def _recompute(self) -> None:
        self.results = discover(self._snapshot, self._spec)

    def start(self) -> None:
        self.poller.start()

    async def stop(self) -> None:
        await self.poller.stop()

    async def refresh_now(self) -> list[Listing]:
        await self.poller.refresh_now()
        return self.results


class UnreadCounter:
    """Unread badge for one user."""

    def __init__(
        self,
        queries: ChatQueries,
        user_id: str,
        interval_seconds: float = settings.unread_poll_interval_seconds,
    ) -> None:
        self.user_id = user_id
        self.poller: Poller[int] = Poller(
            lambda: queries.unread_count_for(user_id),
            interval_seconds=interval_seconds,
            name="unread_badge",
        )

    @property
    def count(self) -> int:
        return self.poller.latest or 0

    def start(self) -> None:
        self.poller.start()

    async def stop(self) -> None:
        await self.poller.stop()

    async def refresh_now(self) -> int:
        await self.poller.refresh_now()
        return self.count


class ChatListFeed:
    def __init__(
        self,
        queries: ChatQueries,
        user_id: str,
        interval_seconds: float = settings.chat_list_poll_interval_seconds,
    ) -> None:
        self.user_id = user_id
        self.poller: Poller[list[ChatPreview]] = Poller(
            lambda: queries.previews(user_id),
            interval_seconds=interval_seconds,
            name="chat_list",
        )

    @property
    def previews(self) -> list[ChatPreview]:
        return self.poller.latest or []

    def start(self) -> None:
        self.poller.start()

    async def stop(self) -> None:
        await self.poller.stop()

    async def refresh_now(self) -> list[ChatPreview]:
        await self.poller.refresh_now()
        return self.previews
