"""
Fixed-interval polling with a manual trigger.

There is no push transport: consumers see new data at most one interval
after it is written. Ticks do not wait for a slow refresh, so requests can
overlap; each request carries a sequence number and a response is applied
only if it is newer than the last applied one. Responses that arrive after
stop() are dropped.
"""
import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class Poller(Generic[T]):
    def __init__(
        self,
        fetch: Callable[[], Awaitable[T]],
        *,
        interval_seconds: float,
        on_result: Callable[[T], None] | None = None,
        name: str = "poller",
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._fetch = fetch
        self._interval = interval_seconds
        self._on_result = on_result
        self._name = name

        self._issued = 0
        self._applied = 0
        self._closed = False
        self._loop_task: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[bool]] = set()

        self.latest: T | None = None
        self.last_error: Exception | None = None

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    @property
    def applied_sequence(self) -> int:
        return self._applied

    async def refresh_now(self) -> bool:
        """Fetch once; return True if the result was applied."""
        self._issued += 1
        sequence = self._issued
        try:
            result = await self._fetch()
        except Exception as exc:
            self.last_error = exc
            logger.exception("poll_refresh_failed", poller=self._name, sequence=sequence)
            return False

        if self._closed:
            logger.debug("poll_result_after_stop_discarded", poller=self._name, sequence=sequence)
            return False
        if sequence <= self._applied:
            logger.debug(
                "stale_poll_result_discarded",
                poller=self._name,
                sequence=sequence,
                applied=self._applied,
            )
            return False

        self._applied = sequence
        self.latest = result
        self.last_error = None
        if self._on_result is not None:
            self._on_result(result)
        return True

    def start(self) -> None:
        """Refresh immediately, then once per interval until stop()."""
        if self.running:
            return
        self._closed = False
        self._loop_task = asyncio.get_running_loop().create_task(self._run())
        logger.info("poller_started", poller=self._name, interval_seconds=self._interval)

    async def stop(self) -> None:
        self._closed = True
        tasks = [t for t in (self._loop_task, *self._in_flight) if t is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._in_flight.clear()
        logger.info("poller_stopped", poller=self._name)

    async def _run(self) -> None:
        while not self._closed:
            task = asyncio.get_running_loop().create_task(self.refresh_now())
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
            await asyncio.sleep(self._interval)
