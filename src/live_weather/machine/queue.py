"""Ordered, unbounded event queue feeding the state machine."""

from __future__ import annotations

import asyncio
import logging

from live_weather.models.events import Event

logger = logging.getLogger(__name__)


class EventQueue:
    """FIFO channel between event producers and the single state machine consumer.

    `publish` never blocks the producer. The consumer calls `task_done` once an
    event has been fully applied, so `join` returns only when every published
    event has been applied.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Event] = asyncio.Queue()

    def publish(self, event: Event) -> None:
        """Enqueue an event without blocking."""
        self._queue.put_nowait(event)
        logger.debug(f"Published {type(event).__name__} ({self._queue.qsize()} pending)")

    async def get(self) -> Event:
        """Wait for the next event in publish order."""
        return await self._queue.get()

    def task_done(self) -> None:
        """Mark the most recently dequeued event as fully applied."""
        self._queue.task_done()

    async def join(self) -> None:
        """Wait until every published event has been applied."""
        await self._queue.join()

    def __len__(self) -> int:
        return self._queue.qsize()
