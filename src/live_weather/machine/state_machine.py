"""Weather-acquisition state machine.

The machine owns the single current `State`. Events are dispatched into an
`EventQueue` and consumed by one background task, strictly in publish order.
An event is fully applied before the next one is dequeued, including the
awaited weather fetch that follows a `FetchRequested`.

## Usage

```python
async with WeatherStateMachine(provider) as machine:
    unsubscribe = machine.subscribe(print)
    machine.dispatch(FetchRequested(position=Position.at(37.77, -122.41)))
    await machine.drain()
    unsubscribe()
```
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Callable

from live_weather.machine.queue import EventQueue
from live_weather.machine.transitions import resolve_fetch, transition
from live_weather.models.events import Event, FetchRequested
from live_weather.models.location import Position
from live_weather.models.state import Idle, State
from live_weather.providers.base import WeatherProvider

logger = logging.getLogger(__name__)

StateListener = Callable[[State], None]
Unsubscribe = Callable[[], None]


class WeatherStateMachine:
    """Single-consumer state machine turning events into committed states."""

    def __init__(
        self,
        provider: WeatherProvider,
        initial_state: State | None = None,
        queue: EventQueue | None = None,
    ):
        """Initialize the machine.

        Args:
            provider: Weather capability used for `FetchRequested`
            initial_state: Starting state (default: Idle)
            queue: Event queue to consume (default: a new one)
        """
        self._provider = provider
        self._state: State = initial_state or Idle()
        self._queue = queue or EventQueue()
        self._listeners: list[StateListener] = []
        self._consumer: asyncio.Task[None] | None = None

    async def __aenter__(self) -> WeatherStateMachine:
        """Start consuming events."""
        self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Stop consuming events."""
        await self.stop()

    @property
    def current_state(self) -> State:
        """The most recently committed state."""
        return self._state

    @property
    def running(self) -> bool:
        """Whether the consumer task is active."""
        return self._consumer is not None and not self._consumer.done()

    def dispatch(self, event: Event) -> None:
        """Enqueue an event for processing."""
        self._queue.publish(event)

    def subscribe(self, on_state: StateListener) -> Unsubscribe:
        """Register a listener called with every committed state.

        Returns:
            A callable that removes the listener. Calling it twice is harmless.
        """
        self._listeners.append(on_state)

        def unsubscribe() -> None:
            if on_state in self._listeners:
                self._listeners.remove(on_state)

        return unsubscribe

    def start(self) -> None:
        """Start the consumer task if it is not already running."""
        if self.running:
            return
        self._consumer = asyncio.create_task(
            self._consume(), name="weather-state-machine"
        )
        logger.debug("State machine started")

    async def stop(self) -> None:
        """Cancel the consumer task."""
        if self._consumer is None:
            return
        self._consumer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._consumer
        self._consumer = None
        logger.debug("State machine stopped")

    async def drain(self) -> None:
        """Wait until every dispatched event has been fully applied.

        Raises:
            RuntimeError: If the consumer task is not running
        """
        if not self.running:
            raise RuntimeError("State machine is not running; call start() first")
        await self._queue.join()

    async def process(self, event: Event) -> State:
        """Apply one event and return the resulting committed state.

        The consumer task calls this for each dequeued event. Calling it
        directly bypasses the queue.
        """
        self._commit(transition(self._state, event), event)
        if isinstance(event, FetchRequested):
            self._commit(await self._fetch(event.position), event)
        return self._state

    async def _consume(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self.process(event)
            finally:
                self._queue.task_done()

    async def _fetch(self, position: Position) -> State:
        try:
            snapshot = await self._provider.fetch(position.coordinates)
        except Exception as e:
            # Provider errors, timeouts and malformed responses all mean Failure.
            logger.warning(f"Weather fetch failed for {position}: {e!r}")
            return resolve_fetch(None, reason=str(e) or type(e).__name__)
        return resolve_fetch(snapshot)

    def _commit(self, state: State, event: Event) -> None:
        previous = self._state
        self._state = state
        logger.info(
            f"{type(previous).__name__} -> {type(state).__name__} "
            f"on {type(event).__name__}"
        )
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception(f"State listener {listener!r} failed")
