"""Weather session factory.

A session wires the state machine, the acquisition orchestrator and the
display clock together for the lifetime of one run.

## Usage

```python
from live_weather.session import open_session

async with open_session(location, connectivity) as session:
    session.subscribe(print)
    state = await session.settle()
```

## Configuration

The bundled OpenWeatherMap provider is configured from environment
variables. See `live_weather.config` for available settings.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Callable

from live_weather.capabilities.connectivity import ConnectivityMonitor
from live_weather.capabilities.location import LocationService
from live_weather.clock import ClockTick, DisplayClock
from live_weather.config import Settings, get_settings
from live_weather.machine.state_machine import (
    StateListener,
    Unsubscribe,
    WeatherStateMachine,
)
from live_weather.models.state import State
from live_weather.orchestrator import AcquisitionOrchestrator, Notifier
from live_weather.providers.base import WeatherProvider
from live_weather.providers.openweathermap import OpenWeatherMapProvider

logger = logging.getLogger(__name__)

TickListener = Callable[[ClockTick], None]


class WeatherSession:
    """One run of the live weather application."""

    def __init__(
        self,
        provider: WeatherProvider,
        location: LocationService,
        connectivity: ConnectivityMonitor,
        notify: Notifier | None = None,
        on_tick: TickListener | None = None,
        settings: Settings | None = None,
    ):
        """Initialize the session.

        Args:
            provider: Weather capability
            location: Location capability
            connectivity: Connectivity capability
            notify: Callback for transient notifications
            on_tick: Callback for display clock ticks (clock disabled if None)
            settings: Application settings (default: from environment)
        """
        settings = settings or get_settings()
        self.machine = WeatherStateMachine(provider)
        self.orchestrator = AcquisitionOrchestrator(
            self.machine,
            location,
            connectivity,
            notify=notify,
            notification_duration_seconds=settings.notification_duration_seconds,
            listener_retry_seconds=settings.listener_retry_seconds,
        )
        self.clock = DisplayClock(interval_seconds=settings.clock_tick_seconds)
        self._on_tick = on_tick
        self._clock_task: asyncio.Task[None] | None = None

    async def __aenter__(self) -> WeatherSession:
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.stop()

    @property
    def current_state(self) -> State:
        return self.machine.current_state

    def subscribe(self, on_state: StateListener) -> Unsubscribe:
        return self.machine.subscribe(on_state)

    async def start(self) -> None:
        """Start the machine and clock, then run the startup protocol."""
        logger.info("Starting weather session")
        self.machine.start()
        if self._on_tick is not None and self._clock_task is None:
            self._clock_task = asyncio.create_task(self._run_clock(), name="display-clock")
        await self.orchestrator.start()

    async def stop(self) -> None:
        """Stop listeners, clock and machine."""
        logger.info("Stopping weather session")
        await self.orchestrator.stop()
        if self._clock_task is not None:
            self._clock_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._clock_task
            self._clock_task = None
        await self.machine.stop()

    async def refresh(self) -> bool:
        """Manual refresh (pull-to-refresh)."""
        return await self.orchestrator.refresh()

    async def settle(self) -> State:
        """Wait until every dispatched event is applied; return the state."""
        await self.machine.drain()
        return self.machine.current_state

    async def _run_clock(self) -> None:
        async for tick in self.clock.ticks():
            try:
                self._on_tick(tick)
            except Exception:
                logger.exception("Clock listener failed")


@asynccontextmanager
async def open_session(
    location: LocationService,
    connectivity: ConnectivityMonitor,
    provider: WeatherProvider | None = None,
    notify: Notifier | None = None,
    on_tick: TickListener | None = None,
    settings: Settings | None = None,
) -> AsyncGenerator[WeatherSession, None]:
    """Open a session, building the OpenWeatherMap provider if none is given.

    A provider built here is closed when the session ends; a provider passed
    in is left open.
    """
    settings = settings or get_settings()
    owned_provider: OpenWeatherMapProvider | None = None
    if provider is None:
        if not settings.weather_configured:
            logger.warning("OPENWEATHERMAP_API_KEY is not set; weather fetches will fail")
        owned_provider = OpenWeatherMapProvider(
            api_key=settings.openweathermap_api_key,
            language=settings.language,
            base_url=settings.openweathermap_base_url,
            timeout=settings.request_timeout_seconds,
        )
        provider = owned_provider

    session = WeatherSession(
        provider,
        location,
        connectivity,
        notify=notify,
        on_tick=on_tick,
        settings=settings,
    )
    try:
        async with session:
            yield session
    finally:
        if owned_provider is not None:
            await owned_provider.aclose()
