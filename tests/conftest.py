"""Pytest fixtures for live weather tests.

This module provides test fixtures that ensure:
1. No external API calls are made (weather provider, connectivity probe)
2. Location and connectivity are driven by in-memory fakes
3. Isolated test environment with controlled configuration
"""

import asyncio
import os
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable

import pytest

# Set test environment BEFORE importing application modules
os.environ.setdefault("OPENWEATHERMAP_API_KEY", "test-api-key")

from live_weather.capabilities.connectivity import ConnectivityMonitor, Reachability
from live_weather.capabilities.location import (
    LocationService,
    PermissionLevel,
    ServiceStatus,
)
from live_weather.machine.state_machine import WeatherStateMachine
from live_weather.models.location import Coordinates, Position
from live_weather.models.weather import Temperature, WeatherSnapshot
from live_weather.orchestrator import AcquisitionOrchestrator
from live_weather.providers.base import WeatherProvider


# =============================================================================
# Capability Fakes
# =============================================================================


class FakeLocationService(LocationService):
    """In-memory location service.

    `failures` maps a method name to the exception it should raise.
    `stream_failures` are raised, one per subscription, by the service status
    stream before it starts yielding.
    """

    def __init__(
        self,
        enabled: bool = True,
        permission: PermissionLevel = PermissionLevel.GRANTED,
        requested_permission: PermissionLevel | None = None,
        position: Position | None = None,
    ):
        self.enabled = enabled
        self.permission = permission
        self.requested_permission = requested_permission or permission
        self.position = position or Position.at(37.77, -122.41)
        self.failures: dict[str, Exception] = {}
        self.calls: list[str] = []
        self.stream_failures: list[Exception] = []
        self.subscriptions = 0
        self._status_changes: asyncio.Queue[ServiceStatus | None] = asyncio.Queue()

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    async def is_service_enabled(self) -> bool:
        self._record("is_service_enabled")
        return self.enabled

    async def check_permission(self) -> PermissionLevel:
        self._record("check_permission")
        return self.permission

    async def request_permission(self) -> PermissionLevel:
        self._record("request_permission")
        self.permission = self.requested_permission
        return self.permission

    async def current_position(self) -> Position:
        self._record("current_position")
        return self.position

    async def service_status_changes(self) -> AsyncIterator[ServiceStatus]:
        self.subscriptions += 1
        if self.stream_failures:
            raise self.stream_failures.pop(0)
        while True:
            status = await self._status_changes.get()
            if status is None:
                return
            yield status

    def set_service_status(self, status: ServiceStatus) -> None:
        """Change the service status and emit the transition."""
        self.enabled = status == ServiceStatus.ENABLED
        self._status_changes.put_nowait(status)


class FakeConnectivityMonitor(ConnectivityMonitor):
    """In-memory connectivity monitor."""

    def __init__(self, reachability: Reachability = Reachability.SOME):
        self.reachability = reachability
        self.stream_failures: list[Exception] = []
        self.subscriptions = 0
        self._changes: asyncio.Queue[Reachability | None] = asyncio.Queue()

    async def current_reachability(self) -> Reachability:
        return self.reachability

    async def reachability_changes(self) -> AsyncIterator[Reachability]:
        self.subscriptions += 1
        if self.stream_failures:
            raise self.stream_failures.pop(0)
        while True:
            reachability = await self._changes.get()
            if reachability is None:
                return
            yield reachability

    def set_reachability(self, reachability: Reachability) -> None:
        """Change reachability and emit the transition."""
        self.reachability = reachability
        self._changes.put_nowait(reachability)


class FakeWeatherProvider(WeatherProvider):
    """Weather provider returning queued outcomes.

    Each fetch pops the next entry of `outcomes` (a snapshot or an exception
    to raise) and falls back to `snapshot` when the queue is empty. When
    `gate` is set, fetches wait for it before resolving.
    """

    name = "fake"
    base_url = "memory://"

    def __init__(self, snapshot: WeatherSnapshot):
        super().__init__()
        self.snapshot = snapshot
        self.outcomes: list[WeatherSnapshot | Exception] = []
        self.requests: list[Coordinates] = []
        self.gate: asyncio.Event | None = None

    async def fetch(self, coordinates: Coordinates) -> WeatherSnapshot:
        self.requests.append(coordinates)
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0) if self.outcomes else self.snapshot
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def _translate_response(
        self, response_data: dict[str, Any], coordinates: Coordinates
    ) -> WeatherSnapshot:
        return WeatherSnapshot.model_validate(response_data)


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from live_weather.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Weather Data Fixtures
# =============================================================================


@pytest.fixture
def san_francisco() -> Position:
    """Position fix in San Francisco."""
    return Position.at(37.77, -122.41)


@pytest.fixture
def clear_snapshot() -> WeatherSnapshot:
    """Clear sky at 18°C in San Francisco."""
    return WeatherSnapshot(
        area_name="San Francisco",
        temperature=Temperature(current_c=18.0, min_c=15.2, max_c=20.1),
        condition_code=800,
        condition_main="Clear",
        condition_description="clear sky",
        sunrise=datetime(2024, 6, 1, 12, 48, tzinfo=timezone.utc),
        sunset=datetime(2024, 6, 2, 3, 28, tzinfo=timezone.utc),
        observed_at=datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc),
        coordinates=Coordinates(latitude=37.77, longitude=-122.41),
    )


@pytest.fixture
def rain_snapshot() -> WeatherSnapshot:
    """Moderate rain at 11°C in San Francisco."""
    return WeatherSnapshot(
        area_name="San Francisco",
        temperature=Temperature(current_c=11.4, min_c=9.0, max_c=12.5),
        condition_code=501,
        condition_main="Rain",
        condition_description="moderate rain",
        sunrise=datetime(2024, 6, 1, 12, 48, tzinfo=timezone.utc),
        sunset=datetime(2024, 6, 2, 3, 28, tzinfo=timezone.utc),
    )


# =============================================================================
# Capability Fixtures
# =============================================================================


@pytest.fixture
def location(san_francisco) -> FakeLocationService:
    return FakeLocationService(position=san_francisco)


@pytest.fixture
def connectivity() -> FakeConnectivityMonitor:
    return FakeConnectivityMonitor()


@pytest.fixture
def provider(clear_snapshot) -> FakeWeatherProvider:
    return FakeWeatherProvider(clear_snapshot)


# =============================================================================
# Core Fixtures
# =============================================================================


@pytest.fixture
def states() -> list:
    """Collector for committed states."""
    return []


@pytest.fixture
def notifications() -> list:
    """Collector for notifications."""
    return []


@pytest.fixture
async def machine(provider, states):
    """Running state machine recording every committed state."""
    machine = WeatherStateMachine(provider)
    machine.subscribe(states.append)
    machine.start()
    yield machine
    await machine.stop()


@pytest.fixture
async def orchestrator(machine, location, connectivity, notifications):
    """Orchestrator wired to the fakes; listeners stopped after the test."""
    orchestrator = AcquisitionOrchestrator(
        machine,
        location,
        connectivity,
        notify=notifications.append,
        listener_retry_seconds=0.01,
    )
    yield orchestrator
    await orchestrator.stop()


@pytest.fixture
def wait_until() -> Callable:
    """Wait until a predicate holds, failing after a timeout."""

    async def _wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
        async with asyncio.timeout(timeout):
            while not predicate():
                await asyncio.sleep(0.001)

    return _wait_until
