"""Tests for the weather state machine runner."""

import asyncio

import httpx
import pytest

from live_weather.machine.queue import EventQueue
from live_weather.machine.state_machine import WeatherStateMachine
from live_weather.models.events import (
    FetchRequested,
    LocationPermissionDenied,
    LocationServiceDisabled,
)
from live_weather.models.state import (
    Failure,
    Idle,
    Loading,
    LocationDenied,
    LocationDisabled,
    Success,
)
from live_weather.providers.base import ProviderError


class TestEventQueue:
    """Tests for EventQueue."""

    async def test_publish_order(self, san_francisco):
        """Test events come out in publish order."""
        queue = EventQueue()
        queue.publish(LocationServiceDisabled())
        queue.publish(FetchRequested(position=san_francisco))
        assert len(queue) == 2
        assert await queue.get() == LocationServiceDisabled()
        assert await queue.get() == FetchRequested(position=san_francisco)
        assert len(queue) == 0


class TestWeatherStateMachine:
    """Tests for WeatherStateMachine."""

    async def test_initial_state_is_idle(self, machine):
        """Test a new machine starts Idle."""
        assert machine.current_state == Idle()
        assert machine.running

    async def test_location_disabled(self, machine, states):
        """Test LocationServiceDisabled commits LocationDisabled."""
        machine.dispatch(LocationServiceDisabled())
        await machine.drain()
        assert machine.current_state == LocationDisabled()
        assert states == [LocationDisabled()]

    async def test_fetch_success(self, machine, states, provider, san_francisco, clear_snapshot):
        """Test a successful fetch emits Loading then Success with the snapshot."""
        machine.dispatch(FetchRequested(position=san_francisco))
        await machine.drain()

        assert states == [Loading(), Success(weather=clear_snapshot)]
        assert machine.current_state.weather == clear_snapshot
        assert provider.requests == [san_francisco.coordinates]

    async def test_loading_observable_before_result(
        self, machine, states, provider, san_francisco, wait_until
    ):
        """Test Loading is committed while the fetch is outstanding."""
        provider.gate = asyncio.Event()
        machine.dispatch(FetchRequested(position=san_francisco))

        await wait_until(lambda: provider.requests)
        assert machine.current_state == Loading()
        assert states == [Loading()]

        provider.gate.set()
        await machine.drain()
        assert isinstance(machine.current_state, Success)

    @pytest.mark.parametrize(
        "error",
        [
            asyncio.TimeoutError(),
            httpx.ReadTimeout("timed out"),
            ProviderError("Malformed response", provider="fake"),
            ValueError("bad payload"),
        ],
    )
    async def test_fetch_failure(self, machine, states, provider, san_francisco, error):
        """Test any provider failure commits Failure."""
        provider.outcomes = [error]
        machine.dispatch(FetchRequested(position=san_francisco))
        await machine.drain()

        assert states[0] == Loading()
        assert isinstance(states[1], Failure)
        assert machine.running

    async def test_failure_from_loading(self, provider, san_francisco):
        """Test a timeout from Loading commits Failure."""
        provider.outcomes = [asyncio.TimeoutError()]
        machine = WeatherStateMachine(provider, initial_state=Loading())
        state = await machine.process(FetchRequested(position=san_francisco))
        assert isinstance(state, Failure)
        assert state.reason == "TimeoutError"

    async def test_events_applied_in_publish_order(
        self, machine, states, provider, san_francisco, clear_snapshot, wait_until
    ):
        """Test a later event waits for the in-flight fetch to commit."""
        provider.gate = asyncio.Event()
        machine.dispatch(FetchRequested(position=san_francisco))
        machine.dispatch(LocationServiceDisabled())

        await wait_until(lambda: provider.requests)
        assert machine.current_state == Loading()

        provider.gate.set()
        await machine.drain()
        assert states == [Loading(), Success(weather=clear_snapshot), LocationDisabled()]
        assert machine.current_state == LocationDisabled()

    async def test_disabled_then_fetch(self, machine, states, san_francisco, clear_snapshot):
        """Test the reverse order ends in Success."""
        machine.dispatch(LocationServiceDisabled())
        machine.dispatch(FetchRequested(position=san_francisco))
        await machine.drain()
        assert states == [LocationDisabled(), Loading(), Success(weather=clear_snapshot)]

    async def test_no_event_dropped(self, machine, states, san_francisco):
        """Test a burst of events is applied completely."""
        for _ in range(5):
            machine.dispatch(LocationPermissionDenied())
            machine.dispatch(LocationServiceDisabled())
        await machine.drain()
        assert len(states) == 10
        assert machine.current_state == LocationDisabled()

    async def test_unsubscribe(self, machine):
        """Test an unsubscribed listener receives nothing."""
        received = []
        unsubscribe = machine.subscribe(received.append)
        machine.dispatch(LocationPermissionDenied())
        await machine.drain()
        unsubscribe()
        unsubscribe()
        machine.dispatch(LocationServiceDisabled())
        await machine.drain()
        assert received == [LocationDenied()]

    async def test_failing_listener_is_isolated(self, machine, states):
        """Test a raising listener does not block other listeners."""

        def broken(state):
            raise RuntimeError("listener bug")

        machine.subscribe(broken)
        machine.dispatch(LocationServiceDisabled())
        machine.dispatch(LocationPermissionDenied())
        await machine.drain()
        assert states == [LocationDisabled(), LocationDenied()]
        assert machine.running

    async def test_context_manager(self, provider):
        """Test the machine starts and stops with its context."""
        async with WeatherStateMachine(provider) as machine:
            assert machine.running
            machine.dispatch(LocationServiceDisabled())
            await machine.drain()
        assert not machine.running
        assert machine.current_state == LocationDisabled()

    async def test_drain_requires_running_consumer(self, provider):
        """Test draining a stopped machine fails instead of waiting forever."""
        machine = WeatherStateMachine(provider)
        machine.dispatch(LocationServiceDisabled())
        with pytest.raises(RuntimeError):
            await machine.drain()

        async with machine:
            await machine.drain()
        assert machine.current_state == LocationDisabled()
        with pytest.raises(RuntimeError):
            await machine.drain()
