"""Tests for bundled capability implementations."""

import asyncio

import httpx

from live_weather.capabilities.connectivity import ProbeConnectivityMonitor, Reachability
from live_weather.capabilities.location import (
    PermissionLevel,
    StaticLocationService,
)
from live_weather.models.location import Position


class TestProbeConnectivityMonitor:
    """Tests for ProbeConnectivityMonitor."""

    async def test_reachable(self):
        """Test any HTTP response counts as reachable."""
        transport = httpx.MockTransport(lambda r: httpx.Response(503))
        async with ProbeConnectivityMonitor("https://probe.test", transport=transport) as monitor:
            assert await monitor.current_reachability() == Reachability.SOME

    async def test_unreachable(self):
        """Test a connection error counts as unreachable."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("network down", request=request)

        async with ProbeConnectivityMonitor(
            "https://probe.test", transport=httpx.MockTransport(handler)
        ) as monitor:
            assert await monitor.current_reachability() == Reachability.NONE

    async def test_changes_yield_transitions_only(self):
        """Test the change stream skips repeated reachability."""
        answers = iter([True, True, False, False, True])

        def handler(request: httpx.Request) -> httpx.Response:
            if next(answers):
                return httpx.Response(204)
            raise httpx.ConnectError("network down", request=request)

        async with ProbeConnectivityMonitor(
            "https://probe.test",
            interval_seconds=0,
            transport=httpx.MockTransport(handler),
        ) as monitor:
            changes = []
            async for reachability in monitor.reachability_changes():
                changes.append(reachability)
                if len(changes) == 2:
                    break

        assert changes == [Reachability.NONE, Reachability.SOME]


class TestStaticLocationService:
    """Tests for StaticLocationService."""

    async def test_always_granted(self):
        """Test the pinned service reports enabled and granted."""
        position = Position.at(51.5, -0.12)
        service = StaticLocationService(position)
        assert await service.is_service_enabled() is True
        assert await service.check_permission() == PermissionLevel.GRANTED
        assert await service.request_permission() == PermissionLevel.GRANTED
        assert await service.current_position() == position

    async def test_status_stream_ends_on_close(self):
        """Test the status stream yields nothing and ends when closed."""
        service = StaticLocationService(Position.at(51.5, -0.12))

        async def collect():
            return [status async for status in service.service_status_changes()]

        task = asyncio.create_task(collect())
        await asyncio.sleep(0)
        service.close()
        assert await asyncio.wait_for(task, timeout=1.0) == []
