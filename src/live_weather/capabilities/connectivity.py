"""Connectivity capability.

Reports network reachability and a stream of reachability transitions.
`ProbeConnectivityMonitor` decides reachability by sending a HEAD request to
a probe URL; any HTTP response counts as reachable.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, AsyncIterator

import httpx

logger = logging.getLogger(__name__)


class Reachability(str, Enum):
    """Network reachability."""

    NONE = "none"
    SOME = "some"


class ConnectivityMonitor(ABC):
    """Abstract base class for connectivity monitors."""

    @abstractmethod
    async def current_reachability(self) -> Reachability:
        """Get the current reachability."""

    @abstractmethod
    def reachability_changes(self) -> AsyncIterator[Reachability]:
        """Stream of reachability transitions."""


class ProbeConnectivityMonitor(ConnectivityMonitor):
    """Connectivity monitor that probes a URL over HTTP.

    Example:
        ```python
        async with ProbeConnectivityMonitor("https://api.openweathermap.org") as monitor:
            async for reachability in monitor.reachability_changes():
                print(reachability)
        ```
    """

    def __init__(
        self,
        probe_url: str,
        interval_seconds: float = 5.0,
        timeout: float = 3.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the monitor.

        Args:
            probe_url: URL probed with HEAD requests
            interval_seconds: Delay between probes in the change stream
            timeout: Probe timeout in seconds
            transport: Optional httpx transport (used in tests)
        """
        self.probe_url = probe_url
        self.interval_seconds = interval_seconds
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> ProbeConnectivityMonitor:
        """Enter async context manager."""
        self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            )
        return self._client

    async def current_reachability(self) -> Reachability:
        """Probe the URL once."""
        try:
            await self._get_client().head(self.probe_url)
        except httpx.HTTPError as e:
            logger.debug(f"Connectivity probe failed: {e}")
            return Reachability.NONE
        return Reachability.SOME

    async def reachability_changes(self) -> AsyncIterator[Reachability]:
        """Probe periodically and yield only transitions."""
        last = await self.current_reachability()
        while True:
            await asyncio.sleep(self.interval_seconds)
            current = await self.current_reachability()
            if current != last:
                logger.info(f"Reachability changed: {last.value} -> {current.value}")
                yield current
                last = current
