"""Location capability.

The location capability wraps the device location service: whether it is
enabled, the current permission level, the current position, and a stream
of service status transitions. Platform integrations implement
`LocationService`; the core only consumes it.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from enum import Enum
from typing import AsyncIterator

from live_weather.models.location import Position


class PermissionLevel(str, Enum):
    """Location permission granted to the application."""

    GRANTED = "granted"
    DENIED = "denied"
    DENIED_FOREVER = "denied_forever"


class ServiceStatus(str, Enum):
    """Location service status transition."""

    ENABLED = "enabled"
    DISABLED = "disabled"


class LocationServiceError(Exception):
    """Raised when the platform location API fails."""

    pass


class LocationService(ABC):
    """Abstract base class for device location services.

    Example:
        ```python
        class GpsdLocationService(LocationService):
            async def current_position(self) -> Position:
                fix = await self._client.next_fix()
                return Position.at(fix.lat, fix.lon, accuracy_m=fix.epx)
        ```
    """

    @abstractmethod
    async def is_service_enabled(self) -> bool:
        """Check whether the location service is enabled."""

    @abstractmethod
    async def check_permission(self) -> PermissionLevel:
        """Get the current permission level without prompting."""

    @abstractmethod
    async def request_permission(self) -> PermissionLevel:
        """Prompt for permission and return the resulting level."""

    @abstractmethod
    async def current_position(self) -> Position:
        """Get the current position.

        Raises:
            LocationServiceError: If no fix can be obtained
        """

    @abstractmethod
    def service_status_changes(self) -> AsyncIterator[ServiceStatus]:
        """Stream of service status transitions.

        The iterator ends when the service is closed.
        """


class StaticLocationService(LocationService):
    """Location service pinned to a fixed position.

    Always enabled and granted. Useful for command-line use where the
    position is given explicitly.
    """

    def __init__(self, position: Position):
        self.position = position
        self._closed = asyncio.Event()

    async def is_service_enabled(self) -> bool:
        return True

    async def check_permission(self) -> PermissionLevel:
        return PermissionLevel.GRANTED

    async def request_permission(self) -> PermissionLevel:
        return PermissionLevel.GRANTED

    async def current_position(self) -> Position:
        return self.position

    async def service_status_changes(self) -> AsyncIterator[ServiceStatus]:
        # A pinned position never changes status; wait until closed.
        await self._closed.wait()
        return
        yield  # pragma: no cover

    def close(self) -> None:
        """End the status stream."""
        self._closed.set()
