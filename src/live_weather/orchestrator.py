"""Acquisition orchestrator.

Sequences the calls to the location and connectivity capabilities and turns
their outcomes into state machine events or transient notifications.

## Startup protocol (once per session)

1. Location service disabled -> dispatch LocationServiceDisabled, stop
2. Permission denied -> request once; still denied -> dispatch
   LocationPermissionDenied, stop
3. Permission permanently denied -> dispatch LocationPermissionDeniedForever, stop
4. Otherwise run the fetch step

## Fetch step

Check connectivity, re-check location access, get the current position and
dispatch FetchRequested. Any failure along the way is surfaced as a
notification only; the committed state is left as it is.

## Listeners (session lifetime)

- Connectivity lost -> NO_CONNECTIVITY notification; restored -> fetch step
- Location service disabled -> dispatch LocationServiceDisabled;
  re-enabled -> fetch step
- Manual refresh -> fetch step if the service is enabled and permission is
  granted, otherwise the classified notification

A capability stream that raises is logged and subscribed again, so the
listeners stay active for the whole session.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import AsyncIterator, Awaitable, Callable, TypeVar

from live_weather.capabilities.connectivity import ConnectivityMonitor, Reachability
from live_weather.capabilities.location import (
    LocationService,
    PermissionLevel,
    ServiceStatus,
)
from live_weather.errors import (
    AcquisitionError,
    FetchFailedError,
    NoConnectivityError,
    PermissionDeniedError,
    PermissionDeniedForeverError,
    ServiceDisabledError,
    classify_error,
)
from live_weather.machine.state_machine import WeatherStateMachine
from live_weather.models.events import (
    Event,
    FetchRequested,
    LocationPermissionDenied,
    LocationPermissionDeniedForever,
    LocationServiceDisabled,
)
from live_weather.models.notification import Notification, NotificationKind

logger = logging.getLogger(__name__)

T = TypeVar("T")
S = TypeVar("S")

Notifier = Callable[[Notification], None]

# Classified errors that are recorded as committed states
EVENT_FOR_ERROR: dict[type[AcquisitionError], Callable[[], Event]] = {
    ServiceDisabledError: LocationServiceDisabled,
    PermissionDeniedError: LocationPermissionDenied,
    PermissionDeniedForeverError: LocationPermissionDeniedForever,
}


class AcquisitionOrchestrator:
    """Runs the startup protocol and the session listeners."""

    def __init__(
        self,
        machine: WeatherStateMachine,
        location: LocationService,
        connectivity: ConnectivityMonitor,
        notify: Notifier | None = None,
        notification_duration_seconds: float = 4.0,
        listener_retry_seconds: float = 1.0,
    ):
        """Initialize the orchestrator.

        Args:
            machine: State machine receiving the events
            location: Location capability
            connectivity: Connectivity capability
            notify: Callback for transient notifications
            notification_duration_seconds: How long notifications should show
            listener_retry_seconds: Delay before a failed capability stream is
                subscribed again
        """
        self._machine = machine
        self._location = location
        self._connectivity = connectivity
        self._notify_callback = notify
        self._notification_duration = notification_duration_seconds
        self._listener_retry = listener_retry_seconds
        self._listeners: list[asyncio.Task[None]] = []

    async def start(self) -> None:
        """Start the session listeners, then run the startup protocol."""
        if not self._listeners:
            self._listeners = [
                asyncio.create_task(
                    self._watch_connectivity(), name="connectivity-listener"
                ),
                asyncio.create_task(
                    self._watch_location_service(), name="location-service-listener"
                ),
            ]
        await self.initialize()

    async def stop(self) -> None:
        """Cancel the session listeners."""
        for task in self._listeners:
            task.cancel()
        for task in self._listeners:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._listeners = []

    async def initialize(self) -> None:
        """Run the startup protocol."""
        try:
            await self._ensure_access(request_permission=True)
        except AcquisitionError as e:
            logger.warning(f"Startup stopped: {e}")
            self._reject(e)
            return

        await self.fetch_weather()

    async def fetch_weather(self) -> bool:
        """Run the fetch step.

        Returns:
            True if a FetchRequested event was dispatched
        """
        try:
            reachability = await self._call(
                self._connectivity.current_reachability, NoConnectivityError
            )
            if reachability == Reachability.NONE:
                raise NoConnectivityError()
            await self._ensure_access(request_permission=True)
            position = await self._call(self._location.current_position, FetchFailedError)
        except AcquisitionError as e:
            logger.warning(f"Fetch step aborted: {e}")
            self._notify(e.notification_kind)
            return False

        logger.info(f"Requesting weather for {position}")
        self._machine.dispatch(FetchRequested(position=position))
        return True

    async def refresh(self) -> bool:
        """Handle a manual refresh request.

        The fetch step runs only if the service is enabled and permission is
        already granted. Otherwise the classified failure is surfaced as a
        notification and no event is dispatched.

        Returns:
            True if a FetchRequested event was dispatched
        """
        try:
            await self._ensure_access(request_permission=False)
        except AcquisitionError as e:
            logger.info(f"Refresh skipped: {e}")
            self._notify(e.notification_kind)
            return False
        return await self.fetch_weather()

    async def _ensure_access(self, request_permission: bool) -> None:
        """Check service status and permission.

        Raises:
            ServiceDisabledError: If the location service is disabled
            PermissionDeniedError: If permission is denied
            PermissionDeniedForeverError: If permission is permanently denied
        """
        enabled = await self._call(self._location.is_service_enabled, ServiceDisabledError)
        if not enabled:
            raise ServiceDisabledError()

        permission = await self._call(self._location.check_permission, PermissionDeniedError)
        if permission == PermissionLevel.DENIED:
            if not request_permission:
                raise PermissionDeniedError()
            permission = await self._call(
                self._location.request_permission, PermissionDeniedError
            )
            if permission == PermissionLevel.DENIED:
                raise PermissionDeniedError()

        if permission == PermissionLevel.DENIED_FOREVER:
            raise PermissionDeniedForeverError()

    async def _call(
        self,
        operation: Callable[[], Awaitable[T]],
        fallback: type[AcquisitionError],
    ) -> T:
        """Await a capability call, classifying any exception it raises."""
        try:
            return await operation()
        except AcquisitionError:
            raise
        except Exception as e:
            logger.debug(f"Capability call {operation!r} failed: {e!r}")
            raise classify_error(e, fallback) from e

    def _reject(self, error: AcquisitionError) -> None:
        """Notify and record a classified error as a committed state."""
        self._notify(error.notification_kind)
        event_factory = EVENT_FOR_ERROR.get(type(error))
        if event_factory is not None:
            self._machine.dispatch(event_factory())

    def _notify(self, kind: NotificationKind) -> None:
        notification = Notification.of(kind, self._notification_duration)
        logger.debug(f"Notification: {notification.message}")
        if self._notify_callback is None:
            return
        try:
            self._notify_callback(notification)
        except Exception:
            logger.exception("Notification callback failed")

    async def _watch_connectivity(self) -> None:
        await self._listen(
            "Connectivity", self._connectivity.reachability_changes, self._on_reachability
        )

    async def _watch_location_service(self) -> None:
        await self._listen(
            "Location service",
            self._location.service_status_changes,
            self._on_service_status,
        )

    async def _on_reachability(self, reachability: Reachability) -> None:
        if reachability == Reachability.NONE:
            self._notify(NotificationKind.NO_CONNECTIVITY)
        else:
            await self.fetch_weather()

    async def _on_service_status(self, status: ServiceStatus) -> None:
        if status == ServiceStatus.DISABLED:
            self._reject(ServiceDisabledError())
        else:
            await self.fetch_weather()

    async def _listen(
        self,
        name: str,
        changes: Callable[[], AsyncIterator[S]],
        handle: Callable[[S], Awaitable[None]],
    ) -> None:
        """Feed a capability stream to its handler for the whole session.

        A stream that fails is subscribed again after `listener_retry_seconds`.
        A stream that ends normally stops the listener.
        """
        while True:
            try:
                async for change in changes():
                    await handle(change)
                logger.debug(f"{name} stream ended")
                return
            except Exception:
                logger.exception(
                    f"{name} listener failed; resubscribing in {self._listener_retry}s"
                )
            await asyncio.sleep(self._listener_retry)
