"""Error taxonomy for weather acquisition.

Capability failures are caught at the orchestrator boundary and classified
into one of these errors. They never reach the state machine as raw
exceptions.

| Error | Surfaced as |
|-------|-------------|
| ServiceDisabledError | LocationDisabled state |
| PermissionDeniedError | LocationDenied state |
| PermissionDeniedForeverError | LocationDeniedForever state |
| FetchFailedError | Failure state |
| NoConnectivityError | Notification only (transient) |
"""

from __future__ import annotations

from live_weather.models.notification import NotificationKind


class AcquisitionError(Exception):
    """Base exception for classified acquisition failures."""

    notification_kind: NotificationKind = NotificationKind.FETCH_FAILED

    def __init__(self, message: str | None = None, cause: BaseException | None = None):
        super().__init__(message or self.__class__.__doc__)
        self.cause = cause


class ServiceDisabledError(AcquisitionError):
    """Location services are disabled."""

    notification_kind = NotificationKind.SERVICE_DISABLED


class PermissionDeniedError(AcquisitionError):
    """Location permissions are denied."""

    notification_kind = NotificationKind.PERMISSION_DENIED


class PermissionDeniedForeverError(AcquisitionError):
    """Location permissions are permanently denied."""

    notification_kind = NotificationKind.PERMISSION_DENIED_FOREVER


class NoConnectivityError(AcquisitionError):
    """No network connectivity."""

    notification_kind = NotificationKind.NO_CONNECTIVITY


class FetchFailedError(AcquisitionError):
    """Weather data could not be retrieved."""

    notification_kind = NotificationKind.FETCH_FAILED


def classify_error(
    exc: BaseException,
    fallback: type[AcquisitionError] = FetchFailedError,
) -> AcquisitionError:
    """Classify an arbitrary capability exception.

    Args:
        exc: The exception raised by a capability call
        fallback: Error class used when `exc` is not already classified

    Returns:
        `exc` itself if it is an AcquisitionError, otherwise a `fallback`
        instance wrapping it.
    """
    if isinstance(exc, AcquisitionError):
        return exc
    return fallback(f"{fallback.__doc__} ({exc})", cause=exc)
