"""Transient notifications surfaced to the presentation layer.

Notifications never change the committed application state. They are the
short-lived messages a UI shows as a snackbar or toast.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class NotificationKind(str, Enum):
    """Classified reasons for a notification."""

    SERVICE_DISABLED = "service_disabled"
    PERMISSION_DENIED = "permission_denied"
    PERMISSION_DENIED_FOREVER = "permission_denied_forever"
    NO_CONNECTIVITY = "no_connectivity"
    FETCH_FAILED = "fetch_failed"


DEFAULT_MESSAGES: dict[NotificationKind, str] = {
    NotificationKind.SERVICE_DISABLED: (
        "Location services are disabled. Please enable location to use the app."
    ),
    NotificationKind.PERMISSION_DENIED: (
        "Location permission denied. The app requires location access to function."
    ),
    NotificationKind.PERMISSION_DENIED_FOREVER: (
        "Location permission permanently denied. "
        "Please enable it in settings to use the app."
    ),
    NotificationKind.NO_CONNECTIVITY: (
        "No internet connection. Please check your connectivity."
    ),
    NotificationKind.FETCH_FAILED: "Failed to fetch weather data. Please try again.",
}


class Notification(BaseModel):
    """A transient, informational message."""

    model_config = ConfigDict(frozen=True)

    kind: NotificationKind
    message: str
    duration_seconds: float = Field(default=4.0, gt=0)

    @classmethod
    def of(cls, kind: NotificationKind, duration_seconds: float = 4.0) -> Notification:
        """Create a notification with the default message for `kind`."""
        return cls(
            kind=kind,
            message=DEFAULT_MESSAGES[kind],
            duration_seconds=duration_seconds,
        )
