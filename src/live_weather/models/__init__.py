"""Domain models for live weather acquisition."""

from live_weather.models.location import Coordinates, Position
from live_weather.models.weather import (
    ConditionGroup,
    Temperature,
    WeatherSnapshot,
)
from live_weather.models.events import (
    Event,
    FetchRequested,
    LocationServiceDisabled,
    LocationPermissionDenied,
    LocationPermissionDeniedForever,
)
from live_weather.models.state import (
    State,
    Idle,
    Loading,
    Success,
    Failure,
    LocationDisabled,
    LocationDenied,
    LocationDeniedForever,
)
from live_weather.models.notification import (
    Notification,
    NotificationKind,
)

__all__ = [
    # Location
    "Coordinates",
    "Position",
    # Weather
    "ConditionGroup",
    "Temperature",
    "WeatherSnapshot",
    # Events
    "Event",
    "FetchRequested",
    "LocationServiceDisabled",
    "LocationPermissionDenied",
    "LocationPermissionDeniedForever",
    # States
    "State",
    "Idle",
    "Loading",
    "Success",
    "Failure",
    "LocationDisabled",
    "LocationDenied",
    "LocationDeniedForever",
    # Notifications
    "Notification",
    "NotificationKind",
]
