"""Console rendering of application states.

Rendering matches exhaustively over `State`, so adding a state without a
rendering fails type checking at `assert_never`.
"""

from __future__ import annotations

from datetime import datetime
from typing import assert_never

from live_weather.clock import ClockTick
from live_weather.models.notification import Notification
from live_weather.models.state import (
    Failure,
    Idle,
    Loading,
    LocationDenied,
    LocationDeniedForever,
    LocationDisabled,
    State,
    Success,
)
from live_weather.models.weather import ConditionGroup, WeatherSnapshot

CONDITION_ICONS: dict[ConditionGroup, str] = {
    ConditionGroup.THUNDERSTORM: "⛈",
    ConditionGroup.DRIZZLE: "🌦",
    ConditionGroup.RAIN: "🌧",
    ConditionGroup.SNOW: "❄",
    ConditionGroup.ATMOSPHERE: "🌫",
    ConditionGroup.CLEAR: "☀",
    ConditionGroup.CLOUDS: "☁",
    ConditionGroup.UNKNOWN: "⛈",
}


def format_temperature(celsius: float) -> str:
    """Round to whole degrees, e.g. '18°C'."""
    return f"{round(celsius)}°C"


def format_sun_time(moment: datetime) -> str:
    """Local clock time, e.g. '06:42 AM'."""
    return moment.astimezone().strftime("%I:%M %p")


def render_weather(weather: WeatherSnapshot) -> str:
    temperature = weather.temperature
    lines = [
        f"📍 {weather.area_name}",
        f"{CONDITION_ICONS[weather.condition_group]}  "
        f"{format_temperature(temperature.current_c)}  {weather.condition_main.upper()}",
        f"Sunrise {format_sun_time(weather.sunrise)}  "
        f"Sunset {format_sun_time(weather.sunset)}",
        f"Temp Max {format_temperature(temperature.max_c)}  "
        f"Temp Min {format_temperature(temperature.min_c)}",
    ]
    return "\n".join(lines)


def render_state(state: State) -> str:
    """Render a state as console text."""
    match state:
        case Success(weather=weather):
            return render_weather(weather)
        case Loading():
            return "Loading weather..."
        case LocationDisabled():
            return (
                "Location Services Disabled\n"
                "Please enable location services to see weather information"
            )
        case LocationDenied():
            return (
                "Location permission denied.\n"
                "Please enable location access to use the app."
            )
        case LocationDeniedForever():
            return (
                "Location permission permanently denied.\n"
                "Please enable it in settings to use the app."
            )
        case Failure():
            return "Failed to load weather data"
        case Idle():
            return ""
        case _:
            assert_never(state)


def render_notification(notification: Notification) -> str:
    return f"! {notification.message}"


def render_tick(tick: ClockTick) -> str:
    return f"{tick.salutation}, {tick.display_text}"
