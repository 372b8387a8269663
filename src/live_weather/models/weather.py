"""Current weather models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from live_weather.models.location import Coordinates


class ConditionGroup(str, Enum):
    """Weather condition groups derived from OpenWeatherMap condition codes.

    See https://openweathermap.org/weather-conditions for the code table.
    The group decides which icon the presentation layer shows.
    """

    THUNDERSTORM = "thunderstorm"  # 2xx
    DRIZZLE = "drizzle"  # 3xx
    RAIN = "rain"  # 5xx
    SNOW = "snow"  # 6xx
    ATMOSPHERE = "atmosphere"  # 7xx: mist, smoke, haze, fog...
    CLEAR = "clear"  # 800
    CLOUDS = "clouds"  # 801-804
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: int) -> ConditionGroup:
        """Classify an OpenWeatherMap condition code."""
        if 200 <= code < 300:
            return cls.THUNDERSTORM
        if 300 <= code < 400:
            return cls.DRIZZLE
        if 500 <= code < 600:
            return cls.RAIN
        if 600 <= code < 700:
            return cls.SNOW
        if 700 <= code < 800:
            return cls.ATMOSPHERE
        if code == 800:
            return cls.CLEAR
        if 800 < code <= 804:
            return cls.CLOUDS
        return cls.UNKNOWN


class Temperature(BaseModel):
    """Current, minimum and maximum temperature in Celsius."""

    model_config = ConfigDict(frozen=True)

    current_c: float = Field(..., description="Current temperature in Celsius")
    min_c: float = Field(..., description="Minimum temperature in Celsius")
    max_c: float = Field(..., description="Maximum temperature in Celsius")

    @property
    def current_f(self) -> float:
        """Current temperature in Fahrenheit."""
        return self.current_c * 9 / 5 + 32


class WeatherSnapshot(BaseModel):
    """Current conditions for one place, as returned by a weather provider.

    Snapshots are immutable; the state machine hands the provider's instance
    to observers unchanged.
    """

    model_config = ConfigDict(frozen=True)

    area_name: str = Field(..., description="Name of the area the conditions apply to")
    temperature: Temperature
    condition_code: int = Field(..., description="OpenWeatherMap condition id")
    condition_main: str = Field(..., description="Condition label, e.g. 'Clear'")
    condition_description: str | None = Field(
        default=None, description="Longer condition text, e.g. 'clear sky'"
    )
    sunrise: datetime = Field(..., description="Sunrise time (UTC)")
    sunset: datetime = Field(..., description="Sunset time (UTC)")
    observed_at: datetime | None = Field(
        default=None, description="Time of the observation (UTC)"
    )
    coordinates: Coordinates | None = Field(
        default=None, description="Coordinates reported by the provider"
    )

    @property
    def condition_group(self) -> ConditionGroup:
        """Condition group for the condition code."""
        return ConditionGroup.from_code(self.condition_code)

    def is_daylight(self, at: datetime) -> bool:
        """Check whether `at` falls between sunrise and sunset."""
        return self.sunrise <= at < self.sunset
