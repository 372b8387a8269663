"""Weather data providers."""

from live_weather.providers.base import (
    AuthenticationError,
    ProviderError,
    RateLimitError,
    WeatherProvider,
)
from live_weather.providers.openweathermap import OpenWeatherMapProvider

__all__ = [
    "WeatherProvider",
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "OpenWeatherMapProvider",
]
