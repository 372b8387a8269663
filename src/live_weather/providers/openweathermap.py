"""OpenWeatherMap provider.

## API Documentation Summary
Source: https://openweathermap.org/current

## Endpoint
- Base URL: https://api.openweathermap.org/data/2.5/weather
- Full URL example:
  https://api.openweathermap.org/data/2.5/weather?lat=37.77&lon=-122.41&units=metric&appid=KEY

## Authentication
- API key required, passed as the `appid` query parameter
- Invalid key: HTTP 401

## Request Parameters
| Parameter | Description |
|-----------|-------------|
| lat, lon | Coordinates |
| units | standard, metric, imperial (we always request metric) |
| lang | Language of the description text |
| appid | API key |

## Response Format
```json
{
  "coord": {"lon": -122.41, "lat": 37.77},
  "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
  "main": {"temp": 18.0, "temp_min": 15.2, "temp_max": 20.1, ...},
  "dt": 1700000000,
  "sys": {"country": "US", "sunrise": 1699973000, "sunset": 1700010000},
  "name": "San Francisco"
}
```

## Variable Translation (metric -> WeatherSnapshot)
| OpenWeatherMap Field | Snapshot Field | Notes |
|----------------------|----------------|-------|
| name | area_name | |
| main.temp | temperature.current_c | °C |
| main.temp_min | temperature.min_c | °C |
| main.temp_max | temperature.max_c | °C |
| weather[0].id | condition_code | |
| weather[0].main | condition_main | |
| weather[0].description | condition_description | |
| sys.sunrise | sunrise | Unix -> datetime |
| sys.sunset | sunset | Unix -> datetime |
| dt | observed_at | Unix -> datetime |
| coord | coordinates | |
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import ValidationError

from live_weather.models.location import Coordinates
from live_weather.models.weather import Temperature, WeatherSnapshot
from live_weather.providers.base import AuthenticationError, ProviderError, WeatherProvider

logger = logging.getLogger(__name__)


def _unix_to_datetime(timestamp: int | float | None) -> datetime | None:
    """Convert Unix timestamp to datetime."""
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


class OpenWeatherMapProvider(WeatherProvider):
    """OpenWeatherMap current weather provider.

    Example:
        ```python
        async with OpenWeatherMapProvider(api_key="your-api-key") as provider:
            snapshot = await provider.fetch(
                Coordinates(latitude=37.77, longitude=-122.41)
            )
        ```
    """

    name = "openweathermap"
    base_url = "https://api.openweathermap.org/data/2.5"
    requires_api_key = True

    def __init__(
        self,
        api_key: str | None,
        user_agent: str | None = None,
        language: str = "en",
        base_url: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize OpenWeatherMap provider.

        Args:
            api_key: API key from openweathermap.org
            user_agent: Optional User-Agent string
            language: Language of the condition description
            base_url: Override the API base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used in tests)
        """
        super().__init__(
            api_key=api_key, user_agent=user_agent, timeout=timeout, transport=transport
        )
        self.language = language
        if base_url:
            self.base_url = base_url.rstrip("/")

    async def fetch(self, coordinates: Coordinates) -> WeatherSnapshot:
        """Get current weather from OpenWeatherMap.

        Args:
            coordinates: Location (lat/lon)

        Returns:
            Current conditions

        Raises:
            ProviderError: If request fails or the response is malformed
            AuthenticationError: If API key is missing or invalid
        """
        if not self.api_key:
            raise AuthenticationError(
                "API key required for OpenWeatherMap",
                provider=self.name,
            )

        params: dict[str, Any] = {
            "lat": coordinates.latitude,
            "lon": coordinates.longitude,
            "units": "metric",
            "lang": self.language,
            "appid": self.api_key,
        }

        logger.debug(f"Fetching current weather for {coordinates}")
        response = await self._fetch(f"{self.base_url}/weather", params=params)

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                f"Failed to parse response: {e}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            ) from e

        if not isinstance(data, dict):
            raise ProviderError(
                "Malformed response: expected a JSON object",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        return self._translate_response(data, coordinates)

    def _translate_response(
        self,
        response_data: dict[str, Any],
        coordinates: Coordinates,
    ) -> WeatherSnapshot:
        """Translate an OpenWeatherMap response to a WeatherSnapshot.

        See module docstring for the field mapping.
        """
        try:
            main = response_data["main"]
            conditions = response_data["weather"]
            if not conditions:
                raise KeyError("weather")
            condition = conditions[0]
            sys_block = response_data["sys"]

            coord_block = response_data.get("coord")
            reported = None
            if coord_block:
                reported = Coordinates(
                    latitude=coord_block["lat"], longitude=coord_block["lon"]
                )

            return WeatherSnapshot(
                area_name=response_data.get("name") or str(coordinates),
                temperature=Temperature(
                    current_c=main["temp"],
                    min_c=main.get("temp_min", main["temp"]),
                    max_c=main.get("temp_max", main["temp"]),
                ),
                condition_code=condition["id"],
                condition_main=condition["main"],
                condition_description=condition.get("description"),
                sunrise=_unix_to_datetime(sys_block["sunrise"]),
                sunset=_unix_to_datetime(sys_block["sunset"]),
                observed_at=_unix_to_datetime(response_data.get("dt")),
                coordinates=reported or coordinates,
            )
        except (KeyError, IndexError, TypeError, AttributeError, ValidationError) as e:
            raise ProviderError(
                f"Malformed response: {e!r}",
                provider=self.name,
            ) from e
