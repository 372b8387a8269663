"""Base weather provider abstraction.

This module defines the interface for weather data providers. A provider
takes coordinates and returns a `WeatherSnapshot` describing current
conditions, translating its own response format into that model.

## Canonical Data Format
- Temperature: Celsius (°C)
- Timestamps: timezone-aware UTC datetimes
- Condition code: OpenWeatherMap condition id (see
  https://openweathermap.org/weather-conditions), so that
  `ConditionGroup.from_code` works for every provider

### Translation Requirements
Each provider must implement `_translate_response()` to convert its API
response into `WeatherSnapshot`. A response that cannot be translated must
raise `ProviderError`; the state machine treats every provider exception as
a failed fetch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from live_weather import __version__
from live_weather.models.location import Coordinates
from live_weather.models.weather import WeatherSnapshot


class ProviderError(Exception):
    """Base exception for weather provider errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(ProviderError):
    """Raised when provider rate limit is exceeded."""

    def __init__(
        self,
        provider: str,
        retry_after: int | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            f"Rate limit exceeded for {provider}",
            provider=provider,
            status_code=status_code,
        )
        self.retry_after = retry_after


class AuthenticationError(ProviderError):
    """Raised when authentication fails."""

    pass


class WeatherProvider(ABC):
    """Abstract base class for weather data providers.

    Attributes:
        name: Human-readable provider name
        base_url: Base URL for the API
        requires_api_key: Whether this provider requires an API key

    Example:
        ```python
        class MyProvider(WeatherProvider):
            name = "my_provider"
            base_url = "https://api.example.com"

            async def fetch(self, coordinates):
                response = await self._fetch(...)
                return self._translate_response(response.json(), coordinates)
        ```
    """

    name: str
    base_url: str
    requires_api_key: bool = False

    def __init__(
        self,
        api_key: str | None = None,
        user_agent: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the provider.

        Args:
            api_key: API key if required by the provider
            user_agent: User-Agent string for requests
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used in tests)
        """
        self.api_key = api_key
        self.user_agent = user_agent or f"live-weather/{__version__}"
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> WeatherProvider:
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

    def _get_default_headers(self) -> dict[str, str]:
        """Get default headers for requests."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
        reraise=True,
    )
    async def _fetch(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Fetch data from the API with retry logic.

        Args:
            url: Full URL to fetch
            params: Query parameters
            headers: Additional headers

        Returns:
            HTTP response

        Raises:
            ProviderError: If the API answers with an error status
            RateLimitError: If rate limit is exceeded
            AuthenticationError: If the API key is rejected
            httpx.TimeoutException: If every attempt timed out
        """
        client = self._get_client()
        request_headers = self._get_default_headers()
        if headers:
            request_headers.update(headers)

        response = await client.get(url, params=params, headers=request_headers)

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                self.name,
                retry_after=int(retry_after) if retry_after else None,
                status_code=429,
            )

        if response.status_code == 401:
            raise AuthenticationError(
                "Invalid API key",
                provider=self.name,
                status_code=401,
                response_body=response.text,
            )

        if response.status_code >= 400:
            raise ProviderError(
                f"API request failed: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        return response

    @abstractmethod
    async def fetch(self, coordinates: Coordinates) -> WeatherSnapshot:
        """Get current weather for a location.

        Args:
            coordinates: Location coordinates

        Returns:
            Current conditions

        Raises:
            ProviderError: If the weather cannot be retrieved
        """
        pass

    @abstractmethod
    def _translate_response(
        self,
        response_data: dict[str, Any],
        coordinates: Coordinates,
    ) -> WeatherSnapshot:
        """Translate provider-specific response to a WeatherSnapshot.

        Args:
            response_data: Raw JSON response from provider
            coordinates: Requested coordinates

        Returns:
            Snapshot of current conditions
        """
        pass
