"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings.
API keys should be provided via environment variables, not config files.

## Environment Variables

- OPENWEATHERMAP_API_KEY: OpenWeatherMap API key (required to fetch weather)
- REQUEST_TIMEOUT_SECONDS: Weather request timeout (default: 10)
- LOG_LEVEL: Logging level for the CLI (default: INFO)
- LISTENER_RETRY_SECONDS: Delay before a failed capability stream is
  subscribed again (default: 1)

## Example .env file

```
OPENWEATHERMAP_API_KEY=your-openweathermap-key
LOG_LEVEL=DEBUG
```
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"

    # Weather provider
    openweathermap_api_key: str | None = None
    openweathermap_base_url: str = "https://api.openweathermap.org/data/2.5"
    language: str = "en"
    request_timeout_seconds: float = Field(default=10.0, gt=0, le=120)

    # Presentation
    notification_duration_seconds: float = Field(default=4.0, gt=0)
    clock_tick_seconds: float = Field(default=1.0, gt=0)

    # Connectivity probe
    connectivity_probe_url: str = "https://api.openweathermap.org"
    connectivity_probe_interval_seconds: float = Field(default=5.0, gt=0)

    # Session listeners
    listener_retry_seconds: float = Field(default=1.0, ge=0)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        return str(v).upper()

    @property
    def weather_configured(self) -> bool:
        """Check if the weather provider has an API key."""
        return bool(self.openweathermap_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
