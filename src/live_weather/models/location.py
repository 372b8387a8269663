"""Location models for live weather acquisition."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Self

from pydantic import BaseModel, ConfigDict, Field


# Regex for parsing lat/long coordinates: "latitude,longitude"
# Supports optional +/- prefix for both values
COORDINATE_PATTERN = re.compile(
    r"^(?P<lat>[-+]?\d*\.?\d+)\s*,\s*(?P<lon>[-+]?\d*\.?\d+)$"
)


class Coordinates(BaseModel):
    """Geographic coordinates (latitude/longitude).

    Latitude:
        - Negative (-) = south of equator
        - Positive (+) = north of equator
        - Range: -90 to +90

    Longitude:
        - Negative (-) = west of prime meridian
        - Positive (+) = east of prime meridian
        - Range: -180 to +180
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Parse coordinates from string format 'latitude,longitude'.

        Examples:
            '37.77,-122.41' -> San Francisco
            '-33.8688,151.2093' -> Sydney
            '+51.5074,-0.1278' -> London
        """
        match = COORDINATE_PATTERN.match(value.strip())
        if not match:
            raise ValueError(
                f"Invalid coordinate format: '{value}'. "
                "Expected format: 'latitude,longitude' (e.g., '37.77,-122.41')"
            )
        return cls(
            latitude=float(match.group("lat")),
            longitude=float(match.group("lon")),
        )

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"

    def to_tuple(self) -> tuple[float, float]:
        """Return coordinates as (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


class Position(BaseModel):
    """A position fix reported by the device location service.

    Two positions are equal when their coordinates, accuracy and timestamp
    are equal, so a repeated fix produces an equal fetch request.
    """

    model_config = ConfigDict(frozen=True)

    coordinates: Coordinates
    accuracy_m: float | None = Field(
        default=None, ge=0, description="Horizontal accuracy radius in meters"
    )
    timestamp: datetime | None = Field(
        default=None, description="Time the fix was taken"
    )

    @classmethod
    def at(
        cls,
        latitude: float,
        longitude: float,
        accuracy_m: float | None = None,
        timestamp: datetime | None = None,
    ) -> Self:
        """Create a Position from latitude/longitude values."""
        return cls(
            coordinates=Coordinates(latitude=latitude, longitude=longitude),
            accuracy_m=accuracy_m,
            timestamp=timestamp,
        )

    def __str__(self) -> str:
        return str(self.coordinates)
