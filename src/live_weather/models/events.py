"""Input events consumed by the weather state machine.

Events are immutable value objects. Equality is structural, so two
`FetchRequested` events for the same position compare equal and
parameterless events of the same type are always equal.

## Event Types

| Event | Produced when |
|-------|---------------|
| FetchRequested | A position is available and weather should be retrieved |
| LocationServiceDisabled | The device location service is off |
| LocationPermissionDenied | Permission was denied after one request |
| LocationPermissionDeniedForever | Permission is permanently denied |
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from live_weather.models.location import Position


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class FetchRequested(_Event):
    """A position became available and weather should be retrieved."""

    kind: Literal["fetch_requested"] = "fetch_requested"
    position: Position


class LocationServiceDisabled(_Event):
    """The device location service is disabled."""

    kind: Literal["location_service_disabled"] = "location_service_disabled"


class LocationPermissionDenied(_Event):
    """Location permission was denied."""

    kind: Literal["location_permission_denied"] = "location_permission_denied"


class LocationPermissionDeniedForever(_Event):
    """Location permission was permanently denied."""

    kind: Literal["location_permission_denied_forever"] = (
        "location_permission_denied_forever"
    )


Event = Annotated[
    Union[
        FetchRequested,
        LocationServiceDisabled,
        LocationPermissionDenied,
        LocationPermissionDeniedForever,
    ],
    Field(discriminator="kind"),
]
