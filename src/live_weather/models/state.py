"""Application states produced by the weather state machine.

Exactly one state is current at any time. States are immutable and
replaced on every transition, never modified in place.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from live_weather.models.weather import WeatherSnapshot


class _State(BaseModel):
    model_config = ConfigDict(frozen=True)


class Idle(_State):
    """Initial state, before any event has been processed."""

    kind: Literal["idle"] = "idle"


class Loading(_State):
    """A weather fetch is in flight."""

    kind: Literal["loading"] = "loading"


class Success(_State):
    """Weather was retrieved for the current position."""

    kind: Literal["success"] = "success"
    weather: WeatherSnapshot


class Failure(_State):
    """The last weather fetch failed."""

    kind: Literal["failure"] = "failure"
    reason: str | None = Field(default=None, description="Short failure description")


class LocationDisabled(_State):
    kind: Literal["location_disabled"] = "location_disabled"


class LocationDenied(_State):
    kind: Literal["location_denied"] = "location_denied"


class LocationDeniedForever(_State):
    kind: Literal["location_denied_forever"] = "location_denied_forever"


State = Annotated[
    Union[
        Idle,
        Loading,
        Success,
        Failure,
        LocationDisabled,
        LocationDenied,
        LocationDeniedForever,
    ],
    Field(discriminator="kind"),
]
