"""Pure transition function of the weather state machine.

| Event | Next state (from any state) |
|-------|-----------------------------|
| FetchRequested | Loading, then Success or Failure once the fetch resolves |
| LocationServiceDisabled | LocationDisabled |
| LocationPermissionDenied | LocationDenied |
| LocationPermissionDeniedForever | LocationDeniedForever |

Every event has a transition from every state. None of the transitions
depend on the current state; it is still passed so callers see the
function as `next(state, event)`.
"""

from __future__ import annotations

from typing import assert_never

from live_weather.models.events import (
    Event,
    FetchRequested,
    LocationPermissionDenied,
    LocationPermissionDeniedForever,
    LocationServiceDisabled,
)
from live_weather.models.state import (
    Failure,
    Loading,
    LocationDenied,
    LocationDeniedForever,
    LocationDisabled,
    State,
    Success,
)
from live_weather.models.weather import WeatherSnapshot


def transition(state: State, event: Event) -> State:
    """Compute the state committed immediately after `event`."""
    match event:
        case FetchRequested():
            return Loading()
        case LocationServiceDisabled():
            return LocationDisabled()
        case LocationPermissionDenied():
            return LocationDenied()
        case LocationPermissionDeniedForever():
            return LocationDeniedForever()
        case _:
            assert_never(event)


def resolve_fetch(snapshot: WeatherSnapshot | None, reason: str | None = None) -> State:
    """Compute the state committed when a weather fetch resolves.

    Args:
        snapshot: The provider's snapshot, or None if the fetch failed
        reason: Failure description, ignored on success

    Returns:
        Success carrying the snapshot unchanged, or Failure
    """
    if snapshot is None:
        return Failure(reason=reason)
    return Success(weather=snapshot)
