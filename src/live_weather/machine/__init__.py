"""Weather-acquisition state machine."""

from live_weather.machine.queue import EventQueue
from live_weather.machine.transitions import resolve_fetch, transition
from live_weather.machine.state_machine import (
    StateListener,
    Unsubscribe,
    WeatherStateMachine,
)

__all__ = [
    "EventQueue",
    "transition",
    "resolve_fetch",
    "StateListener",
    "Unsubscribe",
    "WeatherStateMachine",
]
