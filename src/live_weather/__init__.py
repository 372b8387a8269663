"""Live weather: current conditions for a live location.

The core is an event-driven state machine fed by location, connectivity and
weather capabilities. See `live_weather.session` for the entry point.
"""

__version__ = "0.1.0"
