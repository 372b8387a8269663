"""External capabilities consumed by the acquisition core."""

from live_weather.capabilities.location import (
    LocationService,
    LocationServiceError,
    PermissionLevel,
    ServiceStatus,
    StaticLocationService,
)
from live_weather.capabilities.connectivity import (
    ConnectivityMonitor,
    ProbeConnectivityMonitor,
    Reachability,
)

__all__ = [
    "LocationService",
    "LocationServiceError",
    "PermissionLevel",
    "ServiceStatus",
    "StaticLocationService",
    "ConnectivityMonitor",
    "ProbeConnectivityMonitor",
    "Reachability",
]
