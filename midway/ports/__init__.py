"""Ports layer - Protocols the services depend on.

Services only see these interfaces; concrete implementations live in
``midway.adapters`` and are chosen by ``midway.container``.
"""

from .cache import CachePort
from .places import PlacesPort
from .rendering import MapSurfacePort
from .routing import DurationOraclePort

__all__ = [
    "DurationOraclePort",
    "PlacesPort",
    "MapSurfacePort",
    "CachePort",
]
