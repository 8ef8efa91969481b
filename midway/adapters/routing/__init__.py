"""Routing adapters - Implementations of DurationOraclePort.

Available implementations:
- MapboxDirectionsOracle: Mapbox Directions API over httpx
- StraightLineOracle: Offline geodesic estimate at constant speed
"""

from .mapbox_directions import MapboxDirectionsOracle
from .straight_line import StraightLineOracle, interpolate_line

__all__ = ["MapboxDirectionsOracle", "StraightLineOracle", "interpolate_line"]
