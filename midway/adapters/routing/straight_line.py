"""Offline duration oracle.

Estimates travel time as geodesic distance over a constant per-mode
speed and returns a straight route interpolated into evenly spaced
points. Needs no network and no token, which makes it the fallback
when Mapbox is not configured.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from geopy.distance import geodesic

from ...config import RoutingConfig, get_config
from ...domain.models import Coordinate, Route, TransportMode


def interpolate_line(start: Coordinate, end: Coordinate, segments: int) -> tuple[Coordinate, ...]:
    """Evenly spaced points from start to end, both included."""
    segments = max(1, segments)
    d_lng = end.longitude - start.longitude
    d_lat = end.latitude - start.latitude
    return tuple(
        Coordinate(
            longitude=start.longitude + d_lng * i / segments,
            latitude=start.latitude + d_lat * i / segments,
        )
        for i in range(segments + 1)
    )


@dataclass
class StraightLineOracle:
    """Duration oracle assuming straight-line travel at constant speed.

    Implements DurationOraclePort.

    Attributes:
        config: Routing configuration holding per-mode speeds
    """

    config: RoutingConfig = field(default_factory=lambda: get_config().routing)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def speed_for(self, mode: TransportMode) -> float:
        """Average speed in meters per second for a mode."""
        speeds = {
            TransportMode.DRIVING: self.config.driving_speed_mps,
            TransportMode.WALKING: self.config.walking_speed_mps,
            TransportMode.CYCLING: self.config.cycling_speed_mps,
            TransportMode.TRANSIT: self.config.transit_speed_mps,
        }
        return speeds[mode]

    async def route(
        self,
        start: Coordinate,
        end: Coordinate,
        mode: TransportMode,
    ) -> Optional[Route]:
        meters = geodesic(start.as_latlng(), end.as_latlng()).meters
        speed = self.speed_for(mode)
        if speed <= 0:
            self._logger.warning(
                "Non-positive speed configured, no route",
                extra={"mode": mode.value, "speed_mps": speed},
            )
            return None

        return Route(
            geometry=interpolate_line(start, end, self.config.straight_line_segments),
            duration_seconds=meters / speed,
            distance_meters=meters,
        )
