"""Routing port - Abstraction for the duration oracle.

The duration oracle answers "how long from X to Y by mode M" and
returns the route geometry it used. Implementations may call a
remote directions service or compute an offline estimate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import Coordinate, Route, TransportMode


class DurationOraclePort(Protocol):
    """Port for route and travel-time queries.

    Implementations:
    - adapters/routing/mapbox_directions.py (MapboxDirectionsOracle)
    - adapters/routing/straight_line.py (StraightLineOracle)
    """

    async def route(
        self,
        start: Coordinate,
        end: Coordinate,
        mode: TransportMode,
    ) -> Optional[Route]:
        """Compute a route between two coordinates.

        Args:
            start: Origin coordinate.
            end: Destination coordinate.
            mode: Transport mode.

        Returns:
            The route with geometry and total duration, or None if the
            provider found no route. Transport failures may either
            return None or raise; callers must handle both.
        """
        ...
