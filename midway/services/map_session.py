"""Map session - sole owner of the mutable map surface.

The session keeps three kinds of elements on the surface: one route
line, at most one midpoint marker and any number of place markers.
Every draw replaces the previous elements of its kind; nothing is
ever appended next to a stale element.

Overlapping resolutions are ordered with generation tokens. Each
request takes a token from ``begin_generation()`` before its first
network call and commits through ``apply()``. Only the most recently
issued token may commit, so a slow request that started earlier can
never overwrite the result of one that started later.

If the surface is not initialized yet, operations update the session's
logical state without touching the surface and ``flush_pending()``
replays that state once the surface is ready.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

from ..config import MapConfig, get_config
from ..domain.errors import InvalidRouteError
from ..domain.models import (
    MIDPOINT_HINT,
    POI,
    Coordinate,
    MapBounds,
    MapVisualState,
)
from ..ports.rendering import MapSurfacePort

ROUTE_LAYER_ID = "route"
MIDPOINT_MARKER_ID = "midpoint"
POI_MARKER_PREFIX = "poi-"


def poi_popup_html(poi: POI) -> str:
    """Popup body for a place marker: name, category and address."""
    parts = [f"<strong>{html.escape(poi.name)}</strong>"]
    parts.append(html.escape(poi.category.rendering_hint.label))
    if poi.address:
        parts.append(html.escape(poi.address))
    return "<br>".join(parts)


def midpoint_popup_html(pois: Sequence[POI] = ()) -> str:
    """Popup body for the midpoint marker, listing the nearby places."""
    popup = f"<strong>{html.escape(MIDPOINT_HINT.label)}</strong>"
    if not pois:
        return popup
    items = []
    for poi in pois:
        item = f"<strong>{html.escape(poi.name)}</strong>"
        if poi.address:
            item += f"<br>{html.escape(poi.address)}"
        items.append(f"<li>{item}</li>")
    return f"{popup}<br>Nearby places to meet:<ul>{''.join(items)}</ul>"


@dataclass
class MapSession:
    """Owns the map surface and keeps it consistent with one resolution.

    Attributes:
        surface: The rendering surface being driven
        config: Route styling and view framing settings
    """

    surface: MapSurfacePort
    config: MapConfig = field(default_factory=lambda: get_config().map)

    _issued: int = field(default=0, init=False, repr=False)
    _state: MapVisualState = field(default_factory=MapVisualState, init=False, repr=False)
    _poi_marker_ids: List[str] = field(default_factory=list, init=False, repr=False)
    _dirty: bool = field(default=False, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    # -- generation tokens -------------------------------------------------

    def begin_generation(self) -> int:
        """Issue a new token; every older token becomes stale."""
        self._issued += 1
        return self._issued

    @property
    def current_generation(self) -> int:
        return self._issued

    def is_current(self, generation: int) -> bool:
        return generation == self._issued

    # -- state ---------------------------------------------------------------

    def snapshot(self) -> MapVisualState:
        """What the session shows, or will show once the surface is ready."""
        return self._state

    @property
    def has_pending(self) -> bool:
        """Whether logical state is waiting for the surface to be ready."""
        return self._dirty

    def _surface_ready(self, operation: str) -> bool:
        if self.surface.is_ready():
            return True
        self._dirty = True
        self._logger.debug("Surface not ready, deferring", extra={"operation": operation})
        return False

    # -- primitive removals --------------------------------------------------

    def _remove_route(self) -> None:
        if self.surface.has_layer(ROUTE_LAYER_ID):
            self.surface.remove_layer(ROUTE_LAYER_ID)

    def _remove_midpoint(self) -> None:
        self.surface.remove_marker(MIDPOINT_MARKER_ID)

    def _remove_pois(self) -> None:
        for marker_id in self._poi_marker_ids:
            self.surface.remove_marker(marker_id)
        self._poi_marker_ids = []

    # -- primitive draws -----------------------------------------------------

    def _add_route(self, coordinates: Sequence[Coordinate]) -> None:
        self.surface.add_line(
            ROUTE_LAYER_ID,
            coordinates,
            color=self.config.route_color,
            width=self.config.route_width,
        )

    def _add_midpoint(self, point: Coordinate, pois: Sequence[POI]) -> None:
        self.surface.add_marker(
            MIDPOINT_MARKER_ID,
            point,
            MIDPOINT_HINT,
            popup=midpoint_popup_html(pois),
        )

    def _add_pois(self, pois: Sequence[POI]) -> None:
        for i, poi in enumerate(pois):
            marker_id = f"{POI_MARKER_PREFIX}{i}"
            self.surface.add_marker(
                marker_id,
                poi.location,
                poi.category.rendering_hint,
                popup=poi_popup_html(poi),
            )
            self._poi_marker_ids.append(marker_id)

    def _add_bounds(self, bounds: MapBounds) -> None:
        self.surface.fit_bounds(bounds, self.config.padding, self.config.max_zoom)

    # -- public operations ---------------------------------------------------

    def clear(self) -> None:
        """Remove the route line, midpoint marker and place markers.

        Idempotent: clearing an empty map changes nothing.
        """
        self._state = MapVisualState(generation=self._state.generation)
        if not self._surface_ready("clear"):
            return
        self._remove_route()
        self._remove_midpoint()
        self._remove_pois()

    def draw_route(self, coordinates: Sequence[Coordinate]) -> None:
        """Replace the route line.

        Raises:
            InvalidRouteError: If ``coordinates`` is empty.
        """
        if not coordinates:
            raise InvalidRouteError("Cannot draw an empty route")
        line = tuple(coordinates)
        self._state = replace(self._state, route_line=line)
        if not self._surface_ready("draw_route"):
            return
        self._remove_route()
        self._add_route(line)

    def set_midpoint_marker(self, point: Coordinate, pois: Sequence[POI] = ()) -> None:
        """Replace the midpoint marker; its popup lists ``pois``."""
        self._state = replace(self._state, midpoint=point)
        if not self._surface_ready("set_midpoint_marker"):
            return
        self._remove_midpoint()
        self._add_midpoint(point, pois)

    def set_poi_markers(self, pois: Sequence[POI]) -> None:
        """Replace every place marker, one marker per place."""
        self._state = replace(self._state, pois=tuple(pois))
        if not self._surface_ready("set_poi_markers"):
            return
        self._remove_pois()
        self._add_pois(pois)

    def fit_bounds(self, bounds: MapBounds) -> None:
        """Frame the view on ``bounds`` with the configured padding."""
        self._state = replace(self._state, bounds=bounds)
        if not self._surface_ready("fit_bounds"):
            return
        self._add_bounds(bounds)

    def apply(
        self,
        generation: int,
        route_coordinates: Sequence[Coordinate],
        midpoint: Coordinate,
        pois: Sequence[POI] = (),
        bounds: Optional[MapBounds] = None,
    ) -> bool:
        """Commit a whole resolution if its token is still current.

        Returns:
            True if the map now shows this resolution, False if the
            token was stale and nothing changed.
        """
        if not self.is_current(generation):
            self._logger.info(
                "Discarding stale resolution",
                extra={"generation": generation, "current": self._issued},
            )
            return False

        self.clear()
        self.draw_route(route_coordinates)
        self.set_midpoint_marker(midpoint, pois)
        self.set_poi_markers(pois)
        if bounds is not None:
            self.fit_bounds(bounds)
        self._state = replace(self._state, generation=generation)

        self._logger.info(
            "Map updated",
            extra={
                "generation": generation,
                "route_points": len(route_coordinates),
                "pois": len(pois),
                "deferred": self._dirty,
            },
        )
        return True

    def flush_pending(self) -> bool:
        """Replay the logical state onto a surface that became ready.

        Returns:
            True if the surface was redrawn.
        """
        if not self._dirty or not self.surface.is_ready():
            return False

        self._remove_route()
        self._remove_midpoint()
        self._remove_pois()

        state = self._state
        if state.route_line is not None:
            self._add_route(state.route_line)
        if state.midpoint is not None:
            self._add_midpoint(state.midpoint, state.pois)
        if state.pois:
            self._add_pois(state.pois)
        if state.bounds is not None:
            self._add_bounds(state.bounds)

        self._dirty = False
        self._logger.debug("Pending map state flushed", extra={"generation": state.generation})
        return True
