"""Headless map surface.

Keeps line layers and markers in dictionaries. Used when no real map
is attached (library use, tests) and as the reference for what the
map session is allowed to do to a surface: adding an id that already
exists is an error, so any append-instead-of-replace bug surfaces
immediately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence, Tuple

from ...domain.models import Coordinate, MapBounds, RenderingHint


@dataclass(frozen=True, slots=True)
class LineLayer:
    coordinates: Tuple[Coordinate, ...]
    color: str
    width: int


@dataclass(frozen=True, slots=True)
class MarkerElement:
    point: Coordinate
    hint: RenderingHint
    popup: Optional[str] = None


@dataclass
class InMemoryMapSurface:
    """Dictionary-backed MapSurfacePort implementation.

    Attributes:
        ready: Whether the surface reports itself initialized
        lines: Installed line layers by id
        markers: Installed markers by id
        bounds: Last fitted bounds
        operations: Count of mutating calls, by operation name
    """

    ready: bool = True
    lines: Dict[str, LineLayer] = field(default_factory=dict)
    markers: Dict[str, MarkerElement] = field(default_factory=dict)
    bounds: Optional[MapBounds] = None
    operations: Dict[str, int] = field(default_factory=dict)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _count(self, operation: str) -> None:
        self.operations[operation] = self.operations.get(operation, 0) + 1

    def is_ready(self) -> bool:
        return self.ready

    def add_line(
        self,
        layer_id: str,
        coordinates: Sequence[Coordinate],
        color: str,
        width: int,
    ) -> None:
        if layer_id in self.lines:
            raise ValueError(f"Layer already exists: {layer_id}")
        self.lines[layer_id] = LineLayer(tuple(coordinates), color, width)
        self._count("add_line")

    def remove_layer(self, layer_id: str) -> bool:
        self._count("remove_layer")
        return self.lines.pop(layer_id, None) is not None

    def has_layer(self, layer_id: str) -> bool:
        return layer_id in self.lines

    def add_marker(
        self,
        marker_id: str,
        point: Coordinate,
        hint: RenderingHint,
        popup: Optional[str] = None,
    ) -> None:
        if marker_id in self.markers:
            raise ValueError(f"Marker already exists: {marker_id}")
        self.markers[marker_id] = MarkerElement(point, hint, popup)
        self._count("add_marker")

    def remove_marker(self, marker_id: str) -> bool:
        self._count("remove_marker")
        return self.markers.pop(marker_id, None) is not None

    def fit_bounds(
        self,
        bounds: MapBounds,
        padding: Mapping[str, int],
        max_zoom: int,
    ) -> None:
        self.bounds = bounds
        self._count("fit_bounds")
