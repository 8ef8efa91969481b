"""Rendering port - Abstraction for the mutable map surface.

The surface is a dumb layer store: it adds and removes named line
layers and markers. Replace-not-append semantics and generation
checks are enforced one level up, by the map session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import Coordinate, MapBounds, RenderingHint


class MapSurfacePort(Protocol):
    """Port for a map rendering surface.

    Implementations:
    - adapters/rendering/memory_surface.py (InMemoryMapSurface)
    - adapters/rendering/folium_surface.py (FoliumMapSurface)
    """

    def is_ready(self) -> bool:
        """Whether the surface has finished initializing."""
        ...

    def add_line(
        self,
        layer_id: str,
        coordinates: Sequence[Coordinate],
        color: str,
        width: int,
    ) -> None:
        """Install a line layer. The id must not already exist."""
        ...

    def remove_layer(self, layer_id: str) -> bool:
        """Remove a line layer.

        Returns:
            True if the layer existed and was removed.
        """
        ...

    def has_layer(self, layer_id: str) -> bool:
        """Whether a line layer with this id exists."""
        ...

    def add_marker(
        self,
        marker_id: str,
        point: Coordinate,
        hint: RenderingHint,
        popup: Optional[str] = None,
    ) -> None:
        """Install a marker. The id must not already exist."""
        ...

    def remove_marker(self, marker_id: str) -> bool:
        """Remove a marker.

        Returns:
            True if the marker existed and was removed.
        """
        ...

    def fit_bounds(
        self,
        bounds: MapBounds,
        padding: Mapping[str, int],
        max_zoom: int,
    ) -> None:
        """Frame the view on the given bounds."""
        ...
