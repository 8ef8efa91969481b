"""Folium map surface adapter.

Backs the map session with a ``folium.Map`` so a resolution can be
exported as an interactive HTML page:
- route line as a ``PolyLine``
- midpoint and places as ``Marker`` with a ``folium.Icon`` per
  rendering hint
- view framing through ``FitBounds``

Elements are tracked by id and the ``folium.Map`` is rebuilt from the
tracked set whenever it is rendered, so a removed layer never reaches
the page.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Sequence

import folium
from folium.map import FitBounds

from ...config import MapConfig, get_config
from ...domain.errors import RenderingError
from ...domain.models import Coordinate, MapBounds, RenderingHint

ElementFactory = Callable[[], folium.MacroElement]


@dataclass
class FoliumMapSurface:
    """Folium-based MapSurfacePort implementation.

    Attributes:
        config: Map presentation configuration
    """

    config: MapConfig = field(default_factory=lambda: get_config().map)

    _elements: Dict[str, ElementFactory] = field(default_factory=dict, init=False, repr=False)
    _fit: Optional[ElementFactory] = field(default=None, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def map(self) -> folium.Map:
        """A fresh ``folium.Map`` holding the current elements."""
        fmap = folium.Map(
            location=[self.config.default_center_lat, self.config.default_center_lng],
            zoom_start=self.config.default_zoom,
            control_scale=True,
        )
        for build in self._elements.values():
            build().add_to(fmap)
        if self._fit is not None:
            self._fit().add_to(fmap)
        return fmap

    def is_ready(self) -> bool:
        return True

    def _attach(self, element_id: str, build: ElementFactory) -> None:
        if element_id in self._elements:
            raise ValueError(f"Element already exists: {element_id}")
        self._elements[element_id] = build

    def _detach(self, element_id: str) -> bool:
        return self._elements.pop(element_id, None) is not None

    def add_line(
        self,
        layer_id: str,
        coordinates: Sequence[Coordinate],
        color: str,
        width: int,
    ) -> None:
        locations = [c.as_latlng() for c in coordinates]
        self._attach(
            layer_id,
            lambda: folium.PolyLine(
                locations=locations,
                color=color,
                weight=width,
                opacity=0.8,
                line_join="round",
                line_cap="round",
            ),
        )

    def remove_layer(self, layer_id: str) -> bool:
        return self._detach(layer_id)

    def has_layer(self, layer_id: str) -> bool:
        return layer_id in self._elements

    def add_marker(
        self,
        marker_id: str,
        point: Coordinate,
        hint: RenderingHint,
        popup: Optional[str] = None,
    ) -> None:
        self._attach(
            marker_id,
            lambda: folium.Marker(
                location=point.as_latlng(),
                popup=folium.Popup(popup, max_width=300) if popup else None,
                tooltip=html.escape(hint.label),
                icon=folium.Icon(color=hint.color, icon=hint.icon, prefix="fa"),
            ),
        )

    def remove_marker(self, marker_id: str) -> bool:
        return self._detach(marker_id)

    def fit_bounds(
        self,
        bounds: MapBounds,
        padding: Mapping[str, int],
        max_zoom: int,
    ) -> None:
        corners = [list(bounds.south_west.as_latlng()), list(bounds.north_east.as_latlng())]
        self._fit = lambda: FitBounds(
            corners,
            padding_top_left=(padding.get("left", 0), padding.get("top", 0)),
            padding_bottom_right=(padding.get("right", 0), padding.get("bottom", 0)),
            max_zoom=max_zoom,
        )

    def render_html(self) -> str:
        """Render the whole page as an HTML string."""
        return self.map.get_root().render()

    def save(self, output_path: Path) -> Path:
        """Write the map to an HTML file.

        Raises:
            RenderingError: If the file cannot be written.
        """
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            self.map.save(str(output_path))
        except OSError as e:
            self._logger.error(
                "Map export failed",
                extra={"output_path": str(output_path), "error": str(e)},
            )
            raise RenderingError(
                f"Map export failed: {e}",
                output_path=str(output_path),
                renderer_type="folium",
                cause=e,
            )

        self._logger.info("Map exported", extra={"output_path": str(output_path)})
        return output_path
