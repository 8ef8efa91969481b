"""Rendering adapters - Implementations of MapSurfacePort.

Available implementations:
- InMemoryMapSurface: Headless dictionary-backed surface
- FoliumMapSurface: Folium-based interactive HTML map
"""

from .folium_surface import FoliumMapSurface
from .memory_surface import InMemoryMapSurface, LineLayer, MarkerElement

__all__ = ["FoliumMapSurface", "InMemoryMapSurface", "LineLayer", "MarkerElement"]
