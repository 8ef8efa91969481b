"""Places adapters - Implementations of PlacesPort.

Available implementations:
- MapboxPlacesClient: Mapbox Geocoding API POI search
- NullPlacesClient: Always returns no places
"""

from .mapbox_places import MapboxPlacesClient
from .null_places import NullPlacesClient

__all__ = ["MapboxPlacesClient", "NullPlacesClient"]
