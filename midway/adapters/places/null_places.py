"""Places client that never finds anything.

Wired in when no Mapbox token is configured, so a resolution still
completes and simply shows no places.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ...domain.models import POI, Coordinate, POICategory


@dataclass
class NullPlacesClient:
    """No-op PlacesPort implementation."""

    async def find_nearby(
        self,
        point: Coordinate,
        category: POICategory,
        limit: int,
    ) -> List[POI]:
        return []
