"""Places port - Abstraction for nearby point-of-interest search."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import POI, Coordinate, POICategory


class PlacesPort(Protocol):
    """Port for nearby places search.

    Implementations:
    - adapters/places/mapbox_places.py (MapboxPlacesClient)
    - adapters/places/null_places.py (NullPlacesClient)
    """

    async def find_nearby(
        self,
        point: Coordinate,
        category: POICategory,
        limit: int,
    ) -> Sequence[POI]:
        """Find places of one category around a point.

        Args:
            point: Center of the search.
            category: Category to search for.
            limit: Maximum number of results.

        Returns:
            At most ``limit`` places; empty when nothing matches.

        Raises:
            POISearchError: If the lookup itself failed.
        """
        ...
