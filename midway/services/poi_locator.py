"""Nearby places around a resolved midpoint.

Queries every configured category at once and merges the results.
Places are decoration: a failed category yields a notice for the
user, never an error.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Set, Tuple

from ..config import PlacesConfig
from ..domain.errors import POISearchError
from ..domain.models import POI, Coordinate, POICategory
from ..ports.places import PlacesPort

DEFAULT_CATEGORIES = (POICategory.CAFE, POICategory.PARK, POICategory.SHOPPING)
DEFAULT_LIMIT = 5

POI_FAILURE_NOTICE = "Could not find nearby points of interest ({category})."
NO_PLACES_NOTICE = "No places were found near the midpoint. Try a different location."


@dataclass(frozen=True)
class POISearchResult:
    """Merged places and the notices produced while searching."""

    pois: Tuple[POI, ...] = ()
    notices: Tuple[str, ...] = ()


@dataclass
class POILocator:
    """Searches several place categories around a point.

    Attributes:
        places: Places search adapter
        categories: Categories to query, in display order
        limit: Maximum places kept per category
    """

    places: PlacesPort
    categories: Sequence[POICategory] = DEFAULT_CATEGORIES
    limit: int = DEFAULT_LIMIT

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, places: PlacesPort, config: PlacesConfig) -> POILocator:
        return cls(
            places=places,
            categories=tuple(POICategory(c) for c in config.categories),
            limit=config.limit,
        )

    async def locate(self, point: Coordinate) -> POISearchResult:
        """Find places of every category around ``point``.

        Results are grouped by category in configured order, then in
        provider order. A place returned under two categories is kept
        once. An empty result with no failed category carries the
        no-places notice.
        """
        results = await asyncio.gather(
            *(self._search(point, category) for category in self.categories)
        )

        pois: List[POI] = []
        seen: Set[Tuple[str, float, float]] = set()
        failed: List[str] = []
        for category, found in zip(self.categories, results):
            if found is None:
                failed.append(category.value)
                continue
            for poi in found[: self.limit]:
                key = (poi.name, poi.location.longitude, poi.location.latitude)
                if key in seen:
                    continue
                seen.add(key)
                pois.append(poi)

        notices: Tuple[str, ...] = ()
        if failed:
            notices = tuple(POI_FAILURE_NOTICE.format(category=c) for c in failed)
            self._logger.warning(
                "Places search failed for some categories",
                extra={"categories": failed},
            )
        elif not pois:
            notices = (NO_PLACES_NOTICE,)

        self._logger.info(
            "Places located",
            extra={"pois": len(pois), "failed_categories": len(failed)},
        )
        return POISearchResult(pois=tuple(pois), notices=notices)

    async def _search(
        self, point: Coordinate, category: POICategory
    ) -> Sequence[POI] | None:
        try:
            return await self.places.find_nearby(point, category, self.limit)
        except asyncio.CancelledError:
            raise
        except POISearchError as e:
            self._logger.debug(
                "Places search error",
                extra={"category": category.value, "error": e.message},
            )
            return None
        except Exception as e:
            self._logger.exception(
                "Unexpected places search failure",
                extra={"category": category.value, "error": type(e).__name__},
            )
            return None
