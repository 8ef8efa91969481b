"""Mapbox place search client.

Searches points of interest of one category around a point with the
Mapbox Geocoding API (``mapbox.places`` endpoint, ``types=poi``) and
converts features into domain POIs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
from geopy.distance import geodesic

from ...config import MapboxConfig, PlacesConfig, get_config
from ...domain.errors import ConfigurationError, POISearchError
from ...domain.models import POI, Coordinate, POICategory
from ..http_errors import describe_http_error

_SEARCH_TERMS = {
    POICategory.CAFE: "cafe",
    POICategory.PARK: "park",
    POICategory.SHOPPING: "shopping",
    POICategory.RESTAURANT: "restaurant",
    POICategory.VENUE: "poi",
}


@dataclass
class MapboxPlacesClient:
    """Places search backed by the Mapbox Geocoding API.

    Implements PlacesPort.

    Attributes:
        mapbox: Access token configuration
        config: Places configuration (timeout)
        base_url: API root, shared with the directions oracle
        client: Optional shared HTTP client
    """

    mapbox: MapboxConfig = field(default_factory=lambda: get_config().mapbox)
    config: PlacesConfig = field(default_factory=lambda: get_config().places)
    base_url: str = field(default_factory=lambda: get_config().routing.base_url)
    client: Optional[httpx.AsyncClient] = None

    _owns_client: bool = field(default=False, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        if not self.mapbox.has_token:
            raise ConfigurationError(
                "Mapbox access token is required for places search",
                setting="MIDWAY_MAPBOX_ACCESS_TOKEN",
            )

    def _get_client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=self.config.timeout_seconds)
            self._owns_client = True
        return self.client

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None
            self._owns_client = False

    async def find_nearby(
        self,
        point: Coordinate,
        category: POICategory,
        limit: int,
    ) -> List[POI]:
        """Search places of one category around a point.

        Args:
            point: Proximity bias for the search.
            category: Category to search for.
            limit: Maximum number of places to return.

        Returns:
            Up to ``limit`` places, nearest-first as ranked by Mapbox.

        Raises:
            POISearchError: If the request or the payload is unusable.
        """
        if limit <= 0:
            return []

        term = _SEARCH_TERMS[category]
        url = f"{self.base_url.rstrip('/')}/geocoding/v5/mapbox.places/{term}.json"
        params: Dict[str, Any] = {
            "proximity": f"{point.longitude},{point.latitude}",
            "types": "poi",
            "limit": limit,
            "access_token": self.mapbox.access_token,
        }

        try:
            response = await self._get_client().get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            reason = describe_http_error(e, self.mapbox.access_token)
            raise POISearchError(
                f"Places search for {category.value} failed ({reason})",
                category=category.value,
                cause=e,
            )

        if not isinstance(data, dict):
            raise POISearchError(
                "Places payload is not an object", category=category.value
            )

        pois: List[POI] = []
        for feature in data.get("features") or []:
            poi = self._parse_feature(feature, point, category)
            if poi is not None:
                pois.append(poi)
            if len(pois) >= limit:
                break

        self._logger.debug(
            "Places search completed",
            extra={"category": category.value, "results": len(pois)},
        )
        return pois

    def _parse_feature(
        self,
        feature: Any,
        origin: Coordinate,
        requested: POICategory,
    ) -> Optional[POI]:
        try:
            location = Coordinate.from_lnglat(feature["center"])
            name = str(feature.get("text") or "").strip()
        except (KeyError, TypeError, ValueError) as e:
            self._logger.debug("Skipping malformed place feature", extra={"error": str(e)})
            return None
        if not name:
            return None

        properties = feature.get("properties") or {}
        raw_category = properties.get("category")
        category = POICategory.from_provider(raw_category) if raw_category else requested

        address = properties.get("address")
        if not address:
            place_name = feature.get("place_name") or ""
            address = place_name.split(",")[0].strip()

        return POI(
            location=location,
            name=name,
            category=category,
            address=str(address),
            distance_meters=geodesic(origin.as_latlng(), location.as_latlng()).meters,
        )
