"""Mapbox Directions duration oracle.

Queries the Mapbox Directions API v5 with GeoJSON geometries and
turns the first returned route into a domain Route. Every transport
or payload problem is logged and reported as "no route", so a failed
per-candidate leg never raises into the resolver.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from ...config import MapboxConfig, RoutingConfig, get_config
from ...domain.errors import ConfigurationError, InvalidRouteError
from ...domain.models import Coordinate, Route, TransportMode
from ...ports.cache import CachePort
from ..cache.memory_cache import InMemoryCache
from ..http_errors import describe_http_error

_PROFILES = {
    TransportMode.DRIVING: "driving",
    TransportMode.WALKING: "walking",
    TransportMode.CYCLING: "cycling",
}


def _format_pair(point: Coordinate) -> str:
    return f"{point.longitude:.6f},{point.latitude:.6f}"


@dataclass
class MapboxDirectionsOracle:
    """Duration oracle backed by the Mapbox Directions API.

    Implements DurationOraclePort. An ``httpx.AsyncClient`` can be
    injected (tests pass one built on ``httpx.MockTransport``); when
    none is given the oracle creates and owns its own client.

    Attributes:
        mapbox: Access token configuration
        config: Routing configuration (base URL, timeout, transit profile)
        cache: Cache of successful routes keyed by profile and endpoints
        client: Optional shared HTTP client
    """

    mapbox: MapboxConfig = field(default_factory=lambda: get_config().mapbox)
    config: RoutingConfig = field(default_factory=lambda: get_config().routing)
    cache: CachePort = field(
        default_factory=lambda: InMemoryCache(name="directions")
    )
    client: Optional[httpx.AsyncClient] = None

    _owns_client: bool = field(default=False, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        if not self.mapbox.has_token:
            raise ConfigurationError(
                "Mapbox access token is required for the directions oracle",
                setting="MIDWAY_MAPBOX_ACCESS_TOKEN",
            )

    def profile_for(self, mode: TransportMode) -> str:
        """Mapbox routing profile for a transport mode."""
        return _PROFILES.get(mode, self.config.transit_profile)

    def _get_client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout_seconds,
            )
            self._owns_client = True
        return self.client

    async def aclose(self) -> None:
        """Close the HTTP client if this oracle created it."""
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None
            self._owns_client = False

    async def __aenter__(self) -> MapboxDirectionsOracle:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def route(
        self,
        start: Coordinate,
        end: Coordinate,
        mode: TransportMode,
    ) -> Optional[Route]:
        """Fetch the first route between two coordinates.

        Args:
            start: Origin coordinate.
            end: Destination coordinate.
            mode: Transport mode, mapped onto a Mapbox profile.

        Returns:
            The route, or None if Mapbox found none or the call failed.
        """
        profile = self.profile_for(mode)
        waypoints = f"{_format_pair(start)};{_format_pair(end)}"
        cache_key = f"{profile}:{waypoints}"

        cached = self.cache.get(cache_key)
        if cached is not None:
            self._logger.debug("Directions cache hit", extra={"key": cache_key})
            return cached

        url = f"{self.config.base_url.rstrip('/')}/directions/v5/mapbox/{profile}/{waypoints}"
        params = {
            "geometries": "geojson",
            "access_token": self.mapbox.access_token,
        }

        try:
            response = await self._get_client().get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            self._logger.warning(
                "Directions request failed",
                extra={
                    "profile": profile,
                    "waypoints": waypoints,
                    "error": describe_http_error(e, self.mapbox.access_token),
                },
            )
            return None
        except ValueError as e:
            self._logger.warning(
                "Directions response is not JSON",
                extra={"profile": profile, "waypoints": waypoints, "error": str(e)},
            )
            return None

        route = self._parse_route(data, profile, waypoints)
        if route is not None:
            self.cache.set(cache_key, route)
        return route

    def _parse_route(
        self,
        data: Any,
        profile: str,
        waypoints: str,
    ) -> Optional[Route]:
        if not isinstance(data, dict):
            self._logger.warning(
                "Directions payload is not an object",
                extra={"profile": profile, "waypoints": waypoints},
            )
            return None

        code = data.get("code", "Ok")
        routes = data.get("routes") or []
        if code != "Ok" or not routes:
            self._logger.info(
                "No route found",
                extra={"profile": profile, "waypoints": waypoints, "code": code},
            )
            return None

        first = routes[0]
        try:
            coordinates = first["geometry"]["coordinates"]
            return Route(
                geometry=tuple(Coordinate.from_lnglat(pair) for pair in coordinates),
                duration_seconds=float(first["duration"]),
                distance_meters=(
                    float(first["distance"]) if first.get("distance") is not None else None
                ),
            )
        except (KeyError, TypeError, ValueError, InvalidRouteError) as e:
            self._logger.warning(
                "Malformed route in directions payload",
                extra={"profile": profile, "waypoints": waypoints, "error": str(e)},
            )
            return None
