"""Midpoint service - end-to-end meeting point resolution.

Orchestrates one request: route the A->B leg, resolve the equidistant
point, look up places around it and commit everything to the map
session under the request's generation token.

Example:
    >>> service = MidpointService(oracle, resolver, session, locator)
    >>> outcome = await service.find_midpoint(start, end, TransportMode.WALKING)
    >>> outcome.status
    <OutcomeStatus.RESOLVED: 'resolved'>
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..domain.errors import (
    MissingInputError,
    NoResolvableMidpointError,
    RouteNotFoundError,
)
from ..domain.models import (
    Coordinate,
    MapBounds,
    OutcomeStatus,
    ResolutionOutcome,
    ResolvedMidpoint,
    Route,
    TransportMode,
)
from ..ports.routing import DurationOraclePort
from .map_session import MapSession
from .poi_locator import POILocator
from .resolver import EquidistantResolver

MISSING_INPUT_NOTICE = "Please select both a start and an end location."
ROUTE_NOT_FOUND_NOTICE = "Could not find a route between the selected locations."
NO_MIDPOINT_NOTICE = "Could not find an equidistant point."


def _lnglat(point: Coordinate) -> str:
    return f"{point.longitude},{point.latitude}"


@dataclass
class MidpointService:
    """Resolves and displays the fair meeting point of two locations.

    Attributes:
        oracle: Duration oracle used for the A->B route
        resolver: Equidistant point resolver
        session: Map session receiving the result
        poi_locator: Nearby places search
    """

    oracle: DurationOraclePort
    resolver: EquidistantResolver
    session: MapSession
    poi_locator: POILocator

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def find_midpoint(
        self,
        start: Optional[Coordinate],
        end: Optional[Coordinate],
        mode: TransportMode | str = TransportMode.DRIVING,
    ) -> ResolutionOutcome:
        """Resolve the meeting point and update the map.

        Never raises for provider failures; the outcome status says how
        the request ended and the map is left untouched unless the
        status is RESOLVED. Every failed request can be retried with the
        same inputs.

        Args:
            start: Location A, or None if not selected yet.
            end: Location B, or None if not selected yet.
            mode: Transport mode for every duration query.

        Returns:
            A ResolutionOutcome.
        """
        mode = TransportMode.parse(mode)
        try:
            start, end = self._require(start, end)
        except MissingInputError as e:
            self._logger.info("Midpoint request incomplete", extra={"missing": e.missing})
            return ResolutionOutcome(
                status=OutcomeStatus.MISSING_INPUT,
                notices=(MISSING_INPUT_NOTICE,),
            )

        generation = self.session.begin_generation()
        try:
            return await self._resolve(generation, start, end, mode)
        except RouteNotFoundError:
            return ResolutionOutcome(
                status=OutcomeStatus.ROUTE_NOT_FOUND,
                generation=generation,
                notices=(ROUTE_NOT_FOUND_NOTICE,),
            )
        except NoResolvableMidpointError:
            return ResolutionOutcome(
                status=OutcomeStatus.NO_RESOLVABLE_MIDPOINT,
                generation=generation,
                notices=(NO_MIDPOINT_NOTICE,),
            )

    async def find_midpoint_strict(
        self,
        start: Optional[Coordinate],
        end: Optional[Coordinate],
        mode: TransportMode | str = TransportMode.DRIVING,
    ) -> ResolutionOutcome:
        """Like ``find_midpoint`` but raises on failure.

        A STALE outcome is still returned, not raised.

        Raises:
            MissingInputError: If start or end is missing.
            RouteNotFoundError: If no A->B route exists.
            NoResolvableMidpointError: If no candidate had usable durations.
        """
        mode = TransportMode.parse(mode)
        start, end = self._require(start, end)
        generation = self.session.begin_generation()
        return await self._resolve(generation, start, end, mode)

    @staticmethod
    def _require(
        start: Optional[Coordinate], end: Optional[Coordinate]
    ) -> Tuple[Coordinate, Coordinate]:
        missing = tuple(
            name for name, value in (("start", start), ("end", end)) if value is None
        )
        if missing:
            raise MissingInputError(
                f"Missing {' and '.join(missing)} location", missing=missing
            )
        return start, end  # type: ignore[return-value]

    async def _resolve(
        self,
        generation: int,
        start: Coordinate,
        end: Coordinate,
        mode: TransportMode,
    ) -> ResolutionOutcome:
        self._logger.info(
            "Midpoint request started",
            extra={
                "generation": generation,
                "start": _lnglat(start),
                "end": _lnglat(end),
                "mode": mode.value,
            },
        )

        route = await self._fetch_route(start, end, mode)

        report = await self.resolver.evaluate(route, start, end, mode)
        if report.winner is None:
            raise NoResolvableMidpointError(
                "No candidate had usable travel times",
                candidates_evaluated=len(report.candidates),
            )

        midpoint = ResolvedMidpoint(
            candidate=report.winner,
            route=route,
            mode=mode,
            start=start,
            end=end,
            generation=generation,
            candidates_evaluated=len(report.candidates),
            degraded_legs=report.degraded_legs,
        )

        if not self.session.is_current(generation):
            self._logger.info(
                "Midpoint request superseded before places search",
                extra={"generation": generation},
            )
            return ResolutionOutcome(
                status=OutcomeStatus.STALE,
                generation=generation,
                midpoint=midpoint,
            )

        places = await self.poi_locator.locate(midpoint.point)

        bounds = MapBounds.around((start, end, midpoint.point))
        committed = self.session.apply(
            generation,
            route.geometry,
            midpoint.point,
            places.pois,
            bounds,
        )
        status = OutcomeStatus.RESOLVED if committed else OutcomeStatus.STALE

        self._logger.info(
            "Midpoint request finished",
            extra={"generation": generation, "status": status.value},
        )
        return ResolutionOutcome(
            status=status,
            generation=generation,
            midpoint=midpoint,
            pois=places.pois,
            notices=places.notices,
        )

    async def _fetch_route(
        self, start: Coordinate, end: Coordinate, mode: TransportMode
    ) -> Route:
        try:
            route = await self.oracle.route(start, end, mode)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._logger.warning(
                "Route lookup raised",
                extra={"mode": mode.value, "error": str(e)},
            )
            raise RouteNotFoundError(
                "Route lookup failed",
                start=_lnglat(start),
                end=_lnglat(end),
                mode=mode.value,
                cause=e,
            )

        if route is None:
            self._logger.warning(
                "No route between locations",
                extra={"start": _lnglat(start), "end": _lnglat(end), "mode": mode.value},
            )
            raise RouteNotFoundError(
                "No route between the selected locations",
                start=_lnglat(start),
                end=_lnglat(end),
                mode=mode.value,
            )
        return route
