"""Immutable domain models for the meeting-point resolver.

All models are frozen dataclasses with slots. These models have no
external dependencies and represent the core business concepts:
coordinates, routes, sampled candidates, places of interest and the
snapshot of what the map currently shows.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence

from .errors import InvalidRouteError


class TransportMode(Enum):
    """Travel mode used for every duration query of a resolution."""

    DRIVING = "driving"
    WALKING = "walking"
    CYCLING = "cycling"
    TRANSIT = "transit"

    @classmethod
    def parse(cls, value: str | TransportMode) -> TransportMode:
        """Parse a mode name, case-insensitively.

        Raises:
            ValueError: If the name is not a known transport mode.
        """
        if isinstance(value, TransportMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            known = ", ".join(m.value for m in cls)
            raise ValueError(
                f"Unknown transport mode {value!r} (expected one of: {known})"
            ) from None


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A (longitude, latitude) location in decimal degrees."""

    longitude: float
    latitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not (math.isfinite(self.longitude) and math.isfinite(self.latitude)):
            raise ValueError(
                f"Coordinates must be finite, got ({self.longitude}, {self.latitude})"
            )
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )
        if not -90 <= self.latitude <= 90:
            raise ValueError(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )

    @classmethod
    def from_lnglat(cls, pair: Sequence[float]) -> Coordinate:
        """Build from a ``[lng, lat]`` pair as found in GeoJSON."""
        if len(pair) < 2:
            raise ValueError(f"Expected [lng, lat], got {pair!r}")
        return cls(longitude=float(pair[0]), latitude=float(pair[1]))

    def as_lnglat(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)

    def as_latlng(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class Route:
    """A route between two endpoints as reported by the routing provider.

    Attributes:
        geometry: Ordered, non-empty sequence of coordinates
        duration_seconds: Total travel time along the route
        distance_meters: Total length if the provider reports it
    """

    geometry: tuple[Coordinate, ...]
    duration_seconds: float
    distance_meters: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.geometry:
            raise InvalidRouteError("Route geometry must contain at least one coordinate")
        if self.duration_seconds < 0:
            raise ValueError(
                f"Route duration must be non-negative, got {self.duration_seconds}"
            )

    @property
    def start(self) -> Coordinate:
        return self.geometry[0]

    @property
    def end(self) -> Coordinate:
        return self.geometry[-1]

    @property
    def num_points(self) -> int:
        return len(self.geometry)


@dataclass(frozen=True, slots=True)
class Candidate:
    """A sampled route point annotated with travel times from both ends.

    Attributes:
        index: Position of the point in the sample sequence
        point: The sampled coordinate, taken verbatim from the route
        start_duration: Seconds from the start to this point
        end_duration: Seconds from this point to the end
        degraded: True when at least one leg failed and was replaced
            by the configured failure policy
    """

    index: int
    point: Coordinate
    start_duration: float
    end_duration: float
    degraded: bool = False

    @property
    def time_difference(self) -> float:
        return abs(self.start_duration - self.end_duration)

    @property
    def total_time(self) -> float:
        return self.start_duration + self.end_duration


@dataclass(frozen=True, slots=True)
class ResolvedMidpoint:
    """The winning candidate of one resolution pass.

    Attributes:
        candidate: Candidate with the smallest time difference
        route: The A->B route the candidate was sampled from
        mode: Transport mode used for every query
        start: Requested start coordinate
        end: Requested end coordinate
        generation: Generation token of the request that produced it
        candidates_evaluated: Number of candidates that were compared
        degraded_legs: Number of per-candidate legs that failed
    """

    candidate: Candidate
    route: Route
    mode: TransportMode
    start: Coordinate
    end: Coordinate
    generation: int = 0
    candidates_evaluated: int = 0
    degraded_legs: int = 0

    @property
    def point(self) -> Coordinate:
        return self.candidate.point


@dataclass(frozen=True, slots=True)
class RenderingHint:
    """How a marker of a given category is drawn."""

    icon: str
    color: str
    label: str


class POICategory(Enum):
    """Closed set of place categories shown around the midpoint."""

    CAFE = "cafe"
    PARK = "park"
    SHOPPING = "shopping"
    RESTAURANT = "restaurant"
    VENUE = "venue"

    @classmethod
    def from_provider(cls, raw: Optional[str]) -> POICategory:
        """Map a provider's free-text category onto the closed set."""
        if not raw:
            return cls.VENUE
        words = " " + " ".join(_WORD.findall(raw.lower())) + " "
        for phrases, category in _PROVIDER_PHRASES:
            if any(f" {phrase} " in words for phrase in phrases):
                return category
        return cls.VENUE

    @property
    def rendering_hint(self) -> RenderingHint:
        return _RENDERING_HINTS[self]


_WORD = re.compile(r"[^\W\d_]+")

# Matched against whole words; first group wins.
_PROVIDER_PHRASES: tuple[tuple[tuple[str, ...], POICategory], ...] = (
    (("garden center", "garden centre"), POICategory.SHOPPING),
    (("coffee", "cafe", "café", "tearoom", "teahouse"), POICategory.CAFE),
    (("park", "parks", "garden", "gardens", "playground"), POICategory.PARK),
    (
        ("shop", "shops", "shopping", "mall", "store", "boutique", "market", "supermarket"),
        POICategory.SHOPPING,
    ),
    (
        ("restaurant", "food", "bistro", "diner", "pizza", "steakhouse", "brasserie"),
        POICategory.RESTAURANT,
    ),
)

_RENDERING_HINTS: dict[POICategory, RenderingHint] = {
    POICategory.CAFE: RenderingHint(icon="coffee", color="orange", label="Cafe"),
    POICategory.PARK: RenderingHint(icon="tree", color="green", label="Park"),
    POICategory.SHOPPING: RenderingHint(icon="shopping-cart", color="purple", label="Shopping"),
    POICategory.RESTAURANT: RenderingHint(icon="cutlery", color="red", label="Restaurant"),
    POICategory.VENUE: RenderingHint(icon="info-circle", color="gray", label="Venue"),
}

MIDPOINT_HINT = RenderingHint(icon="star", color="blue", label="Meeting point")


@dataclass(frozen=True, slots=True)
class POI:
    """A place of interest near the resolved midpoint.

    Attributes:
        location: Coordinates of the place
        name: Display name
        category: Category from the closed set
        address: Short address (first part of the full place name)
        distance_meters: Distance from the query point, if computed
    """

    location: Coordinate
    name: str
    category: POICategory = POICategory.VENUE
    address: str = ""
    distance_meters: Optional[float] = None


@dataclass(frozen=True, slots=True)
class MapBounds:
    """Axis-aligned bounding box used to frame the map view."""

    south_west: Coordinate
    north_east: Coordinate

    @classmethod
    def around(cls, points: Iterable[Coordinate]) -> MapBounds:
        """Smallest box containing every point.

        Raises:
            ValueError: If no points are given.
        """
        pts = list(points)
        if not pts:
            raise ValueError("Cannot compute bounds of zero points")
        return cls(
            south_west=Coordinate(
                longitude=min(p.longitude for p in pts),
                latitude=min(p.latitude for p in pts),
            ),
            north_east=Coordinate(
                longitude=max(p.longitude for p in pts),
                latitude=max(p.latitude for p in pts),
            ),
        )

    def contains(self, point: Coordinate) -> bool:
        return (
            self.south_west.longitude <= point.longitude <= self.north_east.longitude
            and self.south_west.latitude <= point.latitude <= self.north_east.latitude
        )


@dataclass(frozen=True, slots=True)
class MapVisualState:
    """Immutable snapshot of what the map session currently shows."""

    route_line: Optional[tuple[Coordinate, ...]] = None
    midpoint: Optional[Coordinate] = None
    pois: tuple[POI, ...] = field(default_factory=tuple)
    bounds: Optional[MapBounds] = None
    generation: int = 0

    @property
    def is_empty(self) -> bool:
        return self.route_line is None and self.midpoint is None and not self.pois


class OutcomeStatus(Enum):
    """Terminal status of one end-to-end midpoint request."""

    RESOLVED = "resolved"
    MISSING_INPUT = "missing_input"
    ROUTE_NOT_FOUND = "route_not_found"
    NO_RESOLVABLE_MIDPOINT = "no_resolvable_midpoint"
    STALE = "stale"


@dataclass(frozen=True, slots=True)
class ResolutionOutcome:
    """Result of one midpoint request as seen by the presentation layer.

    Attributes:
        status: How the request ended
        generation: Generation token issued for the request (0 if none)
        midpoint: The resolved midpoint when status is RESOLVED or STALE
        pois: Places found around the midpoint
        notices: Non-fatal, user-visible messages
    """

    status: OutcomeStatus
    generation: int = 0
    midpoint: Optional[ResolvedMidpoint] = None
    pois: tuple[POI, ...] = field(default_factory=tuple)
    notices: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_success(self) -> bool:
        return self.status is OutcomeStatus.RESOLVED
