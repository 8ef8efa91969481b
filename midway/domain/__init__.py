"""Domain layer - value types and errors with no external dependencies."""

from .errors import (
    ConfigurationError,
    DurationQueryError,
    InvalidRouteError,
    MidwayError,
    MissingInputError,
    NoResolvableMidpointError,
    POISearchError,
    RenderingError,
    RouteNotFoundError,
)
from .models import (
    MIDPOINT_HINT,
    POI,
    Candidate,
    Coordinate,
    MapBounds,
    MapVisualState,
    OutcomeStatus,
    POICategory,
    RenderingHint,
    ResolutionOutcome,
    ResolvedMidpoint,
    Route,
    TransportMode,
)

__all__ = [
    # Models
    "Coordinate",
    "TransportMode",
    "Route",
    "Candidate",
    "ResolvedMidpoint",
    "POI",
    "POICategory",
    "RenderingHint",
    "MIDPOINT_HINT",
    "MapBounds",
    "MapVisualState",
    "OutcomeStatus",
    "ResolutionOutcome",
    # Errors
    "MidwayError",
    "MissingInputError",
    "InvalidRouteError",
    "RouteNotFoundError",
    "DurationQueryError",
    "NoResolvableMidpointError",
    "POISearchError",
    "RenderingError",
    "ConfigurationError",
]
