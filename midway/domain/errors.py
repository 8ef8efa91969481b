"""Typed domain errors for the meeting-point resolver.

Each failure mode of a resolution has its own error type so callers
can tell a missing input from a missing route or an unresolvable
midpoint, and decide which of them to surface to the user.

All errors inherit from MidwayError and can optionally wrap a root
cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class MidwayError(Exception):
    """Base error for the meeting-point domain.

    All domain-specific errors inherit from this class.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class MissingInputError(MidwayError):
    """Start or end location was not supplied.

    Attributes:
        missing: Names of the missing inputs ("start", "end")
    """

    missing: tuple[str, ...] = ()


@dataclass
class InvalidRouteError(MidwayError):
    """A route has no coordinates to sample from."""


@dataclass
class RouteNotFoundError(MidwayError):
    """The routing provider returned no route for the A->B leg.

    Attributes:
        start: Start coordinate as "lng,lat"
        end: End coordinate as "lng,lat"
        mode: Transport mode that was requested
    """

    start: str = ""
    end: str = ""
    mode: str = ""


@dataclass
class DurationQueryError(MidwayError):
    """A single per-candidate duration query failed.

    Held inside a leg result; the resolver's failure policy decides
    what it means, so it is never raised out of a resolution.
    """

    leg: str = ""


@dataclass
class NoResolvableMidpointError(MidwayError):
    """No candidate could be told apart from the others.

    Attributes:
        candidates_evaluated: How many candidates were compared
    """

    candidates_evaluated: int = 0


@dataclass
class POISearchError(MidwayError):
    """Nearby places lookup failed.

    Attributes:
        category: Category that was being searched
    """

    category: str = ""


@dataclass
class RenderingError(MidwayError):
    """Map rendering or export failed.

    Attributes:
        output_path: Target file if relevant
        renderer_type: Renderer that failed (e.g. "folium")
    """

    output_path: Optional[str] = None
    renderer_type: str = ""


@dataclass
class ConfigurationError(MidwayError):
    """Invalid or incomplete configuration for an adapter.

    Attributes:
        setting: Name of the offending setting
    """

    setting: str = ""
