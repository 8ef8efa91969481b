"""Services layer - Application orchestration.

Available services:
- EquidistantResolver: Picks the route point with balanced travel times
- MapSession: Owns the map surface and its generation tokens
- POILocator: Nearby places search across categories
- MidpointService: End-to-end meeting point resolution
"""

from .map_session import MapSession
from .midpoint_service import MidpointService
from .poi_locator import POILocator, POISearchResult
from .resolver import (
    EquidistantResolver,
    LegFailurePolicy,
    LegResult,
    ResolutionReport,
)
from .sampler import sample_indices, sample_route

__all__ = [
    "EquidistantResolver",
    "LegFailurePolicy",
    "LegResult",
    "ResolutionReport",
    "MapSession",
    "POILocator",
    "POISearchResult",
    "MidpointService",
    "sample_indices",
    "sample_route",
]
