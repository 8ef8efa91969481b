"""Fair meeting point along a travel route.

Given two locations and a transport mode, midway finds the point on
the route between them where travel time from each end is as close to
equal as possible, looks up places nearby and keeps a map in sync with
the latest result.

Entry point for most callers:

    from midway.container import get_container
    from midway.services import MidpointService

    service = get_container().resolve(MidpointService)
    outcome = await service.find_midpoint(start, end, "walking")
"""

__version__ = "0.1.0"
