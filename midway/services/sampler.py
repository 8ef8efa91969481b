"""Route sampling.

Picks a fixed number of candidate points from a route's coordinate
sequence, uniformly by index position. Sampling is by index, not by
arc length or travel time: stretches of the route with dense geometry
get proportionally more candidates.
"""

from __future__ import annotations

from typing import List, Sequence, TypeVar

from ..domain.errors import InvalidRouteError

DEFAULT_SAMPLE_COUNT = 100

T = TypeVar("T")


def sample_indices(total_points: int, sample_count: int = DEFAULT_SAMPLE_COUNT) -> List[int]:
    """Indices ``floor(i / N * total_points)`` for ``i`` in ``[0, N)``.

    The result is non-decreasing and every index is below
    ``total_points``. When the route has fewer points than samples,
    indices repeat.

    Raises:
        InvalidRouteError: If ``total_points`` is not positive.
        ValueError: If ``sample_count`` is below 1.
    """
    if total_points <= 0:
        raise InvalidRouteError("Cannot sample an empty route")
    if sample_count < 1:
        raise ValueError(f"sample_count must be at least 1, got {sample_count}")
    # Exact integer form of floor(i / N * total).
    return [(i * total_points) // sample_count for i in range(sample_count)]


def sample_route(coordinates: Sequence[T], sample_count: int = DEFAULT_SAMPLE_COUNT) -> List[T]:
    """Select ``sample_count`` representative points along a route.

    Args:
        coordinates: Ordered route coordinates.
        sample_count: Number of points to return.

    Returns:
        Exactly ``sample_count`` points drawn from ``coordinates``, in
        route order. Duplicates are kept.

    Raises:
        InvalidRouteError: If ``coordinates`` is empty.
    """
    return [coordinates[i] for i in sample_indices(len(coordinates), sample_count)]
