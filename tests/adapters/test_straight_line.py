"""Tests for the offline straight-line oracle."""

import asyncio

import pytest
from geopy.distance import geodesic

from midway.adapters.routing import StraightLineOracle, interpolate_line
from midway.config import RoutingConfig
from midway.domain.models import Coordinate, TransportMode

A = Coordinate(2.35, 48.85)
B = Coordinate(4.83, 45.76)


def test_interpolate_includes_both_ends():
    points = interpolate_line(A, B, 10)
    assert len(points) == 11
    assert points[0] == A
    assert points[-1] == B


def test_duration_is_geodesic_over_speed():
    oracle = StraightLineOracle(RoutingConfig(walking_speed_mps=2.0, straight_line_segments=20))
    route = asyncio.run(oracle.route(A, B, TransportMode.WALKING))

    meters = geodesic(A.as_latlng(), B.as_latlng()).meters
    assert route.distance_meters == pytest.approx(meters)
    assert route.duration_seconds == pytest.approx(meters / 2.0)
    assert route.num_points == 21


def test_faster_modes_take_less_time():
    oracle = StraightLineOracle(RoutingConfig())

    async def durations():
        return [
            (await oracle.route(A, B, mode)).duration_seconds
            for mode in (TransportMode.WALKING, TransportMode.CYCLING, TransportMode.DRIVING)
        ]

    walking, cycling, driving = asyncio.run(durations())
    assert walking > cycling > driving


def test_same_point_takes_no_time():
    route = asyncio.run(StraightLineOracle(RoutingConfig()).route(A, A, TransportMode.DRIVING))
    assert route.duration_seconds == 0.0


def test_non_positive_speed_yields_none():
    oracle = StraightLineOracle(RoutingConfig(transit_speed_mps=0))
    assert asyncio.run(oracle.route(A, B, TransportMode.TRANSIT)) is None
