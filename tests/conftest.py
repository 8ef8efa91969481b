"""Fixtures shared by the test suite."""

from __future__ import annotations

import pytest

from midway.adapters.routing import interpolate_line
from midway.config import reset_config
from midway.container import reset_container
from midway.domain.models import Coordinate, Route
from tests.fakes import SECONDS_PER_DEGREE


@pytest.fixture(autouse=True)
def _isolate_globals():
    yield
    reset_container()
    reset_config()


@pytest.fixture
def straight_route() -> Route:
    """101-point straight route from (0, 0) to (1, 0)."""
    return Route(
        geometry=interpolate_line(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0), 100),
        duration_seconds=SECONDS_PER_DEGREE,
    )
