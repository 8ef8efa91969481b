"""End-to-end tests for the midpoint service."""

import asyncio

import pytest

from midway.adapters.places import NullPlacesClient
from midway.adapters.rendering import InMemoryMapSurface
from midway.config import MapConfig
from midway.domain.errors import (
    MissingInputError,
    NoResolvableMidpointError,
    RouteNotFoundError,
)
from midway.domain.models import Coordinate, OutcomeStatus, POICategory, TransportMode
from midway.services import EquidistantResolver, MapSession, MidpointService, POILocator
from midway.services.map_session import MIDPOINT_MARKER_ID, ROUTE_LAYER_ID
from midway.services.midpoint_service import (
    NO_MIDPOINT_NOTICE,
    ROUTE_NOT_FOUND_NOTICE,
)

from tests.fakes import (
    EuclideanOracle,
    FailingOracle,
    FakePlaces,
    FirstCallOnlyOracle,
    GatedOracle,
    RaisingOracle,
    make_poi,
    search_error,
)

A = Coordinate(0.0, 0.0)
B = Coordinate(1.0, 0.0)


class SwitchableOracle(EuclideanOracle):
    def __init__(self) -> None:
        super().__init__()
        self.failing = False

    async def route(self, start, end, mode):
        if self.failing:
            return None
        return await super().route(start, end, mode)


def make_service(oracle, places=None, surface=None, sample_count=100):
    surface = surface or InMemoryMapSurface()
    session = MapSession(surface=surface, config=MapConfig())
    return MidpointService(
        oracle=oracle,
        resolver=EquidistantResolver(oracle, sample_count=sample_count),
        session=session,
        poi_locator=POILocator(places or NullPlacesClient()),
    )


class TestFindMidpoint:
    def test_resolves_and_draws(self):
        places = FakePlaces({POICategory.CAFE: [make_poi("Beans", POICategory.CAFE)]})
        service = make_service(EuclideanOracle(), places)

        outcome = asyncio.run(service.find_midpoint(A, B, TransportMode.WALKING))

        assert outcome.status is OutcomeStatus.RESOLVED
        assert outcome.is_success
        assert outcome.midpoint.point == Coordinate(0.5, 0.0)
        assert outcome.midpoint.mode is TransportMode.WALKING
        assert [p.name for p in outcome.pois] == ["Beans"]

        surface = service.session.surface
        assert list(surface.lines) == [ROUTE_LAYER_ID]
        assert surface.markers[MIDPOINT_MARKER_ID].point == Coordinate(0.5, 0.0)
        assert "poi-0" in surface.markers
        assert surface.bounds.contains(A) and surface.bounds.contains(B)

    def test_mode_accepts_string(self):
        oracle = EuclideanOracle()
        service = make_service(oracle, sample_count=4)
        outcome = asyncio.run(service.find_midpoint(A, B, "Cycling"))
        assert outcome.is_success
        assert oracle.calls[0][2] is TransportMode.CYCLING

    def test_places_searched_around_midpoint(self):
        places = FakePlaces({})
        service = make_service(EuclideanOracle(), places)
        outcome = asyncio.run(service.find_midpoint(A, B))
        assert {call[0] for call in places.calls} == {outcome.midpoint.point}


class TestMissingInput:
    @pytest.mark.parametrize("start,end", [(None, B), (A, None), (None, None)])
    def test_missing_input_mutates_nothing(self, start, end):
        oracle = EuclideanOracle()
        service = make_service(oracle)

        outcome = asyncio.run(service.find_midpoint(start, end))

        assert outcome.status is OutcomeStatus.MISSING_INPUT
        assert outcome.generation == 0
        assert service.session.current_generation == 0
        assert service.session.surface.operations == {}
        assert oracle.calls == []

    def test_strict_raises(self):
        service = make_service(EuclideanOracle())
        with pytest.raises(MissingInputError) as exc_info:
            asyncio.run(service.find_midpoint_strict(A, None))
        assert exc_info.value.missing == ("end",)


class TestRouteFailures:
    def test_oracle_always_failing_leaves_map_untouched(self):
        oracle = SwitchableOracle()
        service = make_service(oracle, sample_count=10)
        first = asyncio.run(service.find_midpoint(A, B))
        before = service.session.snapshot()
        operations = dict(service.session.surface.operations)

        oracle.failing = True
        outcome = asyncio.run(service.find_midpoint(A, Coordinate(2.0, 0.0)))

        assert first.is_success
        assert outcome.status is OutcomeStatus.ROUTE_NOT_FOUND
        assert outcome.notices == (ROUTE_NOT_FOUND_NOTICE,)
        assert service.session.snapshot() == before
        assert service.session.surface.operations == operations

    def test_failing_oracle_on_empty_map(self):
        oracle = FailingOracle()
        service = make_service(oracle)
        outcome = asyncio.run(service.find_midpoint(A, B))
        assert outcome.status is OutcomeStatus.ROUTE_NOT_FOUND
        assert oracle.calls == 1
        assert service.session.snapshot().is_empty

    def test_raising_oracle_is_route_not_found(self):
        service = make_service(RaisingOracle())
        outcome = asyncio.run(service.find_midpoint(A, B))
        assert outcome.status is OutcomeStatus.ROUTE_NOT_FOUND

    def test_no_resolvable_midpoint(self):
        service = make_service(FirstCallOnlyOracle(), sample_count=10)
        outcome = asyncio.run(service.find_midpoint(A, B))
        assert outcome.status is OutcomeStatus.NO_RESOLVABLE_MIDPOINT
        assert outcome.notices == (NO_MIDPOINT_NOTICE,)
        assert service.session.snapshot().is_empty
        assert service.session.surface.operations == {}

    def test_strict_raises_typed_errors(self):
        with pytest.raises(RouteNotFoundError) as exc_info:
            asyncio.run(make_service(FailingOracle()).find_midpoint_strict(A, B, "walking"))
        assert exc_info.value.mode == "walking"

        with pytest.raises(NoResolvableMidpointError):
            asyncio.run(
                make_service(FirstCallOnlyOracle(), sample_count=5).find_midpoint_strict(A, B)
            )

    def test_retry_after_failure_succeeds(self):
        oracle = SwitchableOracle()
        service = make_service(oracle, sample_count=10)
        oracle.failing = True
        assert asyncio.run(service.find_midpoint(A, B)).status is OutcomeStatus.ROUTE_NOT_FOUND
        oracle.failing = False
        assert asyncio.run(service.find_midpoint(A, B)).is_success


class TestPlacesFailures:
    def test_failed_category_becomes_notice(self):
        places = FakePlaces(
            {
                POICategory.CAFE: search_error(POICategory.CAFE),
                POICategory.PARK: [make_poi("Green", POICategory.PARK)],
            }
        )
        service = make_service(EuclideanOracle(), places)

        outcome = asyncio.run(service.find_midpoint(A, B))

        assert outcome.status is OutcomeStatus.RESOLVED
        assert [p.name for p in outcome.pois] == ["Green"]
        assert len(outcome.notices) == 1
        assert "cafe" in outcome.notices[0]
        assert "poi-0" in service.session.surface.markers


class TestOverlappingRequests:
    async def _overlap(self, release_first):
        oracle = GatedOracle()
        service = make_service(oracle, sample_count=10)
        first = asyncio.create_task(service.find_midpoint(A, B))
        second = asyncio.create_task(
            service.find_midpoint(Coordinate(0.0, 1.0), Coordinate(1.0, 1.0))
        )
        for _ in range(3):
            await asyncio.sleep(0)

        order = [(0.0, first), (1.0, second)]
        if release_first == "second":
            order.reverse()
        outcomes = {}
        for latitude, task in order:
            oracle.gate(latitude).set()
            outcomes[latitude] = await task
        return service, outcomes[0.0], outcomes[1.0]

    @pytest.mark.parametrize("release_first", ["first", "second"])
    def test_later_request_wins(self, release_first):
        service, first, second = asyncio.run(self._overlap(release_first))

        assert first.status is OutcomeStatus.STALE
        assert second.status is OutcomeStatus.RESOLVED
        assert second.generation > first.generation

        state = service.session.snapshot()
        assert state.generation == second.generation
        assert state.midpoint == second.midpoint.point
        assert state.midpoint.latitude == 1.0
        surface = service.session.surface
        assert len(surface.lines) == 1
        assert all(c.latitude == 1.0 for c in surface.lines[ROUTE_LAYER_ID].coordinates)

    def test_superseded_request_skips_places_search(self):
        async def scenario():
            oracle = GatedOracle()
            places = FakePlaces({})
            service = make_service(oracle, places, sample_count=10)
            first = asyncio.create_task(service.find_midpoint(A, B))
            second = asyncio.create_task(
                service.find_midpoint(Coordinate(0.0, 1.0), Coordinate(1.0, 1.0))
            )
            for _ in range(3):
                await asyncio.sleep(0)

            oracle.gate(0.0).set()
            stale = await first
            calls_after_first = list(places.calls)
            oracle.gate(1.0).set()
            await second
            return stale, calls_after_first, places.calls

        stale, calls_after_first, all_calls = asyncio.run(scenario())

        assert stale.status is OutcomeStatus.STALE
        assert stale.midpoint is not None
        assert stale.pois == ()
        assert calls_after_first == []
        assert {call[0].latitude for call in all_calls} == {1.0}
