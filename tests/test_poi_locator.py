"""Tests for the nearby places locator."""

import asyncio

import httpx

from midway.adapters.places import MapboxPlacesClient
from midway.config import MapboxConfig, PlacesConfig
from midway.domain.models import Coordinate, POICategory
from midway.services.poi_locator import NO_PLACES_NOTICE, POILocator

from tests.fakes import FakePlaces, make_poi, search_error

MID = Coordinate(0.5, 0.0)


def test_queries_every_category_with_limit():
    places = FakePlaces({})
    locator = POILocator(places, limit=3)

    result = asyncio.run(locator.locate(MID))

    assert result.pois == ()
    assert result.notices == (NO_PLACES_NOTICE,)
    assert [call[1] for call in places.calls] == [
        POICategory.CAFE,
        POICategory.PARK,
        POICategory.SHOPPING,
    ]
    assert all(call[0] == MID and call[2] == 3 for call in places.calls)


def test_results_ordered_by_category_then_provider():
    places = FakePlaces(
        {
            POICategory.SHOPPING: [make_poi("Mall", POICategory.SHOPPING, lng=0.6)],
            POICategory.CAFE: [
                make_poi("Beans", POICategory.CAFE, lng=0.51),
                make_poi("Brew", POICategory.CAFE, lng=0.52),
            ],
            POICategory.PARK: [make_poi("Green", POICategory.PARK, lng=0.53)],
        }
    )
    result = asyncio.run(POILocator(places).locate(MID))
    assert [p.name for p in result.pois] == ["Beans", "Brew", "Green", "Mall"]


def test_truncates_per_category():
    many = [make_poi(f"Cafe {i}", POICategory.CAFE, lng=0.5 + i / 1000) for i in range(8)]
    places = FakePlaces({POICategory.CAFE: many})
    result = asyncio.run(POILocator(places, categories=(POICategory.CAFE,), limit=2).locate(MID))
    assert [p.name for p in result.pois] == ["Cafe 0", "Cafe 1"]


def test_duplicates_dropped():
    shared = make_poi("Park Cafe", POICategory.CAFE, lng=0.55)
    places = FakePlaces({POICategory.CAFE: [shared], POICategory.PARK: [shared]})
    result = asyncio.run(POILocator(places).locate(MID))
    assert [p.name for p in result.pois] == ["Park Cafe"]


def test_failures_become_notices():
    places = FakePlaces(
        {
            POICategory.CAFE: search_error(POICategory.CAFE),
            POICategory.PARK: RuntimeError("socket closed"),
            POICategory.SHOPPING: [make_poi("Mall", POICategory.SHOPPING)],
        }
    )
    result = asyncio.run(POILocator(places).locate(MID))

    assert [p.name for p in result.pois] == ["Mall"]
    assert len(result.notices) == 2
    assert "cafe" in result.notices[0]
    assert "park" in result.notices[1]


def test_from_config():
    locator = POILocator.from_config(
        FakePlaces({}), PlacesConfig(categories=("park", "restaurant"), limit=7)
    )
    assert locator.categories == (POICategory.PARK, POICategory.RESTAURANT)
    assert locator.limit == 7


def test_empty_results_after_a_failure_only_report_the_failure():
    places = FakePlaces({POICategory.CAFE: search_error(POICategory.CAFE)})
    result = asyncio.run(POILocator(places).locate(MID))
    assert result.pois == ()
    assert result.notices == ("Could not find nearby points of interest (cafe).",)


def test_rejected_token_stays_out_of_logs(caplog):
    token = "pk.SECRET123"
    client = MapboxPlacesClient(
        mapbox=MapboxConfig(access_token=token),
        config=PlacesConfig(),
        base_url="https://api.mapbox.com",
        client=httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(401))
        ),
    )
    caplog.set_level("DEBUG", logger="midway")

    result = asyncio.run(POILocator(client, categories=(POICategory.CAFE,)).locate(MID))

    assert len(result.notices) == 1
    records = [r for r in caplog.records if r.name.startswith("midway")]
    assert records
    for record in records:
        assert token not in record.getMessage()
        assert token not in str(record.__dict__)
