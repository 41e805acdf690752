"""Shared test fixtures for the touchgrass test suite."""

import asyncio

import pytest

from touchgrass.core.config import DEFAULT_CONFIG
from touchgrass.core.models import GeoCoordinates, Place

ORIGIN = GeoCoordinates(40.0, -75.0)

# ~1 meter of latitude in degrees
METER = 1 / 111_195


class StubPlacesClient:
    """In-memory places backend.

    ``search_nearby`` returns places carrying the requested type and
    ``search_by_keyword`` returns places whose name contains the keyword.
    ``fail`` is raised from every call; ``timeout_types`` raise
    ``asyncio.TimeoutError`` for those nearby searches only.
    """

    def __init__(self, places=(), fail=None, timeout_types=()):
        self.places = list(places)
        self.fail = fail
        self.timeout_types = set(timeout_types)
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _enter(self, call):
        self.calls.append(call)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
        finally:
            self.in_flight -= 1
        if self.fail is not None:
            raise self.fail

    async def search_nearby(self, coordinates, radius_m, place_type):
        await self._enter(("nearby", place_type))
        if place_type in self.timeout_types:
            raise asyncio.TimeoutError()
        return [p for p in self.places if place_type in p.types]

    async def search_by_keyword(self, coordinates, radius_m, keyword):
        await self._enter(("keyword", keyword))
        return [p for p in self.places if p.name and keyword in p.name.lower()]

    async def get_details(self, place_id):
        await self._enter(("details", place_id))
        return next((p for p in self.places if p.place_id == place_id), None)


def make_place(place_id, name=None, types=(), north_m=0.0, east_m=0.0, viewport=None):
    """A place located ``north_m``/``east_m`` meters from ORIGIN."""
    return Place(
        place_id=place_id,
        name=name,
        types=frozenset(types),
        location=GeoCoordinates(ORIGIN.lat + north_m * METER, ORIGIN.lng + east_m * METER),
        viewport=viewport,
    )


def viewport_around(center, half_deg):
    return (
        GeoCoordinates(center.lat + half_deg, center.lng + half_deg),
        GeoCoordinates(center.lat - half_deg, center.lng - half_deg),
    )


@pytest.fixture
def config():
    return DEFAULT_CONFIG


@pytest.fixture
def origin():
    return ORIGIN


@pytest.fixture
def park_place():
    return make_place("park_1", "Maple Park", ["park", "point_of_interest"], north_m=20)


@pytest.fixture
def mall_place():
    return make_place(
        "mall_1",
        "Galleria Mall",
        ["shopping_mall", "point_of_interest", "establishment"],
        north_m=10,
    )


@pytest.fixture
def park_client(park_place):
    return StubPlacesClient([park_place])


@pytest.fixture
def mall_client(mall_place):
    return StubPlacesClient([mall_place])
