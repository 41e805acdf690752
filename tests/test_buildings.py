"""Tests for building / residential heuristics."""

import pytest

from touchgrass.core.models import GeoCoordinates, Place
from touchgrass.places.buildings import (
    find_nearest_building_distance,
    format_distance,
    haversine_distance_m,
    is_likely_building,
    is_likely_residential_area,
    is_outdoor_place_name,
)

from conftest import make_place


class TestIsLikelyBuilding:
    def test_by_type(self):
        assert is_likely_building(Place("p", types=frozenset({"restaurant"})))

    def test_by_name(self):
        assert is_likely_building(Place("p", name="Sunset Apartments"))

    def test_park_is_not_a_building(self):
        assert not is_likely_building(Place("p", name="Maple Park", types=frozenset({"park"})))

    def test_no_signals(self):
        assert not is_likely_building(Place("p"))


class TestIsLikelyResidentialArea:
    def test_by_type(self):
        assert is_likely_residential_area(Place("p", types=frozenset({"neighborhood"})))

    def test_by_name(self):
        assert is_likely_residential_area(Place("p", name="Oak Hill Subdivision"))

    def test_outdoor_typed_place_skips_name_patterns(self):
        place = Place("p", name="Rose Garden Park", types=frozenset({"park"}))
        assert not is_likely_residential_area(place)


class TestOutdoorPlaceName:
    @pytest.mark.parametrize("name", ["Maple Park", "Union Square", "Town Green", "Ball Field"])
    def test_outdoor_names(self, name):
        assert is_outdoor_place_name(name)

    @pytest.mark.parametrize("name", [None, "", "Galleria Mall"])
    def test_not_outdoor(self, name):
        assert not is_outdoor_place_name(name)


class TestDistances:
    def test_haversine_one_degree_of_latitude(self):
        d = haversine_distance_m(GeoCoordinates(0.0, 0.0), GeoCoordinates(1.0, 0.0))
        assert d == pytest.approx(111_195, abs=1)

    def test_haversine_same_point(self):
        p = GeoCoordinates(40.0, -75.0)
        assert haversine_distance_m(p, p) == 0

    def test_nearest_building(self, origin):
        places = [
            make_place("park", "Maple Park", ["park"], north_m=5),
            make_place("cafe", "Corner Cafe", ["cafe"], north_m=40),
            make_place("bank", "First Bank", ["bank"], north_m=80),
        ]
        assert find_nearest_building_distance(origin, places) == pytest.approx(40, abs=0.5)

    def test_nearest_building_none(self, origin):
        places = [make_place("park", "Maple Park", ["park"])]
        assert find_nearest_building_distance(origin, places) is None


class TestFormatDistance:
    def test_meters(self):
        assert format_distance(0.85) == "850m"

    def test_kilometers(self):
        assert format_distance(3.2) == "3km"
