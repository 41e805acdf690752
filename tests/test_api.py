"""Tests for the synchronous one-liner API."""

import pytest

import touchgrass
from touchgrass.core.exceptions import ConfigurationError

from conftest import ORIGIN


class TestDetect:
    def test_with_places_client(self, park_client):
        result = touchgrass.detect(ORIGIN.lat, ORIGIN.lng, places=park_client)
        assert result.is_outdoors
        assert result.space_category == touchgrass.SpaceCategory.NATURAL_AREA

    def test_threshold(self, park_client):
        result = touchgrass.detect(ORIGIN.lat, ORIGIN.lng, threshold=99, places=park_client)
        assert not result.is_outdoors

    def test_override_needs_no_api_key(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
        result = touchgrass.detect(ORIGIN.lat, ORIGIN.lng, manual_override=True)
        assert result.confidence == 100

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
        with pytest.raises(ConfigurationError):
            touchgrass.detect(ORIGIN.lat, ORIGIN.lng)


class TestTouchingGrass:
    def test_park(self, park_client):
        assert touchgrass.touching_grass(ORIGIN.lat, ORIGIN.lng, places=park_client).is_touching_grass

    def test_override(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
        result = touchgrass.touching_grass(ORIGIN.lat, ORIGIN.lng, manual_override=True)
        assert result.is_touching_grass


def test_version():
    assert touchgrass.__version__ == "1.0.0"
