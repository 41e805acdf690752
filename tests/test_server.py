"""Tests for the FastAPI backend."""

import pytest
from fastapi.testclient import TestClient

from touchgrass.web.server import app, get_places_client

from conftest import ORIGIN, StubPlacesClient


@pytest.fixture
def client_for():
    def _make(places):
        app.dependency_overrides[get_places_client] = lambda: places
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


def body(**extra):
    return {"lat": ORIGIN.lat, "lng": ORIGIN.lng, **extra}


class TestServer:
    def test_health(self, client_for):
        resp = client_for(StubPlacesClient()).get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["ok"] is True

    def test_detect_park(self, client_for, park_client):
        resp = client_for(park_client).post("/api/detect", json=body())
        assert resp.status_code == 200
        data = resp.json()
        assert data["isOutdoors"] is True
        assert data["spaceCategory"] == "NATURAL_AREA"
        assert 85 <= data["confidence"] <= 100

    def test_detect_threshold(self, client_for, park_client):
        resp = client_for(park_client).post("/api/detect", json=body(threshold=99))
        assert resp.json()["isOutdoors"] is False

    def test_detect_override(self, client_for):
        stub = StubPlacesClient()
        resp = client_for(stub).post("/api/detect", json=body(manual_override=True))
        assert resp.json()["confidence"] == 100
        assert stub.calls == []

    def test_detect_backend_failure(self, client_for):
        resp = client_for(StubPlacesClient(fail=RuntimeError("boom"))).post(
            "/api/detect", json=body()
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["confidence"] == 20
        assert data["debugInfo"]["error"] is True

    def test_grass(self, client_for, mall_client):
        resp = client_for(mall_client).post("/api/grass", json=body())
        assert resp.status_code == 200
        assert resp.json()["isTouchingGrass"] is False

    def test_invalid_latitude(self, client_for):
        resp = client_for(StubPlacesClient()).post("/api/detect", json={"lat": 95, "lng": 0})
        assert resp.status_code == 422

    def test_unconfigured_backend(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
        app.dependency_overrides.clear()
        resp = TestClient(app).post("/api/detect", json=body())
        assert resp.status_code == 503

    def test_override_needs_no_api_key(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
        app.dependency_overrides.clear()
        resp = TestClient(app).post("/api/detect", json=body(manual_override=True))
        assert resp.status_code == 200
        data = resp.json()
        assert data["isOutdoors"] is True
        assert data["confidence"] == 100

    def test_grass_override_needs_no_api_key(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
        app.dependency_overrides.clear()
        resp = TestClient(app).post("/api/grass", json=body(manual_override=True))
        assert resp.status_code == 200
        assert resp.json()["isTouchingGrass"] is True
