"""
Tests for API endpoints.
"""

import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from constellation.main import app
from constellation.services.air_quality import AirQualityClient
from constellation.services.orchestrator import TreasureIngestor
from constellation.services.store import SnapshotStore, init_store
from conftest import FEED_BASE_URL, feed_transport


AIR_QUALITY_URL = "http://air.test/v1/air-quality"


@pytest.fixture
def feed_bodies():
    """Two balloons over a full day, hour 05 broken."""
    bodies = {
        h: json.dumps({
            "balloons": [
                {"id": "A", "position": {"lat": 10 + h * 0.1, "lon": 20.0, "alt": 15000}},
                {"id": "B", "position": {"lat": -5.0, "lon": 100 - h * 0.1}},
            ]
        })
        for h in range(24)
    }
    bodies[5] = httpx.Response(500)
    return bodies


@pytest.fixture
def air_quality_requests():
    """Requests seen by the fake air-quality service."""
    return []


@pytest.fixture
def store(feed_bodies, air_quality_requests):
    """Store wired to offline feed and air-quality fakes."""
    def air_quality_handler(request: httpx.Request) -> httpx.Response:
        air_quality_requests.append(request)
        return httpx.Response(200, json={
            "current": {"us_aqi": 42, "pm2_5": 7.5, "pm10": 11.0, "carbon_monoxide": 180.0},
            "hourly": {"us_aqi": [40, 41]},
        })

    return SnapshotStore(
        ingestor=TreasureIngestor(FEED_BASE_URL, transport=feed_transport(feed_bodies)),
        air_quality=AirQualityClient(AIR_QUALITY_URL, transport=httpx.MockTransport(air_quality_handler)),
    )


@pytest.fixture
def client_with_data(store):
    """Create test client with an ingested snapshot."""
    asyncio.run(store.refresh())
    init_store(store)

    client = TestClient(app)
    yield client


@pytest.fixture
def client_empty(store):
    """Create test client before any ingestion cycle."""
    init_store(store)
    return TestClient(app)


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_root_endpoint(self, client_empty):
        """Root endpoint should return basic info."""
        response = client_empty.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Constellation Tracker"
        assert data["status"] == "running"

    def test_health_before_first_refresh(self, client_empty):
        response = client_empty.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["last_updated"] is None
        assert data["total_tracks"] == 0

    def test_health_with_data(self, client_with_data):
        data = client_with_data.get("/health").json()

        assert data["total_tracks"] == 2
        assert data["total_points"] == 46
        assert data["failed_hours"] == 1


class TestTracksEndpoints:
    """Tests for track endpoints."""

    def test_list_tracks(self, client_with_data):
        """Should list tracks in first-seen order."""
        response = client_with_data.get("/tracks")

        assert response.status_code == 200
        data = response.json()
        assert [t["id"] for t in data] == ["A", "B"]
        assert data[0]["point_count"] == 23
        assert data[0]["newest_hour_index"] == 0
        assert data[0]["newest_lat"] == pytest.approx(10.0)

    def test_first_track_auto_selected(self, client_with_data):
        data = client_with_data.get("/tracks").json()
        assert [t["selected"] for t in data] == [True, False]

    def test_list_before_first_refresh(self, client_empty):
        response = client_empty.get("/tracks")
        assert response.status_code == 503

    def test_get_track(self, client_with_data):
        """Should return points oldest first plus stats."""
        response = client_with_data.get("/tracks/A")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "A"
        hours = [p["hour_index"] for p in data["points"]]
        assert hours == [h for h in range(23, -1, -1) if h != 5]

        stats = data["stats"]
        assert stats["point_count"] == 23
        assert stats["newest"]["hour_index"] == 0
        assert stats["oldest"]["hour_index"] == 23
        assert stats["newest"]["altitude_m"] == 15000
        assert stats["distance_m"] > 0
        assert stats["distance_label"].endswith("km")

    def test_get_track_not_found(self, client_with_data):
        response = client_with_data.get("/tracks/nonexistent_id")
        assert response.status_code == 404

    def test_export_csv(self, client_with_data):
        response = client_with_data.get("/tracks/export.csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.strip().splitlines()
        assert lines[0] == "id,hour_index,lat,lon,altitude_m,timestamp,third_value"
        assert len(lines) == 1 + 46


class TestAirQualityEndpoint:
    """Tests for the air-quality lookup."""

    def test_uses_newest_point(self, client_with_data, air_quality_requests):
        response = client_with_data.get("/tracks/B/air-quality")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["latitude"] == -5.0
        assert data["longitude"] == pytest.approx(100.0)
        assert data["current"]["us_aqi"] == 42
        assert data["current"]["pm2_5"] == 7.5

        params = air_quality_requests[0].url.params
        assert params["latitude"] == "-5.0"
        assert params["current"] == "us_aqi,pm10,pm2_5,carbon_monoxide"
        assert params["timezone"] == "auto"

    def test_lookup_failure_is_reported_in_body(self, client_with_data, store):
        store._air_quality = AirQualityClient(
            AIR_QUALITY_URL,
            transport=httpx.MockTransport(lambda request: httpx.Response(502)),
        )

        response = client_with_data.get("/tracks/A/air-quality")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is False
        assert "HTTP 502" in data["error"]
        assert data["current"] is None

    def test_unknown_track(self, client_with_data):
        response = client_with_data.get("/tracks/nope/air-quality")
        assert response.status_code == 404


class TestIngestionEndpoints:
    """Tests for hour status, refresh and selection."""

    def test_hours(self, client_with_data):
        response = client_with_data.get("/hours")

        assert response.status_code == 200
        data = response.json()
        assert len(data["hours"]) == 24
        assert data["hours"][5]["ok"] is False
        assert data["hours"][5]["error_kind"] == "http"
        assert data["hours"][5]["position_count"] == 0
        assert data["hours"][0]["position_count"] == 2
        assert data["diagnostics"] == [f"Hour 05: HTTP 500 from {FEED_BASE_URL}/05.json"]

    def test_hours_before_first_refresh(self, client_empty):
        data = client_empty.get("/hours").json()
        assert data["hours"] == []
        assert data["diagnostics"] == []

    def test_refresh(self, client_empty):
        response = client_empty.post("/refresh")

        assert response.status_code == 200
        data = response.json()
        assert data["total_tracks"] == 2
        assert data["failed_hours"] == 1
        assert client_empty.get("/tracks").status_code == 200

    def test_selection_round_trip(self, client_with_data):
        assert client_with_data.get("/selection").json() == {"track_id": "A"}

        response = client_with_data.post("/selection", json={"track_id": "B"})
        assert response.status_code == 200
        assert response.json() == {"track_id": "B"}
        assert client_with_data.get("/selection").json() == {"track_id": "B"}

    def test_select_unknown_track(self, client_with_data):
        response = client_with_data.post("/selection", json={"track_id": "Z"})
        assert response.status_code == 404

    def test_clear_selection(self, client_with_data):
        response = client_with_data.post("/selection", json={"track_id": None})
        assert response.json() == {"track_id": None}
