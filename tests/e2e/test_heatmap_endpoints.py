from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from src.application.dtos.prediction_dto import MAX_REQUEST_SAMPLES
from src.infrastructure.database.mongo_database import CURRENT_STATUS_COLLECTION
from src.main.app import create_app
from src.main.container import get_container
from tests.conftest import FixedOccupancySource


@pytest.fixture()
def source() -> FixedOccupancySource:
    return FixedOccupancySource({"canteen": 84, "library": 30})


@pytest.fixture()
def client(monkeypatch, seeded_database, source):
    app = create_app()
    container = get_container()
    container.mongo_database.override(providers.Object(seeded_database))
    container.occupancy_source.override(providers.Object(source))

    with TestClient(app) as test_client:
        yield test_client

    container.occupancy_source.reset_override()
    container.mongo_database.reset_override()


def test_map_data_regenerates_empty_cache(client, source, seeded_database):
    response = client.get("/heatmap/map-data")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["source"] == "stale"
    assert [row["location_id"] for row in body["data"]] == ["canteen", "library"]
    assert body["data"][0]["current_count"] == 84
    assert body["data"][0]["color"] == "#eab308"
    assert body["data"][0]["prediction_method"] == "fallback"
    assert body["data"][0]["predicted_count"] == 84
    assert len(source.calls) == 1
    assert seeded_database.transactions == 1


def test_map_data_serves_fresh_cache(client, source, seeded_database):
    now = datetime.now(timezone.utc)
    seeded_database.get_collection(CURRENT_STATUS_COLLECTION).documents.extend(
        {
            "location_id": location_id,
            "current_count": count,
            "color": None,
            "status_timestamp": now - timedelta(seconds=5),
        }
        for location_id, count in (("canteen", 150), ("library", 10))
    )

    response = client.get("/heatmap/map-data")

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "fresh"
    assert body["data"][0]["current_count"] == 150
    assert body["data"][0]["color"] == "#f97316"
    assert source.calls == []


def test_location_history_endpoint(client):
    client.get("/heatmap/map-data")

    response = client.get("/heatmap/locations/library/history", params={"hours": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Central Library"
    assert body["current"]["count"] == 30
    assert body["history"][0]["occupancy_rate"] == 30
    assert body["hours"] == 2


def test_location_history_unknown_location(client):
    response = client.get("/heatmap/locations/observatory/history")

    assert response.status_code == 404
    assert response.json()["detail"] == "Location with ID observatory not found"


def test_location_history_rejects_out_of_range_window(client):
    response = client.get("/heatmap/locations/library/history", params={"hours": 0})

    assert response.status_code == 422


def test_prediction_endpoint(client):
    start = datetime(2024, 9, 9, 12, 0, tzinfo=timezone.utc)
    payload = {
        "samples": [
            {"timestamp": (start + timedelta(minutes=5 * i)).isoformat(), "value": v}
            for i, v in enumerate([50, 55, 60, 58, 62, 65])
        ],
        "options": {"periods": 5},
    }

    response = client.post("/predictions", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["method"] == "exponential_moving_average"
    assert body["prediction"] == 60
    assert body["confidence"] == "high"


def test_prediction_endpoint_validates_payload(client):
    response = client.post(
        "/predictions",
        json={"samples": [{"timestamp": "2024-09-09T12:00:00Z", "value": -5}]},
    )

    assert response.status_code == 422


def test_prediction_endpoint_rejects_oversized_series(client):
    sample = {"timestamp": "2024-09-09T12:00:00Z", "value": 5}

    response = client.post(
        "/predictions", json={"samples": [sample] * (MAX_REQUEST_SAMPLES + 1)}
    )

    assert response.status_code == 422
