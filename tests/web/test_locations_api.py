"""GET /api/locations and /api/warnings (mock storage and real SQLite)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from smart_indicator.behavior.models import TAG_WARNING_TRIGGERED, BehaviorEvent
from smart_indicator.behavior.storage import BehaviorLogStorage
from smart_indicator.geo.models import GeoPoint
from tests.web.conftest import make_location_row


def _patch_storage(store: MagicMock):
    return patch("smart_indicator.web.app.BehaviorLogStorage", return_value=store)


def test_locations_empty(client):
    store = MagicMock()
    store.get_all.return_value = []
    with _patch_storage(store):
        resp = client.get("/api/locations")
    assert resp.status_code == 200
    assert resp.json() == {"locations": []}
    store.close.assert_called_once()


def test_locations_with_rows_and_limit(client):
    store = MagicMock()
    store.get_all.return_value = [
        make_location_row(row_id=2, timestamp=2),
        make_location_row(row_id=1, timestamp=1, tag=None, is_warning_location=False),
    ]
    with _patch_storage(store):
        resp = client.get("/api/locations", params={"limit": 2})
    data = resp.json()["locations"]
    store.get_all.assert_called_once_with(limit=2)
    assert [r["id"] for r in data] == [2, 1]
    assert data[0]["tag"] == "Warning Triggered"
    assert data[1]["tag"] is None
    assert data[1]["is_warning_location"] is False


def test_locations_rejects_zero_limit(client):
    resp = client.get("/api/locations", params={"limit": 0})
    assert resp.status_code == 422


def test_warnings_include_count(client):
    store = MagicMock()
    store.get_warning_locations.return_value = [make_location_row()]
    store.get_warning_location_count.return_value = 1
    with _patch_storage(store):
        resp = client.get("/api/warnings")
    data = resp.json()
    assert data["count"] == 1
    assert data["warnings"][0]["warning_latitude"] == 48.001


def test_warnings_in_area_passes_box(client):
    store = MagicMock()
    store.get_warning_locations_in_area.return_value = [make_location_row()]
    params = {"min_lat": 47.0, "max_lat": 49.0, "min_lng": 10.0, "max_lng": 12.0}
    with _patch_storage(store):
        resp = client.get("/api/warnings/area", params=params)
    assert resp.status_code == 200
    assert resp.json()["count"] == 1
    store.get_warning_locations_in_area.assert_called_once_with(47.0, 49.0, 10.0, 12.0)


def test_warnings_in_area_rejects_inverted_box(client):
    params = {"min_lat": 49.0, "max_lat": 47.0, "min_lng": 10.0, "max_lng": 12.0}
    resp = client.get("/api/warnings/area", params=params)
    assert resp.status_code == 422


def test_warnings_from_real_database(client, tmp_path):
    db = str(tmp_path / "indicator.db")
    storage = BehaviorLogStorage(db)
    storage.save_event(
        BehaviorEvent(
            location=GeoPoint(48.0, 11.0),
            tag=TAG_WARNING_TRIGGERED,
            direction="sharp right",
            speed_kmh=25.0,
            distance_to_turn=55,
            indicator_on=False,
            warning_location=GeoPoint(48.0005, 11.0),
        ),
        1000,
    )
    storage.save_position(GeoPoint(48.0, 11.0001), 2000)
    storage.close()

    warnings = client.get("/api/warnings", params={"db": db}).json()
    assert warnings["count"] == 1
    assert warnings["warnings"][0]["direction"] == "sharp right"

    locations = client.get("/api/locations", params={"db": db}).json()["locations"]
    assert [r["timestamp"] for r in locations] == [2000, 1000]
