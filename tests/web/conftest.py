"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from smart_indicator.web.app import app


@pytest.fixture
def client():
    """FastAPI test client."""
    with TestClient(app) as c:
        yield c


def make_location_row(
    row_id: int = 1,
    latitude: float = 48.0,
    longitude: float = 11.0,
    timestamp: int = 1_700_000_000_000,
    tag: str | None = "Warning Triggered",
    is_warning_location: bool = True,
) -> dict:
    """Build a fake locations table row dict."""
    return {
        "id": row_id,
        "latitude": latitude,
        "longitude": longitude,
        "timestamp": timestamp,
        "tag": tag,
        "direction": "left" if tag else None,
        "speed": 42.0 if tag else None,
        "distance_to_turn": 80 if tag else None,
        "indicator_on": False if tag else None,
        "warning_latitude": latitude + 0.001 if is_warning_location else None,
        "warning_longitude": longitude if is_warning_location else None,
        "is_warning_location": is_warning_location,
    }
