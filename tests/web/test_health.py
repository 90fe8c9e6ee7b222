"""GET /health and app metadata."""

from __future__ import annotations

from smart_indicator import __version__


def test_health_reports_version(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "version": __version__}


def test_openapi_lists_endpoints(client):
    paths = client.get("/openapi.json").json()["paths"]
    for path in ("/api/locations", "/api/warnings", "/api/warnings/area", "/api/evaluate"):
        assert path in paths
