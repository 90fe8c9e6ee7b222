"""OSRMClient and response parsing (httpx mock transport, no network)."""

from __future__ import annotations

import json

import httpx

from smart_indicator.config import RoutingConfig
from smart_indicator.geo.models import GeoPoint
from smart_indicator.routing.osrm import OSRMClient, build_route_url, parse_osrm_steps

_START = GeoPoint(52.5163, 13.3777)
_END = GeoPoint(52.5200, 13.4050)


def _step(lng: float, lat: float, type_: str, modifier: str | None = None) -> dict:
    maneuver = {"location": [lng, lat], "type": type_}
    if modifier is not None:
        maneuver["modifier"] = modifier
    return {"maneuver": maneuver, "distance": 100.0}


def _route_payload(steps: list[dict]) -> str:
    return json.dumps({"code": "Ok", "routes": [{"legs": [{"steps": steps}]}]})


def _client(handler) -> OSRMClient:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return OSRMClient(RoutingConfig(base_url="http://osrm.test"), http_client=http)


# ---------------------------------------------------------------------------
# URL and parsing
# ---------------------------------------------------------------------------


def test_build_route_url_uses_lng_lat_order():
    url = build_route_url("http://osrm.test/", "driving", _START, _END)
    assert url == (
        "http://osrm.test/route/v1/driving/"
        "13.3777,52.5163;13.405,52.52?overview=full&steps=true"
    )


def test_parse_steps():
    payload = _route_payload([
        _step(13.3777, 52.5163, "depart"),
        _step(13.3800, 52.5170, "turn", "slight left"),
        _step(13.4050, 52.5200, "arrive", "right"),
    ])
    maneuvers = parse_osrm_steps(payload)
    assert [m.code for m in maneuvers] == [
        "depart-straight",
        "turn-slight left",
        "arrive-right",
    ]
    assert maneuvers[1].location == GeoPoint(52.5170, 13.3800)


def test_parse_skips_malformed_step():
    payload = _route_payload([
        {"maneuver": {"type": "turn"}},
        _step(13.38, 52.517, "turn", "left"),
    ])
    maneuvers = parse_osrm_steps(payload)
    assert len(maneuvers) == 1
    assert maneuvers[0].code == "turn-left"


def test_parse_invalid_json_returns_empty():
    assert parse_osrm_steps("{not json") == []


def test_parse_no_routes_returns_empty():
    assert parse_osrm_steps(json.dumps({"code": "NoRoute", "routes": []})) == []
    assert parse_osrm_steps(json.dumps({"code": "NoRoute"})) == []


def test_parse_no_legs_or_steps_returns_empty():
    assert parse_osrm_steps(json.dumps({"routes": [{"legs": []}]})) == []
    assert parse_osrm_steps(json.dumps({"routes": [{"legs": [{}]}]})) == []


def test_parse_wrong_shapes_return_empty():
    assert parse_osrm_steps(json.dumps([1, 2, 3])) == []
    assert parse_osrm_steps(json.dumps({"routes": ["oops"]})) == []


def test_parse_objects_where_lists_belong_return_empty():
    assert parse_osrm_steps(json.dumps({"routes": {"x": 1}})) == []
    assert parse_osrm_steps(json.dumps({"routes": [{"legs": {"x": 1}}]})) == []
    assert parse_osrm_steps(json.dumps({"routes": [{"legs": [{"steps": {"x": 1}}]}]})) == []


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


def test_fetch_maneuvers_success():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        return httpx.Response(200, text=_route_payload([_step(13.38, 52.517, "turn", "right")]))

    maneuvers = _client(handler).fetch_maneuvers(_START, _END)
    assert len(maneuvers) == 1
    assert maneuvers[0].code == "turn-right"
    assert "/route/v1/driving/13.3777,52.5163;13.405,52.52" in seen["url"]
    assert "steps=true" in seen["url"]


def test_fetch_http_error_returns_empty():
    client = _client(lambda request: httpx.Response(503, text="busy"))
    assert client.fetch_maneuvers(_START, _END) == []


def test_fetch_empty_body_returns_empty():
    client = _client(lambda request: httpx.Response(200, text="  "))
    assert client.fetch_maneuvers(_START, _END) == []


def test_fetch_network_error_returns_empty():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert _client(handler).fetch_maneuvers(_START, _END) == []


def test_fetch_malformed_route_shape_returns_empty():
    body = json.dumps({"code": "Ok", "routes": {"0": {"legs": []}}})
    client = _client(lambda request: httpx.Response(200, text=body))
    assert client.fetch_maneuvers(_START, _END) == []


def test_default_client_sends_user_agent():
    client = OSRMClient()
    assert client._http.headers["User-Agent"] == "SmartIndicator/1.0"
    client.close()
