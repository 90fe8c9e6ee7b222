"""RouteRefresher — rate limiting, in-flight guard, single-slot handoff."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock

from smart_indicator.geo.models import GeoPoint
from smart_indicator.lookahead.models import Maneuver
from smart_indicator.routing.refresher import RouteRefresher

_A = GeoPoint(1.0, 1.0)
_B = GeoPoint(1.01, 1.01)
_ROUTE = [Maneuver(GeoPoint(1.005, 1.0), "turn-left")]


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _inline(router, clock=None, interval=30.0) -> RouteRefresher:
    return RouteRefresher(router, refresh_interval_s=interval, background=False, _time_fn=clock or _Clock())


def test_first_refresh_runs_and_hands_off():
    router = MagicMock()
    router.fetch_maneuvers.return_value = _ROUTE
    refresher = _inline(router)

    assert refresher.maybe_refresh(_A, _B, have_route=False) is True
    router.fetch_maneuvers.assert_called_once_with(_A, _B)
    assert refresher.take_latest() == tuple(_ROUTE)
    assert refresher.take_latest() is None


def test_refresh_rate_limited_while_route_loaded():
    router = MagicMock()
    router.fetch_maneuvers.return_value = _ROUTE
    clock = _Clock()
    refresher = _inline(router, clock)

    refresher.maybe_refresh(_A, _B, have_route=False)
    clock.now += 10.0
    assert refresher.maybe_refresh(_A, _B, have_route=True) is False
    clock.now += 20.0
    assert refresher.maybe_refresh(_A, _B, have_route=True) is True
    assert router.fetch_maneuvers.call_count == 2


def test_empty_route_retries_immediately():
    router = MagicMock()
    router.fetch_maneuvers.return_value = []
    refresher = _inline(router)

    refresher.maybe_refresh(_A, _B, have_route=False)
    assert refresher.take_latest() == ()
    assert refresher.maybe_refresh(_A, _B, have_route=False) is True


def test_router_exception_yields_empty_route():
    router = MagicMock()
    router.fetch_maneuvers.side_effect = RuntimeError("boom")
    refresher = _inline(router)

    assert refresher.maybe_refresh(_A, _B, have_route=False) is True
    assert refresher.take_latest() == ()
    assert refresher.in_flight is False


def test_no_second_fetch_while_in_flight():
    release = threading.Event()
    router = MagicMock()

    def slow_fetch(start, end):
        release.wait(2.0)
        return _ROUTE

    router.fetch_maneuvers.side_effect = slow_fetch
    refresher = RouteRefresher(router, refresh_interval_s=30.0)

    assert refresher.maybe_refresh(_A, _B, have_route=False) is True
    assert refresher.in_flight is True
    assert refresher.maybe_refresh(_A, _B, have_route=False) is False

    release.set()
    refresher.join()
    assert refresher.in_flight is False
    assert refresher.take_latest() == tuple(_ROUTE)
    assert router.fetch_maneuvers.call_count == 1


def test_newer_result_replaces_unclaimed():
    router = MagicMock()
    first = [Maneuver(GeoPoint(1.0, 1.0), "turn-left")]
    second = [Maneuver(GeoPoint(2.0, 2.0), "turn-right")]
    router.fetch_maneuvers.side_effect = [first, second]
    refresher = _inline(router)

    refresher.maybe_refresh(_A, _B, have_route=False)
    refresher.maybe_refresh(_A, _B, have_route=False)
    assert refresher.take_latest() == tuple(second)
