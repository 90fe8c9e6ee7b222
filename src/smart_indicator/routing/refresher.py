"""RouteRefresher — rate-limited background route fetching with a one-slot handoff."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from smart_indicator.geo.models import GeoPoint
from smart_indicator.lookahead.models import Maneuver

_logger = logging.getLogger(__name__)


class RouteRefresher:
    """Fetches maneuvers off the fix-processing path.

    A refresh is started when the current list is empty or at least
    *refresh_interval_s* seconds have passed since the last one started, and
    never while another fetch is in flight.  The finished list is parked in a
    single slot; :meth:`take_latest` hands it to the consumer, so a newer result
    always replaces an older unclaimed one.

    Parameters
    ----------
    router:
        Object with ``fetch_maneuvers(start, end) -> list[Maneuver]``.  Expected
        to return ``[]`` on failure; any exception it raises is logged and
        treated the same way.
    refresh_interval_s:
        Minimum seconds between refreshes while a route is loaded.
    background:
        Run fetches on a daemon thread (default).  ``False`` fetches inline,
        which tests and offline replays use for determinism.
    _time_fn:
        Callable returning monotonic time (injectable for testing).
    """

    def __init__(
        self,
        router,
        refresh_interval_s: float = 30.0,
        background: bool = True,
        _time_fn: Callable[[], float] = time.monotonic,
    ) -> None:
        self._router = router
        self._interval = refresh_interval_s
        self._background = background
        self._time_fn = _time_fn

        self._lock = threading.Lock()
        self._in_flight = False
        self._last_started: float = float("-inf")
        self._pending: tuple[Maneuver, ...] | None = None
        self._thread: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def in_flight(self) -> bool:
        """True while a fetch is running."""
        with self._lock:
            return self._in_flight

    def is_due(self, have_route: bool) -> bool:
        """Return True if a refresh should start now."""
        if not have_route:
            return True
        return (self._time_fn() - self._last_started) >= self._interval

    def maybe_refresh(self, start: GeoPoint, end: GeoPoint, have_route: bool) -> bool:
        """Start a refresh from *start* to *end* if one is due and none is running.

        Returns True if a fetch was started.
        """
        with self._lock:
            if self._in_flight or not self.is_due(have_route):
                return False
            self._in_flight = True
            self._last_started = self._time_fn()

        if self._background:
            self._thread = threading.Thread(
                target=self._fetch, args=(start, end), daemon=True, name="RouteRefresh"
            )
            self._thread.start()
        else:
            self._fetch(start, end)
        return True

    def take_latest(self) -> tuple[Maneuver, ...] | None:
        """Return the newest finished route and clear the slot, or None if nothing new."""
        with self._lock:
            latest, self._pending = self._pending, None
        return latest

    def join(self, timeout: float = 2.0) -> None:
        """Wait for an in-flight background fetch to finish."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout=timeout)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _fetch(self, start: GeoPoint, end: GeoPoint) -> None:
        try:
            maneuvers = self._router.fetch_maneuvers(start, end)
        except Exception:
            _logger.exception("Route fetch failed")
            maneuvers = []

        with self._lock:
            self._pending = tuple(maneuvers)
            self._in_flight = False
        _logger.debug("Route refresh finished with %d maneuver(s)", len(maneuvers))
