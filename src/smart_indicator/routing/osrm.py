"""OSRM route client — fetches turn-by-turn maneuvers between two points.

Uses the public OSRM v1 HTTP API by default; point ``RoutingConfig.base_url``
at a self-hosted instance for anything beyond light testing.  The client never
raises into the caller: every failure is logged and yields an empty list.
"""

from __future__ import annotations

import json
import logging

import httpx

from smart_indicator.config import RoutingConfig
from smart_indicator.geo.models import GeoPoint
from smart_indicator.lookahead.models import Maneuver

_logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def build_route_url(base_url: str, profile: str, start: GeoPoint, end: GeoPoint) -> str:
    """Return the OSRM ``/route/v1`` URL for *start* → *end* with step details."""
    coords = f"{start.longitude},{start.latitude};{end.longitude},{end.latitude}"
    return f"{base_url.rstrip('/')}/route/v1/{profile}/{coords}?overview=full&steps=true"


def parse_osrm_steps(payload: str) -> list[Maneuver]:
    """Parse an OSRM route response into :class:`Maneuver` objects.

    Only the first route's first leg is used.  A step without a ``modifier``
    gets ``"straight"``.  Malformed steps are skipped; a malformed document
    returns ``[]``.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        _logger.error("OSRM response is not valid JSON: %s", exc)
        return []

    if not isinstance(data, dict):
        _logger.error("OSRM response is not a JSON object")
        return []

    routes = data.get("routes") or []
    if not isinstance(routes, list):
        _logger.error("OSRM 'routes' is not a list: %r", type(routes).__name__)
        return []
    if not routes:
        _logger.warning("No routes found in OSRM response (code=%s)", data.get("code"))
        return []

    try:
        legs = routes[0].get("legs") or []
        if not isinstance(legs, list):
            raise TypeError(f"'legs' is {type(legs).__name__}, not list")
        steps = legs[0].get("steps") if legs else None
    except (AttributeError, TypeError) as exc:
        _logger.error("Unexpected OSRM route structure: %r", exc)
        return []

    if not legs:
        _logger.warning("No legs found in OSRM route")
        return []
    if not isinstance(steps, list):
        _logger.warning("No steps found in OSRM leg")
        return []

    maneuvers: list[Maneuver] = []
    for i, step in enumerate(steps):
        try:
            man = step["maneuver"]
            lng, lat = man["location"][0], man["location"][1]
            code = f"{man['type']}-{man.get('modifier', 'straight')}"
            maneuvers.append(Maneuver(location=GeoPoint(float(lat), float(lng)), code=code))
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            _logger.error("Error parsing OSRM step %d: %r", i, exc)
    return maneuvers


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class OSRMClient:
    """Routing collaborator backed by an OSRM server.

    Args:
        config: Server URL, profile, timeout, and User-Agent.
        http_client: Optional pre-built :class:`httpx.Client` (tests inject one
            with a mock transport).
    """

    def __init__(
        self,
        config: RoutingConfig | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.config = config or RoutingConfig()
        self._http = http_client or httpx.Client(
            timeout=self.config.timeout_s,
            headers={"User-Agent": self.config.user_agent},
        )

    def fetch_maneuvers(self, start: GeoPoint, end: GeoPoint) -> list[Maneuver]:
        """Return the maneuvers from *start* to *end*, or ``[]`` on any failure."""
        url = build_route_url(self.config.base_url, self.config.profile, start, end)
        try:
            response = self._http.get(url)
        except httpx.HTTPError as exc:
            _logger.error("Network error for %s: %s", url, exc)
            return []

        if not response.is_success:
            _logger.error("HTTP error %d for %s", response.status_code, url)
            return []

        body = response.text
        if not body.strip():
            _logger.error("Empty response body for %s", url)
            return []

        maneuvers = parse_osrm_steps(body)
        _logger.info("Fetched %d maneuver(s) from OSRM", len(maneuvers))
        return maneuvers

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()
