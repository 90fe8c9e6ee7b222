"""Routing collaborator: OSRM client and background route refresh."""

from smart_indicator.routing.osrm import OSRMClient, build_route_url, parse_osrm_steps
from smart_indicator.routing.refresher import RouteRefresher

__all__ = ["OSRMClient", "RouteRefresher", "build_route_url", "parse_osrm_steps"]
