"""Great-circle math on a spherical Earth.

Pure functions, no state.  Bearings are degrees clockwise from true north in
``[0, 360)``; signed differences are in ``(-180, 180]``.
"""

from __future__ import annotations

import math

from smart_indicator.geo.models import GeoPoint

EARTH_RADIUS_M = 6_371_000.0


def normalize_bearing(degrees: float) -> float:
    """Wrap *degrees* into ``[0, 360)``."""
    wrapped = degrees % 360.0
    # -1e-15 % 360.0 rounds to 360.0
    if wrapped >= 360.0:
        return 0.0
    return wrapped


def distance(a: GeoPoint, b: GeoPoint) -> float:
    """Haversine distance between *a* and *b* in metres."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # h can drift a hair above 1.0 for antipodal points
    h = min(h, 1.0)
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def bearing(origin: GeoPoint, target: GeoPoint) -> float:
    """Initial great-circle bearing from *origin* to *target* in ``[0, 360)``.

    Returns 0.0 when the two points coincide.
    """
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(target.latitude)
    d_lon = math.radians(target.longitude - origin.longitude)
    y = math.sin(d_lon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon)
    return normalize_bearing(math.degrees(math.atan2(y, x)))


def signed_angle_diff(b1: float, b2: float) -> float:
    """Shortest signed rotation from *b1* to *b2* in ``(-180, 180]``.

    Positive means clockwise (a right turn when both are headings).
    """
    diff = (b2 - b1) % 360.0
    if diff > 180.0:
        diff -= 360.0
    return diff


def abs_angle_separation(heading: float, target_bearing: float) -> float:
    """Unsigned angle between *heading* and *target_bearing* in ``[0, 180]``."""
    diff = abs(heading - target_bearing) % 360.0
    if diff > 180.0:
        return 360.0 - diff
    return diff


def destination_point(origin: GeoPoint, bearing_deg: float, distance_m: float) -> GeoPoint:
    """Point reached by travelling *distance_m* from *origin* along *bearing_deg*."""
    lat1 = math.radians(origin.latitude)
    lon1 = math.radians(origin.longitude)
    theta = math.radians(bearing_deg)
    delta = distance_m / EARTH_RADIUS_M

    lat2 = math.asin(
        math.sin(lat1) * math.cos(delta)
        + math.cos(lat1) * math.sin(delta) * math.cos(theta)
    )
    lon2 = lon1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * math.sin(lat2),
    )
    lon_deg = (math.degrees(lon2) + 540.0) % 360.0 - 180.0
    return GeoPoint(latitude=math.degrees(lat2), longitude=lon_deg)
