"""Geographic primitives and great-circle math."""

from smart_indicator.geo.geodesy import (
    EARTH_RADIUS_M,
    abs_angle_separation,
    bearing,
    destination_point,
    distance,
    normalize_bearing,
    signed_angle_diff,
)
from smart_indicator.geo.models import GeoPoint, PositionSample

__all__ = [
    "EARTH_RADIUS_M",
    "GeoPoint",
    "PositionSample",
    "abs_angle_separation",
    "bearing",
    "destination_point",
    "distance",
    "normalize_bearing",
    "signed_angle_diff",
]
