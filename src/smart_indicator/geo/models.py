"""Geographic data models."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class GeoPoint:
    """Immutable WGS-84 coordinate in decimal degrees."""

    latitude: float
    """Latitude [-90, 90]."""

    longitude: float
    """Longitude [-180, 180]."""

    def is_valid(self) -> bool:
        """Return True if both values are finite and inside their ranges."""
        return (
            math.isfinite(self.latitude)
            and math.isfinite(self.longitude)
            and -90.0 <= self.latitude <= 90.0
            and -180.0 <= self.longitude <= 180.0
        )


@dataclass(frozen=True)
class PositionSample:
    """A position fix as kept in the turn detector's history."""

    location: GeoPoint

    timestamp_ms: int
    """Monotonic timestamp in milliseconds."""

    bearing: float | None = None
    """Reported course over ground in degrees [0, 360), or None when unknown."""
