"""Location fix data model."""

from __future__ import annotations

import math
from dataclasses import dataclass

from smart_indicator.geo.models import GeoPoint, PositionSample


@dataclass(frozen=True)
class LocationFix:
    """One fix from the location source, already unit-converted."""

    latitude: float
    longitude: float

    speed_kmh: float
    """Ground speed in km/h. Clamped to >= 0."""

    heading_deg: float | None
    """Course over ground [0, 360), or None when the source has no bearing."""

    timestamp_ms: int
    """Source timestamp in milliseconds."""

    @property
    def location(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)

    def to_sample(self) -> PositionSample:
        """Return the fix as a :class:`PositionSample` for the turn detector."""
        return PositionSample(
            location=self.location,
            timestamp_ms=self.timestamp_ms,
            bearing=self.heading_deg,
        )

    def is_valid(self) -> bool:
        """Return True if the coordinates and speed are usable."""
        return self.location.is_valid() and math.isfinite(self.speed_kmh)
