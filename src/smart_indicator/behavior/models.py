"""Behavior log data models."""

from __future__ import annotations

from dataclasses import dataclass

from smart_indicator.geo.models import GeoPoint

TAG_TURN_DETECTED = "Turn Detected"
TAG_WARNING_TRIGGERED = "Warning Triggered"
TAG_INDICATOR_TOGGLED = "Indicator Toggled"


@dataclass(frozen=True)
class BehaviorEvent:
    """One driver-behavior observation handed to the behavior log sink."""

    location: GeoPoint
    """Vehicle position when the event happened."""

    tag: str
    """One of the ``TAG_*`` constants."""

    direction: str
    """Turn direction label (``"left"``, ``"slight right"``, ``"straight"``...)."""

    speed_kmh: float
    distance_to_turn: int
    """Metres to the maneuver; 0 for events not tied to a maneuver."""

    indicator_on: bool

    warning_location: GeoPoint | None = None
    """Maneuver location for ``"Warning Triggered"`` events."""

    @property
    def is_warning(self) -> bool:
        return self.tag == TAG_WARNING_TRIGGERED
