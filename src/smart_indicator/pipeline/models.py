"""Observable state produced by the orchestrator on every fix."""

from __future__ import annotations

from dataclasses import dataclass, field

from smart_indicator.behavior.models import BehaviorEvent
from smart_indicator.detection.models import TurnSignal
from smart_indicator.geo.models import GeoPoint
from smart_indicator.lookahead.models import TurnType


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Merged output of one update cycle, for UIs and loggers."""

    location: GeoPoint
    speed_kmh: float
    turn_signal: TurnSignal
    future_direction: TurnType
    future_distance_m: int
    warning_text: str
    warned_location: GeoPoint | None
    indicator_on: bool
    maneuver_count: int
    route_loading: bool
    advisory_warning: str = ""
    events: tuple[BehaviorEvent, ...] = field(default_factory=tuple)

    @property
    def has_warning(self) -> bool:
        return bool(self.warning_text)
