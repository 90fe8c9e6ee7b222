"""Maneuver and lookahead data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from smart_indicator.behavior.models import BehaviorEvent
from smart_indicator.geo.models import GeoPoint


class TurnType(str, Enum):
    """Turn classification of a route maneuver."""

    STRAIGHT = "straight"
    LEFT = "left"
    RIGHT = "right"
    SLIGHT_LEFT = "slight-left"
    SLIGHT_RIGHT = "slight-right"
    SHARP_LEFT = "sharp-left"
    SHARP_RIGHT = "sharp-right"

    @property
    def label(self) -> str:
        """Human-readable form used in warning text and logs (``"slight left"``)."""
        return self.value.replace("-", " ")

    @property
    def is_turn(self) -> bool:
        return self is not TurnType.STRAIGHT


@dataclass(frozen=True)
class Maneuver:
    """A single routing instruction at a geographic trigger point."""

    location: GeoPoint
    code: str
    """``"type-modifier"``, e.g. ``"turn-slight left"`` or ``"depart-straight"``."""


@dataclass(frozen=True)
class WarningState:
    """The active turn-signal warning and where it was raised.

    An empty ``active_text`` means no warning is showing.
    """

    active_text: str = ""
    warned_location: GeoPoint | None = None

    @property
    def is_active(self) -> bool:
        return bool(self.active_text)


@dataclass(frozen=True)
class LookaheadResult:
    """Nearest turn ahead of the vehicle, recomputed every cycle."""

    future_direction: TurnType = TurnType.STRAIGHT
    future_distance_m: int = 0


@dataclass
class LookaheadOutcome:
    """Everything one :meth:`LookaheadEngine.evaluate` call produces."""

    warning_state: WarningState
    result: LookaheadResult
    events: list[BehaviorEvent] = field(default_factory=list)

    @property
    def warning_triggered(self) -> bool:
        return any(e.is_warning for e in self.events)
