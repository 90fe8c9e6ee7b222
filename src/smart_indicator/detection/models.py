"""Turn detector data structures."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum

from smart_indicator.geo.models import GeoPoint, PositionSample


class TurnSignal(str, Enum):
    """Per-fix output of the turn detector."""

    STRAIGHT = "straight"
    LEFT = "left"
    RIGHT = "right"

    @property
    def is_turn(self) -> bool:
        return self is not TurnSignal.STRAIGHT


@dataclass
class TurnDetectorState:
    """Mutable state of one tracking session.

    Only :meth:`~smart_indicator.detection.detector.TurnDetector.detect` writes
    to it; create a fresh instance when a new session starts.
    """

    history: deque[PositionSample] = field(default_factory=deque)
    """Trailing samples, oldest first."""

    last_turn_location: GeoPoint | None = None
    """Where the last left/right was reported (hysteresis anchor)."""

    def reset(self) -> None:
        """Forget history and the hysteresis anchor."""
        self.history.clear()
        self.last_turn_location = None
