"""Three-point bearing-change turn detector with distance hysteresis.

The bearing of the leg p0→p1 is compared with the bearing of p1→p2 over the
last three samples; a change larger than the threshold is a turn.  After a
turn is reported no further turn fires until the vehicle has moved
``hysteresis_m`` away from where it was reported.
"""

from __future__ import annotations

import math

from smart_indicator.config import DetectorConfig
from smart_indicator.detection.models import TurnDetectorState, TurnSignal
from smart_indicator.geo.geodesy import bearing, distance, signed_angle_diff
from smart_indicator.geo.models import PositionSample


class TurnDetector:
    """Classify each new position sample as straight, left, or right.

    The detector itself holds only thresholds; all session state lives in the
    :class:`TurnDetectorState` passed to :meth:`detect`, so one detector can
    serve any number of sessions.

    Args:
        config: Thresholds; defaults to :class:`~smart_indicator.config.DetectorConfig`.
    """

    def __init__(self, config: DetectorConfig | None = None) -> None:
        self.config = config or DetectorConfig()

    def new_state(self) -> TurnDetectorState:
        """Return an empty state for a new tracking session."""
        return TurnDetectorState()

    def detect(
        self,
        state: TurnDetectorState,
        sample: PositionSample,
        speed_kmh: float,
    ) -> TurnSignal:
        """Add *sample* to *state* and return the turn signal for this fix.

        Never raises.  Samples with invalid coordinates are not admitted to the
        history and yield :attr:`TurnSignal.STRAIGHT`, as does a non-finite speed.
        """
        cfg = self.config

        if not sample.location.is_valid():
            return TurnSignal.STRAIGHT

        history = state.history
        history.append(sample)
        while len(history) > cfg.history_size:
            history.popleft()

        if len(history) < cfg.min_history:
            return TurnSignal.STRAIGHT

        if not math.isfinite(speed_kmh) or speed_kmh < cfg.min_speed_kmh:
            return TurnSignal.STRAIGHT

        last = state.last_turn_location
        if last is not None and distance(sample.location, last) < cfg.hysteresis_m:
            return TurnSignal.STRAIGHT

        p0, p1, p2 = history[-3], history[-2], history[-1]
        leg1 = bearing(p0.location, p1.location)
        leg2 = bearing(p1.location, p2.location)
        diff = signed_angle_diff(leg1, leg2)

        if not math.isfinite(diff):
            return TurnSignal.STRAIGHT
        if diff > cfg.turn_threshold_deg:
            state.last_turn_location = sample.location
            return TurnSignal.RIGHT
        if diff < -cfg.turn_threshold_deg:
            state.last_turn_location = sample.location
            return TurnSignal.LEFT
        return TurnSignal.STRAIGHT
