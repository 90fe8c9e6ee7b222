"""LookaheadEngine — matches the vehicle against upcoming route maneuvers.

Candidates are scanned nearest first.  The first turn ahead of the vehicle is
reported as the *future turn*; the first turn whose ETA falls inside the
speed-adaptive lead time raises the turn-signal warning and ends the scan, so
a farther maneuver can never overwrite a nearer one's warning.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from smart_indicator.behavior.models import TAG_WARNING_TRIGGERED, BehaviorEvent
from smart_indicator.config import LookaheadConfig
from smart_indicator.geo.geodesy import abs_angle_separation, bearing, distance
from smart_indicator.geo.models import GeoPoint
from smart_indicator.lookahead.maneuvers import classify_maneuver
from smart_indicator.lookahead.models import (
    LookaheadOutcome,
    LookaheadResult,
    Maneuver,
    TurnType,
    WarningState,
)

_logger = logging.getLogger(__name__)


def format_warning(turn: TurnType, distance_m: float, eta_s: float) -> str:
    """Return the warning text shown while the indicator is off."""
    return f"⚠️ {turn.label} TURN in {round(distance_m)}m (~{round(eta_s)}s) - Indicator OFF!"


class LookaheadEngine:
    """Find the nearest relevant maneuver ahead and decide on the warning.

    Stateless between calls: the caller owns the :class:`WarningState` and
    passes it back in on the next fix.

    Args:
        config: Radius, angle, and lead-time settings.
    """

    def __init__(self, config: LookaheadConfig | None = None) -> None:
        self.config = config or LookaheadConfig()

    def lead_time_s(self, speed_kmh: float) -> float:
        """ETA cutoff in seconds for *speed_kmh* (shorter at higher speed)."""
        return self.config.lead_time_s(speed_kmh)

    def evaluate(
        self,
        current: GeoPoint,
        heading: float,
        speed_kmh: float,
        maneuvers: Sequence[Maneuver],
        warning_state: WarningState,
        indicator_on: bool = False,
    ) -> LookaheadOutcome:
        """Run one lookahead cycle.

        Args:
            current: Vehicle position.
            heading: Vehicle course in degrees.
            speed_kmh: Vehicle speed.
            maneuvers: Current route maneuvers in route order (may be empty).
            warning_state: State returned by the previous call.
            indicator_on: Whether the driver's turn signal is on.

        Returns:
            A :class:`LookaheadOutcome`.  With invalid position, heading, or
            speed the warning state is returned unchanged with a straight/0
            result and no events.  A ``"Warning Triggered"`` event is emitted
            once per warned maneuver, not on every fix inside its lead window;
            later calls only refresh the warning text.
        """
        cfg = self.config
        result = LookaheadResult()

        if not current.is_valid() or not math.isfinite(heading) or not math.isfinite(speed_kmh):
            _logger.debug("Skipping lookahead for malformed fix %s", current)
            return LookaheadOutcome(warning_state=warning_state, result=result)

        previous_warned = warning_state.warned_location
        state = warning_state
        if previous_warned is not None and distance(current, previous_warned) > cfg.clear_distance_m:
            state = WarningState()

        speed_mps = max(speed_kmh / 3.6, cfg.min_speed_mps)
        candidates = sorted(
            (
                (distance(current, m.location), m)
                for m in maneuvers
                if m.location.is_valid()
            ),
            key=lambda pair: pair[0],
        )

        events: list[BehaviorEvent] = []
        for dist_m, maneuver in candidates:
            if dist_m > cfg.radius_m:
                break

            eta_s = dist_m / speed_mps
            separation = abs_angle_separation(heading, bearing(current, maneuver.location))
            if separation > cfg.behind_angle_deg:
                continue

            turn = classify_maneuver(maneuver.code)
            if not turn.is_turn:
                continue

            if not result.future_direction.is_turn:
                result = LookaheadResult(future_direction=turn, future_distance_m=round(dist_m))

            if not indicator_on and eta_s <= self.lead_time_s(speed_kmh):
                state = WarningState(
                    active_text=format_warning(turn, dist_m, eta_s),
                    warned_location=maneuver.location,
                )
                # One event per warned maneuver, not one per fix
                if maneuver.location != previous_warned:
                    events.append(
                        BehaviorEvent(
                            location=current,
                            tag=TAG_WARNING_TRIGGERED,
                            direction=turn.label,
                            speed_kmh=speed_kmh,
                            distance_to_turn=round(dist_m),
                            indicator_on=indicator_on,
                            warning_location=maneuver.location,
                        )
                    )
                    _logger.info(
                        "Warning: %s turn in %.0f m (ETA %.1f s)", turn.label, dist_m, eta_s
                    )
                break

        return LookaheadOutcome(warning_state=state, result=result, events=events)
