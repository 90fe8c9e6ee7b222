"""IndicatorEngine — sequences turn detection and lookahead for each location fix."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from smart_indicator.behavior.models import (
    TAG_INDICATOR_TOGGLED,
    TAG_TURN_DETECTED,
    BehaviorEvent,
)
from smart_indicator.config import IndicatorConfig
from smart_indicator.detection.detector import TurnDetector
from smart_indicator.detection.models import TurnSignal
from smart_indicator.geo.geodesy import bearing
from smart_indicator.geo.models import GeoPoint
from smart_indicator.location.models import LocationFix
from smart_indicator.lookahead.engine import LookaheadEngine
from smart_indicator.lookahead.models import LookaheadResult, Maneuver, WarningState
from smart_indicator.pipeline.models import IndicatorSnapshot

_logger = logging.getLogger(__name__)

ADVISORY_TEXT = "🤖 AI predicts: You may forget to use indicator!"

# Direction codes the advisory model was trained with.
_DIRECTION_CODES = {TurnSignal.LEFT: 1, TurnSignal.RIGHT: 2}

Advisor = Callable[[float, float, float, int, int], bool]


class IndicatorEngine:
    """Per-fix pipeline: route handoff → turn detector → lookahead → snapshot.

    All session state (detector history, hysteresis anchor, warning state,
    current maneuvers) is owned here and only mutated inside
    :meth:`process_fix`, :meth:`set_indicator`, :meth:`set_maneuvers` and
    :meth:`reset`; call them from a single thread.

    Parameters
    ----------
    config:
        Thresholds for every stage; defaults to :class:`IndicatorConfig`.
    sink:
        Behavior log sink with ``record(event)`` and
        ``record_position(point, timestamp_ms)``.  Optional.
    refresher:
        A :class:`~smart_indicator.routing.refresher.RouteRefresher`.  Optional;
        without one, routes are supplied through :meth:`set_maneuvers`.
    stream:
        A :class:`~smart_indicator.location.stream.LocationEventStream` consumed
        by :meth:`tick`.  Optional.
    advisor:
        Optional callable ``(lat, lng, speed_kmh, direction_code, future_distance)
        -> bool`` predicting that the driver will forget the indicator.
    """

    def __init__(
        self,
        config: IndicatorConfig | None = None,
        sink=None,
        refresher=None,
        stream=None,
        advisor: Advisor | None = None,
    ) -> None:
        self.config = config or IndicatorConfig()
        self._detector = TurnDetector(self.config.detector)
        self._lookahead = LookaheadEngine(self.config.lookahead)
        self._sink = sink
        self._refresher = refresher
        self._stream = stream
        self._advisor = advisor

        self._detector_state = self._detector.new_state()
        self._warning = WarningState()
        self._result = LookaheadResult()
        self._signal = TurnSignal.STRAIGHT
        self._maneuvers: tuple[Maneuver, ...] = ()
        self._destination: GeoPoint | None = None
        self._indicator_on = False
        self._last_fix: LocationFix | None = None

    # ------------------------------------------------------------------
    # Session control
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the location stream, if one was given."""
        if self._stream is not None:
            self._stream.start()

    def stop(self) -> None:
        """Stop the location stream, if one was given."""
        if self._stream is not None:
            self._stream.stop()

    def reset(self) -> None:
        """Start a new tracking session; the route and destination are kept."""
        self._detector_state.reset()
        self._warning = WarningState()
        self._result = LookaheadResult()
        self._signal = TurnSignal.STRAIGHT
        self._last_fix = None

    def set_destination(self, destination: GeoPoint | None) -> None:
        """Set the route destination; the next fix triggers a refresh."""
        self._destination = destination
        self._maneuvers = ()

    def set_maneuvers(self, maneuvers: Sequence[Maneuver]) -> None:
        """Replace the maneuver list wholesale."""
        self._maneuvers = tuple(maneuvers)

    def set_indicator(self, on: bool) -> None:
        """Record the driver's turn-signal state; logs a toggle event on change."""
        if on == self._indicator_on:
            return
        self._indicator_on = on
        fix = self._last_fix
        if fix is not None:
            self._emit(BehaviorEvent(
                location=fix.location,
                tag=TAG_INDICATOR_TOGGLED,
                direction=self._signal.value,
                speed_kmh=fix.speed_kmh,
                distance_to_turn=self._result.future_distance_m,
                indicator_on=on,
            ))

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def turn_signal(self) -> TurnSignal:
        return self._signal

    @property
    def warning_state(self) -> WarningState:
        return self._warning

    @property
    def maneuvers(self) -> tuple[Maneuver, ...]:
        return self._maneuvers

    @property
    def indicator_on(self) -> bool:
        return self._indicator_on

    # ------------------------------------------------------------------
    # Per-fix processing
    # ------------------------------------------------------------------

    def tick(self) -> IndicatorSnapshot | None:
        """Process one fix from the stream; returns None if none was queued."""
        if self._stream is None:
            return None
        event = self._stream.get_event(timeout=0.0)
        if event is None:
            return None
        return self.process_fix(event.fix)

    def process_fix(self, fix: LocationFix) -> IndicatorSnapshot:
        """Run the full pipeline for *fix* and return the merged snapshot."""
        self._merge_route()
        self._request_route(fix)

        if self.config.record_track and fix.is_valid():
            self._emit_position(fix)

        events: list[BehaviorEvent] = []

        previous = self._signal
        self._signal = self._detector.detect(
            self._detector_state, fix.to_sample(), fix.speed_kmh
        )
        if self._signal.is_turn and self._signal is not previous:
            _logger.info("Turn detected: %s at %.1f km/h", self._signal.value, fix.speed_kmh)
            events.append(BehaviorEvent(
                location=fix.location,
                tag=TAG_TURN_DETECTED,
                direction=self._signal.value,
                speed_kmh=fix.speed_kmh,
                distance_to_turn=0,
                indicator_on=self._indicator_on,
            ))

        outcome = self._lookahead.evaluate(
            fix.location,
            self._heading_for(fix),
            fix.speed_kmh,
            self._maneuvers,
            self._warning,
            self._indicator_on,
        )
        self._warning = outcome.warning_state
        self._result = outcome.result
        events.extend(outcome.events)

        for event in events:
            self._emit(event)

        self._last_fix = fix
        return IndicatorSnapshot(
            location=fix.location,
            speed_kmh=fix.speed_kmh,
            turn_signal=self._signal,
            future_direction=self._result.future_direction,
            future_distance_m=self._result.future_distance_m,
            warning_text=self._warning.active_text,
            warned_location=self._warning.warned_location,
            indicator_on=self._indicator_on,
            maneuver_count=len(self._maneuvers),
            route_loading=self._refresher is not None and self._refresher.in_flight,
            advisory_warning=self._advise(fix),
            events=tuple(events),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _merge_route(self) -> None:
        if self._refresher is None:
            return
        latest = self._refresher.take_latest()
        if latest is not None:
            self._maneuvers = latest
            _logger.info("Route updated: %d maneuver(s)", len(latest))

    def _request_route(self, fix: LocationFix) -> None:
        if self._refresher is None or self._destination is None:
            return
        if not fix.location.is_valid():
            return
        self._refresher.maybe_refresh(
            fix.location, self._destination, have_route=bool(self._maneuvers)
        )

    def _heading_for(self, fix: LocationFix) -> float:
        """Reported heading, else the course between the last two samples, else 0."""
        if fix.heading_deg is not None:
            return fix.heading_deg
        history = self._detector_state.history
        if len(history) >= 2 and history[-1].location != history[-2].location:
            return bearing(history[-2].location, history[-1].location)
        return 0.0

    def _advise(self, fix: LocationFix) -> str:
        if self._advisor is None:
            return ""
        try:
            forget = self._advisor(
                fix.latitude,
                fix.longitude,
                fix.speed_kmh,
                _DIRECTION_CODES.get(self._signal, 0),
                self._result.future_distance_m,
            )
        except Exception:
            _logger.exception("Advisory collaborator failed")
            return ""
        return ADVISORY_TEXT if forget else ""

    def _emit(self, event: BehaviorEvent) -> None:
        if self._sink is None:
            return
        try:
            self._sink.record(event)
        except Exception:
            _logger.exception("Behavior sink rejected %s event", event.tag)

    def _emit_position(self, fix: LocationFix) -> None:
        if self._sink is None:
            return
        try:
            self._sink.record_position(fix.location, fix.timestamp_ms)
        except Exception:
            _logger.exception("Behavior sink rejected position")
