"""Upcoming-maneuver matching and speed-adaptive turn-signal warnings."""

from smart_indicator.lookahead.engine import LookaheadEngine, format_warning
from smart_indicator.lookahead.maneuvers import (
    classify_maneuver,
    classify_modifier,
    parse_maneuver_code,
)
from smart_indicator.lookahead.models import (
    LookaheadOutcome,
    LookaheadResult,
    Maneuver,
    TurnType,
    WarningState,
)

__all__ = [
    "LookaheadEngine",
    "LookaheadOutcome",
    "LookaheadResult",
    "Maneuver",
    "TurnType",
    "WarningState",
    "classify_maneuver",
    "classify_modifier",
    "format_warning",
    "parse_maneuver_code",
]
