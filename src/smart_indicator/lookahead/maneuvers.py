"""Maneuver-code parsing and modifier classification."""

from __future__ import annotations

from smart_indicator.lookahead.models import TurnType

# Checked in order; the first match wins.
_EXACT_LEFT = {"slight left": TurnType.SLIGHT_LEFT, "sharp left": TurnType.SHARP_LEFT}
_EXACT_RIGHT = {"slight right": TurnType.SLIGHT_RIGHT, "sharp right": TurnType.SHARP_RIGHT}


def parse_maneuver_code(code: str) -> tuple[str, str | None]:
    """Split ``"type-modifier"`` on the first ``-``.

    Returns ``(type, modifier)``; *modifier* is None when the code has no ``-``.
    """
    maneuver_type, sep, modifier = code.partition("-")
    if not sep:
        return maneuver_type, None
    return maneuver_type, modifier


def classify_modifier(modifier: str | None) -> TurnType:
    """Map a maneuver modifier to a :class:`TurnType` (case-insensitive)."""
    if not modifier:
        return TurnType.STRAIGHT
    m = modifier.strip().lower()

    if m in _EXACT_LEFT:
        return _EXACT_LEFT[m]
    if "left" in m:
        return TurnType.LEFT
    if m in _EXACT_RIGHT:
        return _EXACT_RIGHT[m]
    if "right" in m:
        return TurnType.RIGHT
    return TurnType.STRAIGHT


def classify_maneuver(code: str) -> TurnType:
    """Classify a full ``"type-modifier"`` maneuver code."""
    _, modifier = parse_maneuver_code(code)
    return classify_modifier(modifier)
