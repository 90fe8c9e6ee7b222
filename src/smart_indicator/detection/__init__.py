"""Real-time turn classification from a trailing window of position fixes."""

from smart_indicator.detection.detector import TurnDetector
from smart_indicator.detection.models import TurnDetectorState, TurnSignal

__all__ = ["TurnDetector", "TurnDetectorState", "TurnSignal"]
