"""Driver-behavior log: event model, SQLite storage, and sinks."""

from smart_indicator.behavior.models import (
    TAG_INDICATOR_TOGGLED,
    TAG_TURN_DETECTED,
    TAG_WARNING_TRIGGERED,
    BehaviorEvent,
)
from smart_indicator.behavior.sink import BehaviorLogWriter, NullBehaviorSink
from smart_indicator.behavior.storage import BehaviorLogStorage

__all__ = [
    "TAG_INDICATOR_TOGGLED",
    "TAG_TURN_DETECTED",
    "TAG_WARNING_TRIGGERED",
    "BehaviorEvent",
    "BehaviorLogStorage",
    "BehaviorLogWriter",
    "NullBehaviorSink",
]
