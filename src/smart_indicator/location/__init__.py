"""Location input: fix model, raw-dict parser, polling stream, and track replay."""

from smart_indicator.location.models import LocationFix
from smart_indicator.location.parser import LocationParser
from smart_indicator.location.replay import ReplayLocationSource
from smart_indicator.location.stream import LocationEvent, LocationEventStream, StreamState

__all__ = [
    "LocationEvent",
    "LocationEventStream",
    "LocationFix",
    "LocationParser",
    "ReplayLocationSource",
    "StreamState",
]
