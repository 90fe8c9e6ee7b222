"""Per-fix orchestration of turn detection, lookahead, and behavior logging."""

from smart_indicator.pipeline.engine import ADVISORY_TEXT, IndicatorEngine
from smart_indicator.pipeline.models import IndicatorSnapshot

__all__ = ["ADVISORY_TEXT", "IndicatorEngine", "IndicatorSnapshot"]
