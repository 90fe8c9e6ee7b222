"""Tunable settings for the detector, lookahead engine, routing, and logging.

Every threshold lives here; modules take a config instance and fall back to the
defaults when none is given.  :meth:`IndicatorConfig.from_env` reads overrides
from the environment (call :func:`dotenv.load_dotenv` first in entry points).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass
class DetectorConfig:
    """Turn detector thresholds."""

    history_size: int = 10
    """Samples kept in the sliding window (oldest evicted first)."""

    min_history: int = 3
    """Samples required before any turn can be reported."""

    min_speed_kmh: float = 2.0
    """Below this speed the bearing signal is too noisy to trust."""

    hysteresis_m: float = 30.0
    """No new turn is reported within this radius of the last one."""

    turn_threshold_deg: float = 25.0
    """Bearing change between consecutive legs that counts as a turn."""


@dataclass
class LookaheadConfig:
    """Upcoming-maneuver matching and warning timing."""

    radius_m: float = 300.0
    behind_angle_deg: float = 90.0
    clear_distance_m: float = 10.0
    min_speed_mps: float = 0.1

    fast_speed_kmh: float = 60.0
    fast_lead_s: float = 6.0
    medium_speed_kmh: float = 40.0
    medium_lead_s: float = 8.0
    slow_lead_s: float = 12.0

    def lead_time_s(self, speed_kmh: float) -> float:
        """Return the ETA cutoff (seconds) for *speed_kmh*."""
        if speed_kmh > self.fast_speed_kmh:
            return self.fast_lead_s
        if speed_kmh > self.medium_speed_kmh:
            return self.medium_lead_s
        return self.slow_lead_s


@dataclass
class RoutingConfig:
    """OSRM client and route refresh settings."""

    base_url: str = "https://router.project-osrm.org"
    profile: str = "driving"
    timeout_s: float = 10.0
    user_agent: str = "SmartIndicator/1.0"
    refresh_interval_s: float = 30.0


@dataclass
class IndicatorConfig:
    """Top-level configuration handed to :class:`~smart_indicator.pipeline.engine.IndicatorEngine`."""

    detector: DetectorConfig = field(default_factory=DetectorConfig)
    lookahead: LookaheadConfig = field(default_factory=LookaheadConfig)
    routing: RoutingConfig = field(default_factory=RoutingConfig)

    db_path: str = "indicator.db"
    record_track: bool = True
    """Log every fix as a plain position row in addition to behavior events."""

    @classmethod
    def from_env(cls) -> IndicatorConfig:
        """Build a config from defaults overridden by ``SMART_INDICATOR_*`` variables."""
        cfg = cls()
        cfg.db_path = os.environ.get("SMART_INDICATOR_DB", cfg.db_path)
        cfg.routing.base_url = os.environ.get("SMART_INDICATOR_OSRM_URL", cfg.routing.base_url)
        refresh = os.environ.get("SMART_INDICATOR_ROUTE_REFRESH_S")
        if refresh:
            cfg.routing.refresh_interval_s = float(refresh)
        cfg.validate()
        return cfg

    def validate(self) -> None:
        """Raise ValueError if any setting is out of its usable range."""
        det = self.detector
        if det.min_history < 3:
            raise ValueError("detector.min_history must be >= 3")
        if det.history_size < det.min_history:
            raise ValueError("detector.history_size must be >= detector.min_history")
        if det.turn_threshold_deg <= 0 or det.turn_threshold_deg >= 180:
            raise ValueError("detector.turn_threshold_deg must be in (0, 180)")
        if det.hysteresis_m < 0:
            raise ValueError("detector.hysteresis_m must be >= 0")

        la = self.lookahead
        if la.radius_m <= 0:
            raise ValueError("lookahead.radius_m must be > 0")
        if la.min_speed_mps <= 0:
            raise ValueError("lookahead.min_speed_mps must be > 0")
        if la.fast_speed_kmh < la.medium_speed_kmh:
            raise ValueError("lookahead.fast_speed_kmh must be >= lookahead.medium_speed_kmh")

        if self.routing.refresh_interval_s <= 0:
            raise ValueError("routing.refresh_interval_s must be > 0")
