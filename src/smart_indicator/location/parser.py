"""LocationParser — converts raw location-provider dicts to LocationFix."""

from __future__ import annotations

import math
import time
from collections.abc import Callable

from smart_indicator.geo.geodesy import normalize_bearing
from smart_indicator.location.models import LocationFix

_MPS_TO_KMH = 3.6

# Accepted spellings, first match wins.
_LAT_KEYS = ("latitude", "lat")
_LON_KEYS = ("longitude", "lng", "lon")
_HEADING_KEYS = ("bearing", "heading")
_TIME_KEYS = ("time", "timestamp_ms")


def _sanitize(value: float, lo: float | None, hi: float | None) -> float:
    """Return value clamped to [lo, hi], with NaN/Inf replaced by lo (or 0)."""
    if not math.isfinite(value):
        value = lo if lo is not None else 0.0
    if lo is not None and value < lo:
        value = lo
    if hi is not None and value > hi:
        value = hi
    return value


def _first(raw: dict, keys: tuple[str, ...]):
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _flag(raw: dict, key: str) -> bool:
    """Read an Android-style ``hasX`` flag; absent means True."""
    value = raw.get(key, True)
    if isinstance(value, str):
        return value.strip().lower() not in ("0", "false", "no")
    return bool(value)


class LocationParser:
    """Parses a raw location dict into a :class:`LocationFix`.

    The raw dict follows Android ``Location`` naming: ``latitude``,
    ``longitude``, ``speed`` (m/s), ``bearing`` (degrees), ``time`` (ms), with
    optional ``hasSpeed`` / ``hasBearing`` flags.  ``speed_kmh`` is accepted as
    an already-converted alternative to ``speed``.

    Speed is clamped to >= 0 (non-finite → 0); the heading is wrapped into
    [0, 360) or set to None when absent or non-finite.

    Parameters
    ----------
    _time_fn:
        Clock used when the raw dict has no timestamp (injectable for testing).
    """

    def __init__(self, _time_fn: Callable[[], float] = time.monotonic) -> None:
        self._time_fn = _time_fn

    def parse(self, raw: dict) -> LocationFix:
        """Convert *raw* to a :class:`LocationFix`.

        Raises
        ------
        ValueError
            If latitude or longitude is missing or not a finite number.
        TypeError
            If *raw* is not a dict.
        """
        if not isinstance(raw, dict):
            raise TypeError(f"expected a dict, got {type(raw).__name__}")
        lat_raw = _first(raw, _LAT_KEYS)
        lon_raw = _first(raw, _LON_KEYS)
        if lat_raw is None or lon_raw is None:
            raise ValueError("location fix has no latitude/longitude")
        lat = float(lat_raw)
        lon = float(lon_raw)
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise ValueError(f"non-finite coordinates: {lat}, {lon}")

        if raw.get("speed_kmh") not in (None, ""):
            speed_kmh = _sanitize(float(raw["speed_kmh"]), 0.0, None)
        elif raw.get("speed") not in (None, "") and _flag(raw, "hasSpeed"):
            speed_kmh = _sanitize(float(raw["speed"]) * _MPS_TO_KMH, 0.0, None)
        else:
            speed_kmh = 0.0

        heading: float | None = None
        heading_raw = _first(raw, _HEADING_KEYS)
        if heading_raw is not None and _flag(raw, "hasBearing"):
            value = float(heading_raw)
            if math.isfinite(value):
                heading = normalize_bearing(value)

        time_raw = _first(raw, _TIME_KEYS)
        if time_raw is None:
            timestamp_ms = int(self._time_fn() * 1000)
        else:
            timestamp_ms = int(float(time_raw))

        return LocationFix(
            latitude=lat,
            longitude=lon,
            speed_kmh=speed_kmh,
            heading_deg=heading,
            timestamp_ms=timestamp_ms,
        )
