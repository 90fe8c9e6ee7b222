"""LocationParser: key aliases, unit conversion, flags, sanitisation."""

from __future__ import annotations

import pytest

from smart_indicator.location.parser import LocationParser


def _parser() -> LocationParser:
    return LocationParser(_time_fn=lambda: 12.5)


def test_android_style_fix():
    fix = _parser().parse(
        {"latitude": 48.1, "longitude": 11.5, "speed": 10.0, "bearing": 92.5, "time": 1_700_000_000_000}
    )
    assert fix.latitude == 48.1
    assert fix.longitude == 11.5
    assert fix.speed_kmh == pytest.approx(36.0)
    assert fix.heading_deg == 92.5
    assert fix.timestamp_ms == 1_700_000_000_000


def test_short_key_aliases():
    fix = _parser().parse({"lat": "48.1", "lng": "11.5", "speed_kmh": "50"})
    assert fix.latitude == 48.1
    assert fix.longitude == 11.5
    assert fix.speed_kmh == 50.0


def test_speed_kmh_takes_precedence():
    fix = _parser().parse({"lat": 1.0, "lon": 2.0, "speed": 10.0, "speed_kmh": 20.0})
    assert fix.speed_kmh == 20.0


def test_missing_speed_is_zero():
    fix = _parser().parse({"lat": 1.0, "lon": 2.0})
    assert fix.speed_kmh == 0.0


def test_has_speed_false_ignores_speed():
    fix = _parser().parse({"lat": 1.0, "lon": 2.0, "speed": 10.0, "hasSpeed": "false"})
    assert fix.speed_kmh == 0.0


def test_negative_and_nan_speed_clamped():
    assert _parser().parse({"lat": 1.0, "lon": 2.0, "speed": -3.0}).speed_kmh == 0.0
    assert _parser().parse({"lat": 1.0, "lon": 2.0, "speed": "nan"}).speed_kmh == 0.0


def test_heading_normalized():
    fix = _parser().parse({"lat": 1.0, "lon": 2.0, "heading": -90.0})
    assert fix.heading_deg == 270.0


def test_heading_absent_or_flagged_off():
    assert _parser().parse({"lat": 1.0, "lon": 2.0}).heading_deg is None
    fix = _parser().parse({"lat": 1.0, "lon": 2.0, "bearing": 45.0, "hasBearing": False})
    assert fix.heading_deg is None
    assert _parser().parse({"lat": 1.0, "lon": 2.0, "bearing": "inf"}).heading_deg is None


def test_timestamp_falls_back_to_clock():
    fix = _parser().parse({"lat": 1.0, "lon": 2.0})
    assert fix.timestamp_ms == 12_500


def test_missing_coordinates_raise():
    with pytest.raises(ValueError):
        _parser().parse({"lat": 1.0})
    with pytest.raises(ValueError):
        _parser().parse({"lat": "", "lon": 2.0})


def test_non_finite_coordinates_raise():
    with pytest.raises(ValueError):
        _parser().parse({"lat": float("nan"), "lon": 2.0})


def test_non_dict_raises_type_error():
    with pytest.raises(TypeError):
        _parser().parse([1.0, 2.0])


def test_to_sample_carries_heading():
    fix = _parser().parse({"lat": 1.0, "lon": 2.0, "bearing": 10.0, "time": 5})
    sample = fix.to_sample()
    assert sample.location == fix.location
    assert sample.bearing == 10.0
    assert sample.timestamp_ms == 5
