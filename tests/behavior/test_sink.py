"""BehaviorLogWriter and NullBehaviorSink."""

from __future__ import annotations

from smart_indicator.behavior.models import TAG_WARNING_TRIGGERED, BehaviorEvent
from smart_indicator.behavior.sink import BehaviorLogWriter, NullBehaviorSink
from smart_indicator.behavior.storage import BehaviorLogStorage
from smart_indicator.geo.models import GeoPoint


def _warning_event() -> BehaviorEvent:
    return BehaviorEvent(
        location=GeoPoint(48.0, 11.0),
        tag=TAG_WARNING_TRIGGERED,
        direction="left",
        speed_kmh=35.0,
        distance_to_turn=60,
        indicator_on=False,
        warning_location=GeoPoint(48.0005, 11.0),
    )


def test_null_sink_records_calls():
    sink = NullBehaviorSink()
    event = _warning_event()
    sink.record(event)
    sink.record_position(GeoPoint(1.0, 2.0), 7)
    sink.shutdown()
    assert sink.events == [event]
    assert sink.positions == [(GeoPoint(1.0, 2.0), 7)]


def test_writer_persists_on_shutdown(tmp_path):
    db = str(tmp_path / "behavior.db")
    writer = BehaviorLogWriter(db, _time_fn=lambda: 1_700_000_000.0)
    writer.record(_warning_event())
    writer.record_position(GeoPoint(48.0, 11.0))
    writer.record_position(GeoPoint(48.0, 11.0001), 42)
    writer.shutdown()

    storage = BehaviorLogStorage(db)
    try:
        rows = storage.get_all()
        assert len(rows) == 3
        assert storage.get_warning_location_count() == 1
        assert sorted(r["timestamp"] for r in rows) == [42, 1_700_000_000_000, 1_700_000_000_000]
    finally:
        storage.close()


def test_writer_drops_when_queue_full(tmp_path):
    db = str(tmp_path / "behavior.db")
    writer = BehaviorLogWriter(db, queue_maxsize=1)
    for _ in range(200):
        writer.record_position(GeoPoint(48.0, 11.0), 1)
    writer.shutdown()

    storage = BehaviorLogStorage(db)
    try:
        assert 1 <= len(storage.get_all()) <= 200
    finally:
        storage.close()


def test_writer_survives_unopenable_database(tmp_path):
    # A directory cannot be opened as a SQLite file
    writer = BehaviorLogWriter(str(tmp_path))
    writer.record(_warning_event())
    writer.shutdown()
    assert not writer._thread.is_alive()
