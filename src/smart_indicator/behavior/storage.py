"""BehaviorLogStorage — persists positions and driver-behavior events to SQLite.

Schema notes:
  - One ``locations`` table holds both plain track points (``tag IS NULL``) and
    behavior events, so a session can be replayed in time order with one query.
  - ``is_warning_location`` is indexed: the saved-warnings views only ever read
    that subset.
  - ``timestamp`` is wall-clock epoch milliseconds.
"""

from __future__ import annotations

import sqlite3

from smart_indicator.behavior.models import BehaviorEvent
from smart_indicator.geo.models import GeoPoint

_DDL = """
PRAGMA journal_mode = WAL;
PRAGMA synchronous  = NORMAL;

CREATE TABLE IF NOT EXISTS locations (
    id                  INTEGER PRIMARY KEY,
    latitude            REAL    NOT NULL,
    longitude           REAL    NOT NULL,
    timestamp           INTEGER NOT NULL,
    tag                 TEXT,
    direction           TEXT,
    speed               REAL,
    distance_to_turn    INTEGER,
    indicator_on        INTEGER,
    warning_latitude    REAL,
    warning_longitude   REAL,
    is_warning_location INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_locations_timestamp
    ON locations (timestamp);

CREATE INDEX IF NOT EXISTS idx_locations_warning
    ON locations (is_warning_location, latitude, longitude);
"""

_INSERT = """
INSERT INTO locations (
    latitude, longitude, timestamp, tag, direction, speed,
    distance_to_turn, indicator_on, warning_latitude, warning_longitude,
    is_warning_location
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""

_SELECT_COLUMNS = """
SELECT id, latitude, longitude, timestamp, tag, direction, speed,
       distance_to_turn, indicator_on, warning_latitude, warning_longitude,
       is_warning_location
FROM   locations
"""


def _row_to_dict(row: sqlite3.Row) -> dict:
    d = dict(row)
    if d["indicator_on"] is not None:
        d["indicator_on"] = bool(d["indicator_on"])
    d["is_warning_location"] = bool(d["is_warning_location"])
    return d


class BehaviorLogStorage:
    """Stores and retrieves logged positions and behavior events.

    The connection belongs to the thread that created the instance; use
    :class:`~smart_indicator.behavior.sink.BehaviorLogWriter` to write from a
    fix-processing loop without blocking it.

    Parameters
    ----------
    db_path:
        Path to the SQLite file.  Pass ``":memory:"`` for in-process testing.
    batch_size:
        Rows buffered before an automatic flush.  Reads always flush first.
    """

    def __init__(self, db_path: str = "indicator.db", batch_size: int = 50) -> None:
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        for stmt in _DDL.strip().split(";"):
            stmt = stmt.strip()
            if stmt:
                self._conn.execute(stmt)
        self._conn.commit()
        self._batch: list[tuple] = []
        self._batch_size = batch_size

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save_position(self, point: GeoPoint, timestamp_ms: int) -> None:
        """Persist a plain track point (no tag)."""
        self._batch.append((
            point.latitude,
            point.longitude,
            timestamp_ms,
            None, None, None, None, None, None, None,
            0,
        ))
        if len(self._batch) >= self._batch_size:
            self._flush()

    def save_event(self, event: BehaviorEvent, timestamp_ms: int) -> None:
        """Persist one behavior event."""
        warn = event.warning_location
        self._batch.append((
            event.location.latitude,
            event.location.longitude,
            timestamp_ms,
            event.tag,
            event.direction,
            event.speed_kmh,
            event.distance_to_turn,
            int(event.indicator_on),
            warn.latitude if warn is not None else None,
            warn.longitude if warn is not None else None,
            int(event.is_warning),
        ))
        if len(self._batch) >= self._batch_size:
            self._flush()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all(self, limit: int | None = None) -> list[dict]:
        """Return all rows, newest first (at most *limit* when given)."""
        self._flush()
        sql = _SELECT_COLUMNS + " ORDER BY timestamp DESC, id DESC"
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)
        return [_row_to_dict(r) for r in self._conn.execute(sql, params).fetchall()]

    def get_warning_locations(self) -> list[dict]:
        """Return every row where a warning was triggered, newest first."""
        self._flush()
        rows = self._conn.execute(
            _SELECT_COLUMNS
            + " WHERE is_warning_location = 1 ORDER BY timestamp DESC, id DESC"
        ).fetchall()
        return [_row_to_dict(r) for r in rows]

    def get_warning_location_count(self) -> int:
        """Return the number of warning rows."""
        self._flush()
        row = self._conn.execute(
            "SELECT COUNT(*) FROM locations WHERE is_warning_location = 1"
        ).fetchone()
        return int(row[0])

    def get_warning_locations_in_area(
        self,
        min_lat: float,
        max_lat: float,
        min_lng: float,
        max_lng: float,
    ) -> list[dict]:
        """Return warning rows whose vehicle position lies inside the bounding box."""
        self._flush()
        rows = self._conn.execute(
            _SELECT_COLUMNS
            + """
            WHERE  is_warning_location = 1
              AND  latitude  BETWEEN ? AND ?
              AND  longitude BETWEEN ? AND ?
            ORDER  BY timestamp DESC, id DESC
            """,
            (min_lat, max_lat, min_lng, max_lng),
        ).fetchall()
        return [_row_to_dict(r) for r in rows]

    def close(self) -> None:
        """Flush buffered writes and close the database connection."""
        self._flush()
        self._conn.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _flush(self) -> None:
        if self._batch:
            self._conn.executemany(_INSERT, self._batch)
            self._conn.commit()
            self._batch.clear()
