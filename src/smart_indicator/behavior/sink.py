"""Behavior log sinks — NullBehaviorSink for tests, BehaviorLogWriter for SQLite."""

from __future__ import annotations

import logging
import queue
import sqlite3
import threading
import time
from collections.abc import Callable

from smart_indicator.behavior.models import BehaviorEvent
from smart_indicator.behavior.storage import BehaviorLogStorage
from smart_indicator.geo.models import GeoPoint

_logger = logging.getLogger(__name__)


class NullBehaviorSink:
    """No-op sink; records calls for test assertions."""

    def __init__(self) -> None:
        self.events: list[BehaviorEvent] = []
        self.positions: list[tuple[GeoPoint, int]] = []

    def record(self, event: BehaviorEvent) -> None:
        self.events.append(event)

    def record_position(self, point: GeoPoint, timestamp_ms: int) -> None:
        self.positions.append((point, timestamp_ms))

    def shutdown(self) -> None:
        """No-op shutdown."""


class BehaviorLogWriter:
    """Fire-and-forget sink that writes to :class:`BehaviorLogStorage` on a daemon thread.

    :meth:`record` and :meth:`record_position` only enqueue; the worker thread
    owns the SQLite connection.  Database errors are logged and the row is
    dropped; they never reach the caller.  When the queue is full new rows are
    dropped rather than blocking the fix-processing loop.

    Parameters
    ----------
    db_path:
        SQLite file to write to.
    batch_size:
        Passed to :class:`BehaviorLogStorage`.
    queue_maxsize:
        Rows buffered between the caller and the worker.
    _time_fn:
        Wall clock in seconds used to timestamp rows (injectable for testing).
    """

    def __init__(
        self,
        db_path: str,
        batch_size: int = 50,
        queue_maxsize: int = 1000,
        _time_fn: Callable[[], float] = time.time,
    ) -> None:
        self._db_path = db_path
        self._batch_size = batch_size
        self._time_fn = _time_fn
        self._queue: queue.Queue[tuple | None] = queue.Queue(maxsize=queue_maxsize)
        self._thread = threading.Thread(target=self._run, daemon=True, name="BehaviorLogWriter")
        self._thread.start()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def record(self, event: BehaviorEvent) -> None:
        """Queue a behavior event."""
        self._put(("event", event, self._now_ms()))

    def record_position(self, point: GeoPoint, timestamp_ms: int | None = None) -> None:
        """Queue a plain track point; *timestamp_ms* defaults to now."""
        ts = timestamp_ms if timestamp_ms is not None else self._now_ms()
        self._put(("position", point, ts))

    def shutdown(self, timeout: float = 5.0) -> None:
        """Write everything queued so far, then stop the worker and close the database."""
        self._queue.put(None)
        self._thread.join(timeout=timeout)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _now_ms(self) -> int:
        return int(self._time_fn() * 1000)

    def _put(self, item: tuple) -> None:
        try:
            self._queue.put_nowait(item)
        except queue.Full:
            _logger.warning("Behavior log queue full; dropping %s row", item[0])

    def _run(self) -> None:
        try:
            storage = BehaviorLogStorage(self._db_path, batch_size=self._batch_size)
        except sqlite3.Error:
            _logger.exception("Cannot open behavior log %s; logging disabled", self._db_path)
            storage = None

        while True:
            item = self._queue.get()
            if item is None:
                break
            if storage is None:
                continue
            kind, payload, ts = item
            try:
                if kind == "event":
                    storage.save_event(payload, ts)
                else:
                    storage.save_position(payload, ts)
            except sqlite3.Error as exc:
                _logger.error("Failed to write behavior log row: %s", exc)

        if storage is not None:
            try:
                storage.close()
            except sqlite3.Error as exc:
                _logger.error("Failed to close behavior log: %s", exc)
