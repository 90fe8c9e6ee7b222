"""LocationEventStream — delivers parsed fixes from a location provider to the engine.

A location provider differs from a fixed-rate sensor in three ways this module
handles:

  - it may simply have no new fix (``read_fix()`` returns None);
  - it may be finite (a replayed track sets ``exhausted``), after which the
    stream reports :attr:`StreamState.FINISHED`;
  - access can be withdrawn at any time (``PermissionError`` from the source),
    after which the stream reports :attr:`StreamState.INTERRUPTED` until
    :meth:`LocationEventStream.start` is called again.

Providers also re-deliver their last cached fix; a fix identical in time and
position to the previous one is not queued twice.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum

from smart_indicator.location.models import LocationFix

_logger = logging.getLogger(__name__)


class StreamState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"
    INTERRUPTED = "interrupted"


@dataclass
class LocationEvent:
    """A parsed location fix with the monotonic time it was read."""

    fix: LocationFix
    timestamp: float  # time.monotonic() seconds


class LocationEventStream:
    """Polls *source* at *target_hz* on a daemon thread and buffers the newest fixes.

    The buffer keeps at most *queue_maxsize* events; when full, the oldest fix
    is discarded (a stale position is worthless to the turn detector).

    Parameters
    ----------
    source:
        Object with ``read_fix() -> dict | None``.  An optional ``exhausted``
        attribute marks a finite source as done.
    parser:
        Object with ``parse(raw: dict) -> LocationFix``.
    target_hz:
        Polling frequency in Hz.
    queue_maxsize:
        Maximum number of buffered events.
    """

    def __init__(
        self,
        source,
        parser,
        target_hz: float = 1.0,
        queue_maxsize: int = 30,
    ) -> None:
        self._source = source
        self._parser = parser
        self._interval = 1.0 / target_hz
        self._buffer: deque[LocationEvent] = deque(maxlen=queue_maxsize)
        self._cond = threading.Condition()
        self._halt = threading.Event()
        self._thread: threading.Thread | None = None
        self._state = StreamState.IDLE
        self._last_key: tuple[int, float, float] | None = None
        self.dropped = 0
        """Fixes discarded because the buffer was full."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Begin (or resume after an interruption) polling; no-op while running."""
        if self.is_running:
            return
        self._halt.clear()
        self._state = StreamState.RUNNING
        self._thread = threading.Thread(target=self._poll, daemon=True, name="LocationStream")
        self._thread.start()

    def stop(self) -> None:
        """Stop polling; buffered fixes stay available to :meth:`get_event`."""
        self._halt.set()
        thread, self._thread = self._thread, None
        if thread is not None:
            thread.join(timeout=2.0)
        if self._state is StreamState.RUNNING:
            self._state = StreamState.IDLE

    def get_event(self, timeout: float = 0.1) -> LocationEvent | None:
        """Pop the oldest buffered fix, waiting up to *timeout* s (0 = don't wait)."""
        with self._cond:
            if not self._buffer and timeout > 0:
                self._cond.wait_for(lambda: bool(self._buffer), timeout=timeout)
            if not self._buffer:
                return None
            return self._buffer.popleft()

    def queue_size(self) -> int:
        """Return the number of buffered fixes."""
        with self._cond:
            return len(self._buffer)

    def drained(self) -> bool:
        """True once polling has ended for good and every fix has been consumed."""
        return self._state in (StreamState.FINISHED, StreamState.INTERRUPTED) and not self.queue_size()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _poll(self) -> None:
        while not self._halt.is_set():
            started = time.monotonic()
            try:
                raw = self._source.read_fix()
            except PermissionError as exc:
                _logger.warning("Location access withdrawn: %s", exc)
                self._state = StreamState.INTERRUPTED
                return

            if raw:
                self._accept(raw, started)
            elif getattr(self._source, "exhausted", False) is True:
                _logger.info("Location source exhausted")
                self._state = StreamState.FINISHED
                return

            remaining = self._interval - (time.monotonic() - started)
            if remaining > 0:
                self._halt.wait(remaining)

    def _accept(self, raw: dict, read_at: float) -> None:
        try:
            fix = self._parser.parse(raw)
        except (ValueError, TypeError) as exc:
            _logger.debug("Dropping malformed fix %r: %s", raw, exc)
            return

        key = (fix.timestamp_ms, fix.latitude, fix.longitude)
        if key == self._last_key:
            return
        self._last_key = key

        with self._cond:
            if len(self._buffer) == self._buffer.maxlen:
                self.dropped += 1
            self._buffer.append(LocationEvent(fix=fix, timestamp=read_at))
            self._cond.notify()
