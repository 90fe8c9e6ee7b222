"""ReplayLocationSource — plays back a recorded track file as a location source."""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Iterator
from pathlib import Path

_logger = logging.getLogger(__name__)


class ReplayLocationSource:
    """Reads raw location dicts from a JSON Lines (``.jsonl``) or CSV file.

    Rows are produced lazily, one per :meth:`read_fix` call, in file order;
    ``None`` is returned once the file is exhausted.  Like a live provider the
    source cannot be rewound: create a new instance to replay again.

    Args:
        path: Track file.  CSV files need a header row using the
            :class:`~smart_indicator.location.parser.LocationParser` key names.

    Raises:
        ValueError: If the file extension is not ``.jsonl`` or ``.csv``.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        suffix = self.path.suffix.lower()
        if suffix not in (".jsonl", ".csv"):
            raise ValueError(f"Unsupported track file type: {self.path.name}")
        self._rows: Iterator[dict] = self._iter_rows(suffix)
        self._exhausted = False

    @property
    def exhausted(self) -> bool:
        """True once every row has been read."""
        return self._exhausted

    def read_fix(self) -> dict | None:
        """Return the next raw fix, or None at end of file."""
        if self._exhausted:
            return None
        try:
            return next(self._rows)
        except StopIteration:
            self._exhausted = True
            return None

    def __iter__(self) -> Iterator[dict]:
        while (raw := self.read_fix()) is not None:
            yield raw

    def _iter_rows(self, suffix: str) -> Iterator[dict]:
        with self.path.open("r", encoding="utf-8", newline="") as f:
            if suffix == ".csv":
                yield from csv.DictReader(f)
                return
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    yield json.loads(line)
                except json.JSONDecodeError as exc:
                    _logger.warning("Skipping line %d of %s: %s", lineno, self.path.name, exc)
