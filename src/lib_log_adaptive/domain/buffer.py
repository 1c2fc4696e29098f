"""Bounded, insertion-ordered store of log records.

Purpose
-------
Retain the most recent records in memory so they can be queried, summarised
and exported on demand without any external sink.

Contents
--------
* :class:`BufferStats` - single-pass statistics snapshot.
* :class:`LogBuffer` - the circular buffer with query and retention helpers.

System Role
-----------
Feeds the export use case. Appends are O(1); once capacity is exceeded the
oldest record is evicted while survivors keep their relative order. Capacity
changes are clamped to the configured bounds instead of being rejected.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Deque

from .filters import ExportFilter, TimeInput, apply_filter, parse_time_input
from .levels import LogLevel
from .record import LogRecord

DEFAULT_BUFFER_SIZE = 1000
MIN_BUFFER_SIZE = 1
MAX_BUFFER_SIZE = 10_000


@dataclass(slots=True, frozen=True)
class BufferStats:
    """Summary of the buffer contents."""

    size: int
    max_size: int
    usage_percent: float
    oldest_timestamp: datetime | None = None
    newest_timestamp: datetime | None = None
    counts_by_level: dict[LogLevel, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "max_size": self.max_size,
            "usage_percent": self.usage_percent,
            "oldest_timestamp": self.oldest_timestamp.isoformat() if self.oldest_timestamp else None,
            "newest_timestamp": self.newest_timestamp.isoformat() if self.newest_timestamp else None,
            "counts_by_level": {level.severity: count for level, count in self.counts_by_level.items()},
        }


class LogBuffer:
    """Fixed-capacity buffer retaining the most recent :class:`LogRecord` objects.

    Examples
    --------
    >>> LogBuffer(max_size=0).max_size
    1
    >>> LogBuffer(max_size=50_000).max_size
    10000
    """

    def __init__(
        self,
        max_size: int = DEFAULT_BUFFER_SIZE,
        *,
        min_size: int = MIN_BUFFER_SIZE,
        upper_limit: int = MAX_BUFFER_SIZE,
    ) -> None:
        if min_size <= 0 or upper_limit < min_size:
            raise ValueError("buffer bounds must satisfy 0 < min_size <= upper_limit")
        self._min_size = min_size
        self._upper_limit = upper_limit
        self._max_size = self._clamp(max_size)
        self._records: Deque[LogRecord] = deque(maxlen=self._max_size)

    def _clamp(self, size: int) -> int:
        return max(self._min_size, min(self._upper_limit, int(size)))

    @property
    def max_size(self) -> int:
        """Return the configured capacity."""

        return self._max_size

    def append(self, record: LogRecord) -> None:
        """Append a record, evicting the oldest one when at capacity."""

        self._records.append(record)

    def extend(self, records: Iterable[LogRecord]) -> None:
        for record in records:
            self.append(record)

    def snapshot(self) -> list[LogRecord]:
        """Return a copy of the buffer from oldest to newest."""

        return list(self._records)

    def __iter__(self) -> Iterator[LogRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        self._records.clear()

    def resize(self, size: int) -> int:
        """Change the capacity (clamped) and drop the oldest overflow.

        Returns the capacity actually applied.

        Examples
        --------
        >>> buffer = LogBuffer(max_size=10, min_size=5)
        >>> buffer.resize(2)
        5
        """
        self._max_size = self._clamp(size)
        self._records = deque(self._records, maxlen=self._max_size)
        return self._max_size

    def prune(self, *, older_than: TimeInput | None = None, levels: Iterable[LogLevel | str] | None = None, now: datetime | None = None) -> int:
        """Remove records older than ``older_than`` and/or at ``levels``.

        With both arguments a record must match both to be removed. Returns
        the number of records removed.
        """
        if older_than is None and levels is None:
            return 0
        cutoff = parse_time_input(older_than, now=now) if older_than is not None else None
        doomed_levels = {LogLevel.coerce(level) for level in levels} if levels is not None else None

        def _doomed(record: LogRecord) -> bool:
            if cutoff is not None and record.timestamp >= cutoff:
                return False
            if doomed_levels is not None and record.level not in doomed_levels:
                return False
            return True

        kept = [record for record in self._records if not _doomed(record)]
        removed = len(self._records) - len(kept)
        self._records = deque(kept, maxlen=self._max_size)
        return removed

    def query(self, query: ExportFilter | None = None, *, now: datetime | None = None) -> list[LogRecord]:
        """Return the records matching ``query`` in chronological order."""

        if query is None:
            return self.snapshot()
        return apply_filter(self._records, query, now=now)

    def stats(self) -> BufferStats:
        """Compute :class:`BufferStats` in one pass over the records."""

        counts = {level: 0 for level in LogLevel}
        oldest: datetime | None = None
        newest: datetime | None = None
        for record in self._records:
            counts[record.level] += 1
            if oldest is None:
                oldest = record.timestamp
            newest = record.timestamp
        size = len(self._records)
        return BufferStats(
            size=size,
            max_size=self._max_size,
            usage_percent=round(size / self._max_size * 100, 2),
            oldest_timestamp=oldest,
            newest_timestamp=newest,
            counts_by_level=counts,
        )


__all__ = ["BufferStats", "DEFAULT_BUFFER_SIZE", "LogBuffer", "MAX_BUFFER_SIZE", "MIN_BUFFER_SIZE"]
