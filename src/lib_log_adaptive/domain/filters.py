"""Composable query filters over buffered records.

Purpose
-------
Express the already-parsed filter surface used by exports (level and prefix
lists, time windows, free-text search, location and error shortcuts, head and
tail slicing) as one immutable value object.

Contents
--------
* :class:`ExportFilter` - the filter value object.
* :func:`parse_time_input` - absolute and relative time expressions.
* :func:`apply_filter` - evaluation against an ordered record sequence.

System Role
-----------
Consumed by :meth:`lib_log_adaptive.domain.buffer.LogBuffer.query` and the
export use case. Parsing raw command-line flags happens elsewhere.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Union

from .levels import LogLevel
from .record import LogRecord

TimeInput = Union[datetime, int, float, str]

_RELATIVE_RE = re.compile(r"^(\d+)(ms|s|m|h|d)$")
_UNITS = {
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
}


def parse_time_input(value: TimeInput, *, now: datetime | None = None) -> datetime:
    """Resolve an absolute or relative time expression to an aware UTC datetime.

    Numbers (and digit-only strings) mean "hours ago". Relative shorthand is
    ``<n>ms``, ``<n>s``, ``<n>m``, ``<n>h`` or ``<n>d``. Naive datetimes are
    interpreted as UTC.

    Examples
    --------
    >>> reference = datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc)
    >>> parse_time_input('2h', now=reference).isoformat()
    '2025-01-02T10:00:00+00:00'
    >>> parse_time_input('2025-01-01T00:00:00Z', now=reference).isoformat()
    '2025-01-01T00:00:00+00:00'
    >>> parse_time_input(1.5, now=reference).isoformat()
    '2025-01-02T10:30:00+00:00'
    >>> parse_time_input('yesterday-ish', now=reference)
    Traceback (most recent call last):
    ...
    ValueError: Unrecognised time expression: 'yesterday-ish'
    """
    reference = now or datetime.now(timezone.utc)
    if isinstance(value, datetime):
        return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return reference - timedelta(hours=value)

    text = str(value).strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
    if parsed is not None:
        return parse_time_input(parsed)

    match = _RELATIVE_RE.match(text)
    if match:
        amount, unit = match.groups()
        return reference - _UNITS[unit] * int(amount)
    if text.isdigit():
        return reference - timedelta(hours=int(text))
    raise ValueError(f"Unrecognised time expression: {value!r}")


@dataclass(slots=True, frozen=True)
class ExportFilter:
    """Filter applied to buffered records; every predicate composes by AND.

    ``first``/``last`` slicing is applied after all predicates, ``last``
    before ``first`` when both are present.

    Examples
    --------
    >>> ExportFilter(levels=['error']).levels == frozenset({LogLevel.ERROR})
    True
    >>> ExportFilter().is_empty
    True
    """

    levels: frozenset[LogLevel] | None = None
    prefixes: tuple[str, ...] | None = None
    exclude_prefixes: tuple[str, ...] | None = None
    since: TimeInput | None = None
    until: TimeInput | None = None
    search: str | None = None
    with_location: bool = False
    errors_only: bool = False
    first: int | None = None
    last: int | None = None

    def __post_init__(self) -> None:
        if self.levels is not None:
            object.__setattr__(self, "levels", frozenset(LogLevel.coerce(level) for level in self.levels))
        if self.prefixes is not None:
            object.__setattr__(self, "prefixes", tuple(self.prefixes))
        if self.exclude_prefixes is not None:
            object.__setattr__(self, "exclude_prefixes", tuple(self.exclude_prefixes))
        for name in ("first", "last"):
            amount = getattr(self, name)
            if amount is not None and amount < 0:
                raise ValueError(f"{name} must not be negative")

    @property
    def is_empty(self) -> bool:
        return self == ExportFilter()

    def to_dict(self) -> dict[str, Any]:
        """Return the non-default fields for export metadata."""
        data: dict[str, Any] = {}
        if self.levels is not None:
            data["levels"] = [level.severity for level in sorted(self.levels)]
        for name in ("prefixes", "exclude_prefixes"):
            value = getattr(self, name)
            if value is not None:
                data[name] = list(value)
        for name in ("since", "until"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value.isoformat() if isinstance(value, datetime) else value
        if self.search:
            data["search"] = self.search
        if self.with_location:
            data["with_location"] = True
        if self.errors_only:
            data["errors_only"] = True
        if self.first is not None:
            data["first"] = self.first
        if self.last is not None:
            data["last"] = self.last
        return data


def _stringify_args(args: Sequence[Any]) -> str:
    return " ".join(str(arg) for arg in args)


def apply_filter(records: Iterable[LogRecord], query: ExportFilter, *, now: datetime | None = None) -> list[LogRecord]:
    """Return the records matching ``query`` in their original order."""
    since = parse_time_input(query.since, now=now) if query.since is not None else None
    until = parse_time_input(query.until, now=now) if query.until is not None else None
    needle = query.search.lower() if query.search else None

    matched: list[LogRecord] = []
    for record in records:
        if query.levels is not None and record.level not in query.levels:
            continue
        if query.errors_only and not record.level.is_error:
            continue
        if query.prefixes is not None and record.prefix not in query.prefixes:
            continue
        if query.exclude_prefixes is not None and record.prefix in query.exclude_prefixes:
            continue
        if since is not None and record.timestamp < since:
            continue
        if until is not None and record.timestamp > until:
            continue
        if query.with_location and not record.has_location:
            continue
        if needle is not None and needle not in record.message.lower() and needle not in _stringify_args(record.args).lower():
            continue
        matched.append(record)

    if query.last is not None:
        matched = matched[-query.last :] if query.last else []
    if query.first is not None:
        matched = matched[: query.first]
    return matched


__all__ = ["ExportFilter", "TimeInput", "apply_filter", "parse_time_input"]
