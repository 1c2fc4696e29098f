"""Domain record describing one logging call.

Purpose
-------
Provide the immutable representation of a log call that travels from the
logger facade through rendering, buffering, handlers, transports and
exports.

Contents
--------
* :class:`SourceLocation` - caller position captured at log time.
* :class:`GroupInfo` - nesting metadata for grouped output.
* :class:`LogRecord` - the canonical record with serialisation helpers.

System Role
-----------
Sits in the domain layer so adapters and use cases only manipulate pure data.
Insertion order in the buffer is authoritative; ``record_id`` exists for
rendering keys and de-duplication only.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from .levels import LogLevel


def _ensure_aware(ts: datetime) -> datetime:
    """Validate that ``ts`` is timezone-aware and normalise to UTC."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        raise ValueError("timestamp must be timezone-aware")
    return ts.astimezone(timezone.utc)


@dataclass(slots=True, frozen=True)
class SourceLocation:
    """Position of the logging call in the caller's source.

    Examples
    --------
    >>> SourceLocation('app.py', 12, 5).short()
    'app.py:12'
    >>> SourceLocation('app.py', 12, 5).full()
    'app.py:12:5'
    """

    file: str
    line: int
    column: int = 0
    function: str | None = None

    def short(self) -> str:
        return f"{self.file}:{self.line}"

    def full(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"file": self.file, "line": self.line, "column": self.column}
        if self.function is not None:
            data["function"] = self.function
        return data


@dataclass(slots=True, frozen=True)
class GroupInfo:
    """Nesting depth (and optional label) of the group a record was logged in."""

    depth: int
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"depth": self.depth}
        if self.name is not None:
            data["name"] = self.name
        return data


@dataclass(slots=True, frozen=True)
class LogRecord:
    """Immutable record produced for every accepted logging call.

    Attributes
    ----------
    record_id:
        Identifier unique within the process lifetime.
    timestamp:
        Time of the call in timezone-aware UTC.
    level:
        :class:`LogLevel` severity.
    message:
        Rendered message (the first positional argument of the call).
    args:
        Remaining positional arguments, in call order.
    prefix:
        Effective prefix (global and scoped prefixes joined with ``:``).
    location:
        Optional caller position.
    group_info:
        Optional grouping metadata.
    """

    record_id: str
    timestamp: datetime
    level: LogLevel
    message: str
    args: tuple[Any, ...] = field(default_factory=tuple)
    prefix: str | None = None
    location: SourceLocation | None = None
    group_info: GroupInfo | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", _ensure_aware(self.timestamp))
        if not self.record_id:
            raise ValueError("record_id must not be empty")
        object.__setattr__(self, "args", tuple(self.args))

    @property
    def has_location(self) -> bool:
        return self.location is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize the record metadata with an ISO8601 timestamp.

        Arguments are left untouched; exporters pass them through the
        serializer registry.
        """

        data: dict[str, Any] = {
            "record_id": self.record_id,
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.severity,
            "message": self.message,
            "args": list(self.args),
            "prefix": self.prefix,
        }
        if self.location is not None:
            data["location"] = self.location.to_dict()
        if self.group_info is not None:
            data["group_info"] = self.group_info.to_dict()
        return data

    def to_transport_record(self) -> dict[str, Any]:
        """Project the record onto the wire shape consumed by transports.

        Examples
        --------
        >>> ts = datetime(2025, 1, 1, tzinfo=timezone.utc)
        >>> LogRecord('r1', ts, LogLevel.WARN, 'disk low', prefix='api').to_transport_record()
        {'level': 'warn', 'level_value': 30, 'time': 1735689600000, 'msg': 'disk low', 'prefix': 'api'}
        """

        payload: dict[str, Any] = {
            "level": self.level.severity,
            "level_value": self.level.value,
            "time": int(self.timestamp.timestamp() * 1000),
            "msg": self.message,
        }
        if self.prefix:
            payload["prefix"] = self.prefix
        if self.location is not None:
            payload["location"] = self.location.to_dict()
        return payload

    def replace(self, **changes: Any) -> "LogRecord":
        """Return a copied record with ``changes`` applied."""

        return replace(self, **changes)


__all__ = ["GroupInfo", "LogRecord", "SourceLocation"]
