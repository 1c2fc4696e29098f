"""Log level abstraction ordering severities for verbosity and export queries.

Purpose
-------
Offer a domain-specific representation of log severities that carries the
presentation metadata (labels, emoji) used by renderers and exporters.

Contents
--------
* :class:`LogLevel` enum with conversion helpers and presentation metadata.
* ``_EMOJI_TABLE`` constant mapping levels to badge glyphs.

System Role
-----------
Shared by every layer: the runtime filters by verbosity, the buffer filters
by level allow-lists, and exporters group and count by level.
"""

from __future__ import annotations

import logging
from enum import Enum


class LogLevel(Enum):
    """Totally ordered severities: ``DEBUG < INFO < WARN < ERROR < CRITICAL``.

    Examples
    --------
    >>> LogLevel.WARN > LogLevel.INFO
    True
    >>> sorted([LogLevel.CRITICAL, LogLevel.DEBUG])[0] is LogLevel.DEBUG
    True
    """

    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40
    CRITICAL = 50

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.value >= other.value

    @property
    def severity(self) -> str:
        """Return the lowercase severity name used in payloads and CSS classes."""

        return self.name.lower()

    @property
    def label(self) -> str:
        """Return the upper-case badge label."""

        return self.name

    @property
    def emoji(self) -> str:
        """Return the glyph shown next to the level in styled output."""

        return _EMOJI_TABLE[self]

    @property
    def is_error(self) -> bool:
        """Return ``True`` for the levels matched by "errors only" queries."""

        return self.value >= LogLevel.ERROR.value

    def to_python_level(self) -> int:
        """Return the :mod:`logging` constant matching this level."""

        return logging.WARNING if self is LogLevel.WARN else getattr(logging, self.name)

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Resolve a case-insensitive level name.

        Examples
        --------
        >>> LogLevel.from_name(' warning ') is LogLevel.WARN
        True
        >>> LogLevel.from_name('loud')
        Traceback (most recent call last):
        ...
        ValueError: Unknown log level: 'loud'
        """
        normalized = name.strip().upper()
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def from_numeric(cls, level: int) -> "LogLevel":
        """Return the :class:`LogLevel` corresponding to ``level``."""
        try:
            return cls(level)
        except ValueError as exc:
            raise ValueError(f"Unsupported log level numeric: {level}") from exc

    @classmethod
    def coerce(cls, value: "LogLevel | str | int") -> "LogLevel":
        """Accept an enum member, a name, or a numeric value."""
        if isinstance(value, LogLevel):
            return value
        if isinstance(value, int):
            return cls.from_numeric(value)
        return cls.from_name(value)


_ALIASES = {"WARNING": "WARN", "FATAL": "CRITICAL", "ERR": "ERROR"}

_EMOJI_TABLE = {
    LogLevel.DEBUG: "🐞",
    LogLevel.INFO: "ℹ️",
    LogLevel.WARN: "⚠️",
    LogLevel.ERROR: "❌",
    LogLevel.CRITICAL: "🔥",
}


__all__ = ["LogLevel"]
