"""Bounded TTL cache for resolved render templates.

Purpose
-------
Avoid recomputing colour conversion and style composition for records that
share the same visual shape (level, theme, prefix presence, location
presence, preset).

Contents
--------
* :class:`StyleKey` - cache key.
* :class:`CachedStyle` - cached template and style arguments.
* :class:`StyleCache` - least-recently-touched eviction with expiry.

System Role
-----------
Owned by :class:`~lib_log_adaptive.adapters.renderer.AdaptiveRenderer`.
A theme change clears the whole cache instead of pruning selectively.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from lib_log_adaptive.domain.levels import LogLevel

DEFAULT_MAX_ENTRIES = 100
DEFAULT_TTL_SECONDS = 300.0


@dataclass(slots=True, frozen=True)
class StyleKey:
    """Identity of a render shape."""

    level: LogLevel
    theme: str
    has_prefix: bool
    has_location: bool
    preset: str | None = None


@dataclass(slots=True)
class CachedStyle:
    format: str
    style_args: tuple[str, ...]
    created_at: float
    hits: int = 0


class StyleCache:
    """LRU cache with per-entry time-to-live.

    Examples
    --------
    >>> ticks = iter([0.0, 1.0, 2.0])
    >>> cache = StyleCache(max_entries=2, ttl=10.0, clock=lambda: next(ticks))
    >>> key = StyleKey(LogLevel.INFO, 'default', False, False)
    >>> cache.set(key, '{message}', ())
    >>> cache.get(key).format
    '{message}'
    >>> cache.stats()['hits']
    1
    """

    def __init__(
        self,
        *,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl: float = DEFAULT_TTL_SECONDS,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._entries: OrderedDict[StyleKey, CachedStyle] = OrderedDict()
        self._max_entries = max_entries
        self._ttl = ttl
        self._enabled = enabled
        self._clock = clock
        self._hits = 0
        self._misses = 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    def get(self, key: StyleKey) -> CachedStyle | None:
        """Return the live entry for ``key`` and mark it most recently used."""

        if not self._enabled:
            return None
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None
        if self._clock() - entry.created_at > self._ttl:
            del self._entries[key]
            self._misses += 1
            return None
        entry.hits += 1
        self._entries.move_to_end(key)
        self._hits += 1
        return entry

    def set(self, key: StyleKey, format: str, style_args: tuple[str, ...]) -> None:
        """Store ``format``/``style_args``, evicting the least recently touched entry when full."""

        if not self._enabled:
            return
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self._max_entries:
            self._entries.popitem(last=False)
        self._entries[key] = CachedStyle(format=format, style_args=tuple(style_args), created_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def set_enabled(self, enabled: bool) -> None:
        """Toggle caching; disabling also drops every entry."""

        self._enabled = enabled
        if not enabled:
            self.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def stats(self) -> dict[str, float | int]:
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "max_size": self._max_entries,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / total if total else 0.0,
        }


__all__ = ["CachedStyle", "StyleCache", "StyleKey"]
