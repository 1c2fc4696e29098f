"""Default adapter factories used by the composition root."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from lib_log_adaptive.adapters import AdaptiveRenderer, StyleCache
from lib_log_adaptive.application.ports import ClockPort, IdProvider

from ._settings import LoggerConfig


class SystemClock(ClockPort):
    """Concrete clock returning timezone-aware UTC timestamps."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class UuidProvider(IdProvider):
    """Generate hexadecimal record identifiers."""

    def __call__(self) -> str:
        return uuid4().hex


def create_renderer(config: LoggerConfig) -> AdaptiveRenderer:
    """Build a renderer whose per-target caches follow ``config``."""

    def cache_factory() -> StyleCache:
        return StyleCache(max_entries=config.cache_size, ttl=config.cache_ttl)

    return AdaptiveRenderer(cache_factory=cache_factory, cache_enabled=config.cache_enabled)


__all__ = ["SystemClock", "UuidProvider", "create_renderer"]
