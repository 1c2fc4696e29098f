"""Port for the adaptive renderer turning records into target-specific output."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_adaptive.domain.environment import OutputTarget
from lib_log_adaptive.domain.record import LogRecord
from lib_log_adaptive.domain.styles import RenderedOutput, StyleConfig


@runtime_checkable
class RendererPort(Protocol):
    """Compose ``record`` for ``target`` using ``style``; never raises."""

    def render(self, record: LogRecord, style: StyleConfig, target: OutputTarget) -> RenderedOutput: ...

    def invalidate(self) -> None:
        """Drop every cached style computation."""


__all__ = ["RendererPort"]
