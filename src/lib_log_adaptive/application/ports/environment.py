"""Port supplying environment signals to the capability detector."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_adaptive.domain.environment import EnvironmentSnapshot


@runtime_checkable
class EnvironmentPort(Protocol):
    """Provide a fresh :class:`EnvironmentSnapshot` on every call."""

    def snapshot(self) -> EnvironmentSnapshot: ...


__all__ = ["EnvironmentPort"]
