"""Port describing batched external sinks managed by the transport manager."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class TransportPort(Protocol):
    """Accept transport records synchronously and deliver them in batches."""

    def write(self, record: Mapping[str, Any]) -> None:
        """Queue ``record`` for delivery without suspending the caller."""

    async def flush(self) -> None:
        """Deliver every pending record."""

    async def close(self) -> None:
        """Flush once more, then release timers and connections."""


__all__ = ["TransportPort"]
