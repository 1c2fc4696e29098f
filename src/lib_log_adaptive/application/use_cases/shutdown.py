"""Shutdown orchestration for the logging pipeline.

Purpose
-------
Provide a unified shutdown routine that flushes and closes every transport.
The buffer is left intact so callers can still export after shutdown.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from lib_log_adaptive.application.ports.transport import TransportPort


def create_shutdown(*, transports: TransportPort | None) -> Callable[[], Awaitable[None]]:
    """Return an async callable performing the shutdown sequence."""

    async def shutdown() -> None:
        """Deliver pending transport batches, then release timers and clients."""
        if transports is not None:
            await transports.flush()
            await transports.close()

    return shutdown


__all__ = ["create_shutdown"]
