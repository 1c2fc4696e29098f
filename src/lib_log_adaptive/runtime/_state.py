"""Process-wide slot holding the logger installed by ``init``.

The check for an existing runtime and the installation happen under one
lock, so two racing ``init`` calls cannot both succeed.
"""

from __future__ import annotations

from dataclasses import dataclass
from threading import RLock

from ._composition import Logger
from ._settings import LoggerConfig

_NOT_INITIALISED = "lib_log_adaptive.init() must be called before using the logging API"


@dataclass(slots=True, frozen=True)
class LoggingRuntime:
    """Root logger plus the resolved configuration it was built from."""

    logger: Logger
    config: LoggerConfig


_slot: LoggingRuntime | None = None
_slot_lock = RLock()


def install_runtime(runtime: LoggingRuntime) -> None:
    """Occupy the slot; raise :class:`RuntimeError` when it is already taken."""

    global _slot
    with _slot_lock:
        if _slot is not None:
            raise RuntimeError(
                "lib_log_adaptive.init() cannot be called twice without shutdown(); call lib_log_adaptive.shutdown() first",
            )
        _slot = runtime


def release_runtime() -> LoggingRuntime | None:
    """Empty the slot and hand back whatever occupied it."""

    global _slot
    with _slot_lock:
        previous, _slot = _slot, None
        return previous


def current_runtime() -> LoggingRuntime:
    with _slot_lock:
        if _slot is None:
            raise RuntimeError(_NOT_INITIALISED)
        return _slot


def is_initialised() -> bool:
    with _slot_lock:
        return _slot is not None


__all__ = [
    "LoggingRuntime",
    "current_runtime",
    "install_runtime",
    "is_initialised",
    "release_runtime",
]
