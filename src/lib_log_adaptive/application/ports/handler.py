"""Port for synchronous log handlers notified after each accepted record."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_adaptive.domain.record import LogRecord
from lib_log_adaptive.domain.styles import RenderedOutput


@runtime_checkable
class LogHandlerPort(Protocol):
    """Receive every accepted record together with its rendered form.

    Handlers run inline on the logging call path and must not block.
    Exceptions are caught by the pipeline and reported without affecting
    sibling handlers.
    """

    def handle(self, record: LogRecord, rendered: RenderedOutput) -> None: ...


__all__ = ["LogHandlerPort"]
