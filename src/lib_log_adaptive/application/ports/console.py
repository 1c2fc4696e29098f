"""Console port describing terminal emission contracts.

Purpose
-------
Define the abstraction for adapters that print rendered records to an
interactive console, letting the application layer depend on a narrow
protocol.

Contents
--------
* :class:`ConsolePort` - runtime-checkable protocol with a single ``emit``
  method receiving the record, its rendered form and the output target.

System Role
-----------
Clarifies the console-facing boundary so adapters (e.g. Rich) can plug in
without leaking implementation details upstream.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_adaptive.domain.environment import OutputTarget
from lib_log_adaptive.domain.record import LogRecord
from lib_log_adaptive.domain.styles import RenderedOutput


@runtime_checkable
class ConsolePort(Protocol):
    """Print a rendered record to an interactive console."""

    def emit(self, record: LogRecord, rendered: RenderedOutput, *, target: OutputTarget) -> None:
        """Print ``rendered`` for ``record`` according to ``target``."""


__all__ = ["ConsolePort"]
