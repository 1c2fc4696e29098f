"""Use case orchestrating the pipeline for a single logging call.

Purpose
-------
Tie together verbosity filtering, record construction, lifecycle hooks,
rendering, console emission, buffering and handler fan-out.

Contents
--------
* :class:`PipelineState` - mutable settings shared with the logger facade.
* :func:`create_process_record` factory returning the runtime callable.

System Role
-----------
Application-layer orchestrator wired by the runtime composition root. Every
step completes synchronously inside the logging call, so records reach the
buffer and the handlers in exact call order. A failing handler is reported
through :mod:`logging` and the ``on_error`` hooks and never affects its
siblings or the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from lib_log_adaptive.application.hooks import HookRegistry
from lib_log_adaptive.application.ports import ClockPort, ConsolePort, IdProvider, LogHandlerPort, RendererPort
from lib_log_adaptive.domain import GroupInfo, LogBuffer, LogLevel, LogRecord, OutputTarget, SourceLocation, StyleConfig

logger = logging.getLogger(__name__)

ProcessResult = dict[str, Any]
ProcessCallable = Callable[..., ProcessResult]


@dataclass(slots=True)
class PipelineState:
    """Settings read on every call; the logger facade mutates them in place.

    ``threshold`` of ``None`` silences every record.
    """

    style: StyleConfig = field(default_factory=StyleConfig)
    target: OutputTarget = OutputTarget.PLAIN
    threshold: LogLevel | None = LogLevel.DEBUG
    buffer_enabled: bool = True
    handlers: list[LogHandlerPort] = field(default_factory=list)

    def accepts(self, level: LogLevel) -> bool:
        return self.threshold is not None and level >= self.threshold


def create_process_record(
    *,
    state: PipelineState,
    buffer: LogBuffer,
    renderer: RendererPort,
    console: ConsolePort | None,
    clock: ClockPort,
    id_provider: IdProvider,
    hooks: HookRegistry | None = None,
) -> ProcessCallable:
    """Build the orchestrator capturing the current dependency wiring.

    Parameters
    ----------
    state:
        Shared :class:`PipelineState` (style, output target, threshold,
        buffering switch, handlers).
    buffer:
        :class:`LogBuffer` retaining records for exports.
    renderer:
        Adapter implementing :class:`RendererPort`.
    console:
        Console adapter; ``None`` disables console output.
    clock:
        Provider of timezone-aware timestamps.
    id_provider:
        Callable returning unique record identifiers.
    hooks:
        Optional :class:`HookRegistry`; middleware may rewrite or suppress the
        record (``reason`` ``suppressed``).

    Returns
    -------
    Callable[..., dict[str, Any]]
        Function accepting ``level``, ``message`` and optional ``args``,
        ``prefix``, ``location`` and ``group_info``; returns a diagnostic
        dictionary.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_adaptive.domain import RenderedOutput
    >>> class DummyRenderer:
    ...     def render(self, record, style, target):
    ...         return RenderedOutput(record.message)
    ...     def invalidate(self):
    ...         pass
    >>> class DummyClock:
    ...     def now(self):
    ...         return datetime(2025, 1, 1, tzinfo=timezone.utc)
    >>> class BrokenHandler:
    ...     def handle(self, record, rendered):
    ...         raise RuntimeError('boom')
    >>> state = PipelineState(threshold=LogLevel.INFO, handlers=[BrokenHandler()])
    >>> buffer = LogBuffer(max_size=10)
    >>> process = create_process_record(state=state, buffer=buffer, renderer=DummyRenderer(), console=None, clock=DummyClock(), id_provider=lambda: 'r1')
    >>> process(level=LogLevel.DEBUG, message='hidden')
    {'ok': False, 'reason': 'below_threshold'}
    >>> result = process(level=LogLevel.INFO, message='shown')
    >>> result['ok'], result['buffered'], result['failed_handlers']
    (True, True, 1)
    >>> len(buffer)
    1
    """

    def process(
        *,
        level: LogLevel,
        message: str,
        args: Sequence[Any] = (),
        prefix: str | None = None,
        location: SourceLocation | None = None,
        group_info: GroupInfo | None = None,
    ) -> ProcessResult:
        if not state.accepts(level):
            return {"ok": False, "reason": "silenced" if state.threshold is None else "below_threshold"}

        record = LogRecord(
            record_id=id_provider(),
            timestamp=clock.now(),
            level=level,
            message=message,
            args=tuple(args),
            prefix=prefix,
            location=location,
            group_info=group_info,
        )
        if hooks:
            hooked = hooks.run_before(record)
            if hooked is None:
                return {"ok": False, "reason": "suppressed"}
            record = hooked
        target = state.target
        rendered = renderer.render(record, state.style, target)

        if console is not None:
            try:
                console.emit(record, rendered, target=target)
            except Exception as exc:
                logger.error("Console adapter failed", exc_info=exc)
                if hooks:
                    hooks.report_error(record, exc)

        buffered = state.buffer_enabled
        if buffered:
            buffer.append(record)

        failed = 0
        for handler in list(state.handlers):
            try:
                handler.handle(record, rendered)
            except Exception as exc:
                failed += 1
                logger.error("Log handler failed", exc_info=exc)
                if hooks:
                    hooks.report_error(record, exc)

        if hooks:
            hooks.run_after(record)
        return {"ok": True, "record_id": record.record_id, "buffered": buffered, "failed_handlers": failed}

    return process


__all__ = ["PipelineState", "ProcessCallable", "ProcessResult", "create_process_record"]
