"""Lifecycle hooks and middleware around each accepted record.

Purpose
-------
Let callers observe or rewrite records as they pass through the pipeline:
``before_log`` hooks and middleware run before rendering, ``after_log`` hooks
once every sink has seen the record, and ``on_error`` hooks whenever a hook,
middleware, console or handler raises.

Contents
--------
* :class:`HookEvent` - the three lifecycle events.
* :class:`HookRegistry` - priority-ordered registrations with ``on``,
  ``once``, ``off``, ``use``, ``clear`` and ``stats``.

System Role
-----------
Consulted by :func:`~lib_log_adaptive.application.use_cases.process_record.create_process_record`.
Higher priorities run first; equal priorities keep registration order.
Callback failures are reported through :mod:`logging` and forwarded to the
``on_error`` hooks, never to the logging caller.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from threading import RLock
from typing import Any

from lib_log_adaptive.domain import LogRecord

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 50

HookCallback = Callable[..., Any]
NextCallable = Callable[[LogRecord], "LogRecord | None"]
Middleware = Callable[[LogRecord, NextCallable], "LogRecord | None"]


class HookEvent(Enum):
    """Lifecycle points a hook can subscribe to.

    Examples
    --------
    >>> HookEvent.from_name('beforeLog') is HookEvent.BEFORE_LOG
    True
    >>> HookEvent.from_name('after_log').value
    'after_log'
    """

    BEFORE_LOG = "before_log"
    AFTER_LOG = "after_log"
    ON_ERROR = "on_error"

    @classmethod
    def from_name(cls, value: "HookEvent | str") -> "HookEvent":
        if isinstance(value, cls):
            return value
        normalized = value.strip().replace("-", "_")
        aliases = {"beforeLog": "before_log", "afterLog": "after_log", "onError": "on_error"}
        normalized = aliases.get(normalized, normalized).lower()
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ValueError(f"Unknown hook event: {value!r}") from exc


@dataclass(slots=True, frozen=True)
class _Registration:
    callback: Callable[..., Any]
    priority: int
    sequence: int
    once: bool = False

    @property
    def order(self) -> tuple[int, int]:
        return (-self.priority, self.sequence)


class HookRegistry:
    """Priority-ordered hooks and middleware shared by a logger tree.

    ``before_log`` hooks receive the record and may return a replacement
    (``None`` keeps it). Middleware receives ``(record, next)``; returning
    ``next(record)`` (or ``next(changed)``) continues the chain, returning
    ``None`` without calling ``next`` suppresses the record. ``after_log``
    hooks receive the final record. ``on_error`` hooks receive
    ``(record, error)``.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_adaptive.domain import LogLevel
    >>> hooks = HookRegistry()
    >>> _ = hooks.on('before_log', lambda record: record.replace(message=record.message.upper()))
    >>> _ = hooks.use(lambda record, next_: None if 'secret' in record.message.lower() else next_(record))
    >>> record = LogRecord('r1', datetime(2025, 1, 1, tzinfo=timezone.utc), LogLevel.INFO, 'ready')
    >>> hooks.run_before(record).message
    'READY'
    >>> hooks.run_before(record.replace(message='the secret')) is None
    True
    >>> hooks.stats()
    {'before_log': 1, 'after_log': 0, 'on_error': 0, 'middleware': 1}
    """

    def __init__(self) -> None:
        self._hooks: dict[HookEvent, list[_Registration]] = {event: [] for event in HookEvent}
        self._middleware: list[_Registration] = []
        self._sequence = itertools.count()
        self._lock = RLock()

    # registration ------------------------------------------------------------

    def on(self, event: HookEvent | str, callback: HookCallback, *, priority: int = DEFAULT_PRIORITY) -> Callable[[], None]:
        """Register ``callback`` for ``event``; the returned callable unregisters it."""

        return self._register(HookEvent.from_name(event), callback, priority, once=False)

    def once(self, event: HookEvent | str, callback: HookCallback, *, priority: int = DEFAULT_PRIORITY) -> Callable[[], None]:
        """Like :meth:`on`, but the hook is removed after its first successful run."""

        return self._register(HookEvent.from_name(event), callback, priority, once=True)

    def off(self, event: HookEvent | str, callback: HookCallback) -> bool:
        """Remove the first registration of ``callback``; ``False`` when none exists."""

        hooks = self._hooks[HookEvent.from_name(event)]
        with self._lock:
            for registration in hooks:
                if registration.callback == callback:
                    hooks.remove(registration)
                    return True
        return False

    def use(self, middleware: Middleware, *, priority: int = DEFAULT_PRIORITY) -> Callable[[], None]:
        """Append ``middleware`` to the chain; the returned callable removes it."""

        registration = _Registration(middleware, priority, next(self._sequence))
        with self._lock:
            self._middleware.append(registration)
            self._middleware.sort(key=lambda item: item.order)
        return lambda: self._discard(self._middleware, registration)

    def clear(self) -> None:
        with self._lock:
            for hooks in self._hooks.values():
                hooks.clear()
            self._middleware.clear()

    def stats(self) -> dict[str, int]:
        with self._lock:
            counts = {event.value: len(hooks) for event, hooks in self._hooks.items()}
            counts["middleware"] = len(self._middleware)
        return counts

    def __bool__(self) -> bool:
        with self._lock:
            return bool(self._middleware) or any(self._hooks.values())

    # dispatch ----------------------------------------------------------------

    def run_before(self, record: LogRecord) -> LogRecord | None:
        """Apply ``before_log`` hooks, then the middleware chain.

        Returns the record to log, or ``None`` when middleware suppressed it.
        """

        current = self._emit(HookEvent.BEFORE_LOG, record)
        with self._lock:
            chain = list(self._middleware)
        return self._run_chain(chain, 0, current)

    def run_after(self, record: LogRecord) -> None:
        self._emit(HookEvent.AFTER_LOG, record)

    def report_error(self, record: LogRecord, error: BaseException) -> None:
        """Forward ``error`` to the ``on_error`` hooks; their own failures are only logged."""

        for registration in self._snapshot(HookEvent.ON_ERROR):
            try:
                registration.callback(record, error)
            except Exception as exc:
                logger.error("on_error hook failed", exc_info=exc)
                continue
            if registration.once:
                self._discard(self._hooks[HookEvent.ON_ERROR], registration)

    # internals ---------------------------------------------------------------

    def _register(self, event: HookEvent, callback: HookCallback, priority: int, *, once: bool) -> Callable[[], None]:
        registration = _Registration(callback, priority, next(self._sequence), once=once)
        hooks = self._hooks[event]
        with self._lock:
            hooks.append(registration)
            hooks.sort(key=lambda item: item.order)
        return lambda: self._discard(hooks, registration)

    def _discard(self, registrations: list[_Registration], registration: _Registration) -> None:
        with self._lock:
            if registration in registrations:
                registrations.remove(registration)

    def _snapshot(self, event: HookEvent) -> list[_Registration]:
        with self._lock:
            return list(self._hooks[event])

    def _emit(self, event: HookEvent, record: LogRecord) -> LogRecord:
        current = record
        for registration in self._snapshot(event):
            try:
                result = registration.callback(current)
            except Exception as exc:
                logger.error("%s hook failed", event.value, exc_info=exc)
                self.report_error(current, exc)
                continue
            if isinstance(result, LogRecord):
                current = result
            if registration.once:
                self._discard(self._hooks[event], registration)
        return current

    def _run_chain(self, chain: list[_Registration], index: int, record: LogRecord) -> LogRecord | None:
        if index >= len(chain):
            return record
        downstream: list[LogRecord | None] = []

        def call_next(value: LogRecord) -> LogRecord | None:
            result = self._run_chain(chain, index + 1, value)
            downstream.append(result)
            return result

        try:
            return chain[index].callback(record, call_next)
        except Exception as exc:
            logger.error("Log middleware failed", exc_info=exc)
            self.report_error(record, exc)
            return downstream[-1] if downstream else call_next(record)


__all__ = ["DEFAULT_PRIORITY", "HookCallback", "HookEvent", "HookRegistry", "Middleware"]
