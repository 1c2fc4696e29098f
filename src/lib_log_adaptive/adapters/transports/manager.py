"""Registry fanning transport records out to independent sinks.

Purpose
-------
Hold independently configured transports, each with its own minimum level
and optional transform, and dispatch every record to each of them in
isolation: one failing transport never blocks or prevents delivery to the
others.

Contents
--------
* :class:`TransportManager` - registry, dispatcher and log handler.

System Role
-----------
Registered as a handler on the logger, so every accepted record reaches the
transports synchronously. Flushing and closing are asynchronous and run all
transports concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping
from uuid import uuid4

from lib_log_adaptive.application.ports.handler import LogHandlerPort
from lib_log_adaptive.application.ports.transport import TransportPort
from lib_log_adaptive.domain.levels import LogLevel
from lib_log_adaptive.domain.record import LogRecord
from lib_log_adaptive.domain.styles import RenderedOutput

logger = logging.getLogger(__name__)

Transform = Callable[[dict[str, Any]], "Mapping[str, Any] | None"]


@dataclass(slots=True)
class _Registration:
    transport: TransportPort
    level: LogLevel | None
    transform: Transform | None


def _record_level(record: Mapping[str, Any]) -> int:
    value = record.get("level_value")
    if isinstance(value, int):
        return value
    level = record.get("level")
    return LogLevel.coerce(level).value if level is not None else LogLevel.INFO.value


class TransportManager(LogHandlerPort):
    """Dispatch transport records to every registered sink.

    Examples
    --------
    >>> class Memory:
    ...     def __init__(self):
    ...         self.records = []
    ...     def write(self, record):
    ...         self.records.append(record)
    ...     async def flush(self):
    ...         pass
    ...     async def close(self):
    ...         pass
    >>> manager = TransportManager()
    >>> sink = Memory()
    >>> transport_id = manager.add(sink, level='warn')
    >>> manager.write({'level': 'info', 'level_value': 20, 'msg': 'skip'})
    >>> manager.write({'level': 'error', 'level_value': 40, 'msg': 'keep'})
    >>> [record['msg'] for record in sink.records]
    ['keep']
    """

    def __init__(self, *, default_level: LogLevel | str = LogLevel.INFO) -> None:
        self.default_level = LogLevel.coerce(default_level)
        self._registrations: dict[str, _Registration] = {}

    def add(self, transport: TransportPort, *, level: LogLevel | str | None = None, transform: Transform | None = None) -> str:
        """Register ``transport`` and return its identifier."""

        transport_id = f"transport-{uuid4().hex[:12]}"
        self._registrations[transport_id] = _Registration(transport, LogLevel.coerce(level) if level is not None else None, transform)
        return transport_id

    async def remove(self, transport_id: str) -> bool:
        """Unregister and close the transport; return whether it existed."""

        registration = self._registrations.pop(transport_id, None)
        if registration is None:
            return False
        try:
            await registration.transport.close()
        except Exception as exc:
            logger.error("Transport %s failed to close", transport_id, exc_info=exc)
        return True

    def ids(self) -> list[str]:
        return list(self._registrations)

    def get(self, transport_id: str) -> TransportPort | None:
        registration = self._registrations.get(transport_id)
        return registration.transport if registration else None

    def __len__(self) -> int:
        return len(self._registrations)

    def write(self, record: Mapping[str, Any]) -> None:
        """Offer ``record`` to every transport whose threshold it meets."""

        level_value = _record_level(record)
        for transport_id, registration in list(self._registrations.items()):
            threshold = registration.level or self.default_level
            if level_value < threshold.value:
                continue
            try:
                payload: Mapping[str, Any] | None = dict(record)
                if registration.transform is not None:
                    payload = registration.transform(dict(record))
                if not payload:
                    continue
                registration.transport.write(payload)
            except Exception as exc:
                logger.error("Transport %s rejected a record", transport_id, exc_info=exc)

    def handle(self, record: LogRecord, rendered: RenderedOutput) -> None:
        self.write(record.to_transport_record())

    async def flush(self) -> None:
        """Flush every transport concurrently; failures are logged, not raised."""

        await self._broadcast("flush", list(self._registrations.items()))

    async def close(self) -> None:
        """Close every transport concurrently and clear the registry."""

        registrations = list(self._registrations.items())
        self._registrations.clear()
        await self._broadcast("close", registrations)

    @staticmethod
    async def _broadcast(method: str, registrations: list[tuple[str, _Registration]]) -> None:
        results = await asyncio.gather(*(getattr(reg.transport, method)() for _, reg in registrations), return_exceptions=True)
        for (transport_id, _), result in zip(registrations, results):
            if isinstance(result, BaseException):
                logger.error("Transport %s failed to %s", transport_id, method, exc_info=result)


__all__ = ["TransportManager"]
