"""Shared batching machinery for asynchronous transports.

Purpose
-------
Queue transport records synchronously and deliver them in batches, either
when a batch fills up, when the flush-interval timer fires, or on explicit
``flush()``/``close()``.

Contents
--------
* :class:`BatchingTransport` - base class; subclasses implement ``_deliver``.

System Role
-----------
The logging call path only appends to an in-memory list; delivery happens in
tasks scheduled on the running event loop. Without a running loop, records
wait for an explicit flush. A failed batch is re-queued at the front of the
pending list so the next flush retries it first.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Mapping

logger = logging.getLogger(__name__)


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class BatchingTransport:
    """Count- and interval-driven batching with at-least-once retry."""

    def __init__(self, *, batch_size: int, flush_interval: float) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if flush_interval < 0:
            raise ValueError("flush_interval must not be negative")
        self.batch_size = batch_size
        self.flush_interval = flush_interval
        self._pending: list[dict[str, Any]] = []
        self._timer: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def pending(self) -> list[dict[str, Any]]:
        """Return a copy of the records awaiting delivery."""

        return list(self._pending)

    def write(self, record: Mapping[str, Any]) -> None:
        """Queue ``record``; schedule a flush once a full batch is pending."""

        if self._closed:
            raise RuntimeError(f"{type(self).__name__} is closed")
        self._pending.append(dict(record))
        loop = _running_loop()
        if loop is None:
            return
        self._ensure_timer(loop)
        if len(self._pending) >= self.batch_size:
            task = loop.create_task(self.flush())
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)

    async def flush(self) -> None:
        """Deliver pending records in batches; stop at the first failure.

        Any exception raised by ``_deliver`` puts the batch back at the front
        of the pending list and is logged, never raised.
        """

        async with self._lock:
            while self._pending:
                batch = self._pending[: self.batch_size]
                del self._pending[: len(batch)]
                try:
                    await self._deliver(batch)
                except Exception as exc:
                    self._pending[:0] = batch
                    logger.error("%s failed to deliver %d record(s); re-queued", type(self).__name__, len(batch), exc_info=exc)
                    return

    async def close(self) -> None:
        """Wait for in-flight flushes, flush once more, then stop the timer."""

        loop = asyncio.get_running_loop()
        in_flight = [task for task in self._in_flight if task.get_loop() is loop]
        if in_flight:
            await asyncio.gather(*in_flight, return_exceptions=True)
        await self.flush()
        await self._stop_timer(loop)
        self._closed = True
        await self._release()

    async def _deliver(self, batch: list[dict[str, Any]]) -> None:
        raise NotImplementedError

    async def _release(self) -> None:
        """Free transport-specific resources after the final flush."""

    def _ensure_timer(self, loop: asyncio.AbstractEventLoop) -> None:
        if self.flush_interval <= 0:
            return
        if self._timer is not None and not self._timer.done() and self._timer.get_loop() is loop:
            return
        self._timer = loop.create_task(self._run_timer())

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self.flush_interval)
            try:
                await self.flush()
            except Exception as exc:
                logger.error("%s interval flush failed", type(self).__name__, exc_info=exc)

    async def _stop_timer(self, loop: asyncio.AbstractEventLoop) -> None:
        timer, self._timer = self._timer, None
        if timer is None or timer.done() or timer.get_loop() is not loop:
            return
        timer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await timer


__all__ = ["BatchingTransport"]
