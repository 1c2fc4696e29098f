"""Batched file transport appending one JSON document per line."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from ._batching import BatchingTransport


class FileTransport(BatchingTransport):
    """Append batches to ``path`` as JSON lines without blocking the event loop.

    Parent directories are created on first delivery.
    """

    def __init__(self, path: str | Path = "app.log", *, batch_size: int = 100, flush_interval: float = 5.0) -> None:
        super().__init__(batch_size=batch_size, flush_interval=flush_interval)
        self.path = Path(path)

    async def _deliver(self, batch: list[dict[str, Any]]) -> None:
        lines = "".join(json.dumps(record, ensure_ascii=False, default=str) + "\n" for record in batch)
        await asyncio.to_thread(self._append, lines)

    def _append(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(text)


__all__ = ["FileTransport"]
