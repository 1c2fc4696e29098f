"""Batched HTTP transport posting transport records as JSON.

Wire format: one ``POST`` per batch whose body is ``{"logs": [...]}`` with
``Content-Type: application/json``; caller headers are merged over the
defaults. Network errors and non-2xx responses re-queue the batch.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

import httpx

from ._batching import BatchingTransport

DEFAULT_HEADERS: Mapping[str, str] = {"Content-Type": "application/json"}


class HttpTransport(BatchingTransport):
    """Deliver batches to ``url`` with an :class:`httpx.AsyncClient`.

    Examples
    --------
    >>> transport = HttpTransport('https://logs.invalid/ingest', headers={'X-Api-Key': 'k'})
    >>> sorted(transport.headers)
    ['Content-Type', 'X-Api-Key']
    >>> transport.write({'level': 'info', 'msg': 'hi'})
    >>> len(transport.pending)
    1
    """

    def __init__(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        batch_size: int = 50,
        flush_interval: float = 5.0,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(batch_size=batch_size, flush_interval=flush_interval)
        self.url = url
        self.headers = {**DEFAULT_HEADERS, **(headers or {})}
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _deliver(self, batch: list[dict[str, Any]]) -> None:
        body = json.dumps({"logs": batch}, ensure_ascii=False, default=str)
        response = await self._get_client().post(self.url, content=body, headers=self.headers, timeout=self.timeout)
        response.raise_for_status()

    async def _release(self) -> None:
        if self._owns_client and self._client is not None:
            client, self._client = self._client, None
            await client.aclose()


__all__ = ["DEFAULT_HEADERS", "HttpTransport"]
