from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from lib_log_adaptive.adapters.transports import BatchingTransport, FileTransport, HttpTransport, TransportManager
from lib_log_adaptive.domain import LogLevel


class _MemoryTransport:
    def __init__(self) -> None:
        self.records: list[dict[str, Any]] = []
        self.flushed = 0
        self.closed = False

    def write(self, record: dict[str, Any]) -> None:
        self.records.append(dict(record))

    async def flush(self) -> None:
        self.flushed += 1

    async def close(self) -> None:
        self.closed = True


class _BrokenTransport(_MemoryTransport):
    def write(self, record: dict[str, Any]) -> None:
        raise OSError("disk full")

    async def flush(self) -> None:
        raise OSError("disk full")


class _Endpoint:
    """Mock HTTP endpoint recording every request body; fails the first ``failures`` calls."""

    def __init__(self, failures: int = 0, *, status: int = 503) -> None:
        self.failures = failures
        self.status = status
        self.bodies: list[dict[str, Any]] = []
        self.headers: list[httpx.Headers] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.failures:
            self.failures -= 1
            return httpx.Response(self.status)
        self.bodies.append(json.loads(request.content))
        self.headers.append(request.headers)
        return httpx.Response(200, json={"ok": True})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def _record(message: str, level: LogLevel = LogLevel.INFO) -> dict[str, Any]:
    return {"level": level.severity, "level_value": level.value, "time": 0, "msg": message}


@pytest.mark.asyncio
async def test_http_transport_posts_batches_with_merged_headers() -> None:
    endpoint = _Endpoint()
    transport = HttpTransport("https://logs.test/ingest", headers={"X-Api-Key": "secret"}, batch_size=2, flush_interval=0, client=endpoint.client())

    for index in range(3):
        transport.write(_record(f"m{index}"))
    await transport.close()

    messages = [[item["msg"] for item in body["logs"]] for body in endpoint.bodies]
    assert messages == [["m0", "m1"], ["m2"]]
    assert endpoint.headers[0]["content-type"] == "application/json"
    assert endpoint.headers[0]["x-api-key"] == "secret"


@pytest.mark.asyncio
async def test_http_failure_requeues_batch_in_front_of_newer_records() -> None:
    endpoint = _Endpoint(failures=1)
    transport = HttpTransport("https://logs.test/ingest", batch_size=10, flush_interval=0, client=endpoint.client())

    transport.write(_record("first"))
    transport.write(_record("second"))
    await transport.flush()

    assert [item["msg"] for item in transport.pending] == ["first", "second"]
    assert endpoint.bodies == []

    transport.write(_record("third"))
    await transport.flush()

    assert transport.pending == []
    assert [item["msg"] for item in endpoint.bodies[0]["logs"]] == ["first", "second", "third"]
    await transport.close()


@pytest.mark.asyncio
async def test_http_network_errors_are_retryable() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        raise httpx.ConnectError("unreachable", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = HttpTransport("https://logs.test/ingest", flush_interval=0, client=client)
    transport.write(_record("kept"))

    await transport.flush()

    assert calls["count"] == 1
    assert [item["msg"] for item in transport.pending] == ["kept"]
    await client.aclose()


@pytest.mark.asyncio
async def test_http_closed_client_keeps_the_batch(caplog: pytest.LogCaptureFixture) -> None:
    client = httpx.AsyncClient(transport=httpx.MockTransport(_Endpoint()))
    await client.aclose()
    transport = HttpTransport("https://logs.test/ingest", flush_interval=0, client=client)
    transport.write(_record("kept"))

    await transport.flush()

    assert [item["msg"] for item in transport.pending] == ["kept"]
    assert "failed to deliver" in caplog.text


class _FlakySink(BatchingTransport):
    """Raises an arbitrary error for the first ``failures`` deliveries."""

    def __init__(self, failures: int, *, flush_interval: float = 0) -> None:
        super().__init__(batch_size=10, flush_interval=flush_interval)
        self.failures = failures
        self.delivered: list[str] = []

    async def _deliver(self, batch: list[dict[str, Any]]) -> None:
        if self.failures:
            self.failures -= 1
            raise RuntimeError("sink exploded")
        self.delivered.extend(item["msg"] for item in batch)


@pytest.mark.asyncio
async def test_any_delivery_error_requeues_and_next_flush_retries() -> None:
    sink = _FlakySink(failures=1)
    sink.write(_record("a"))
    sink.write(_record("b"))

    await sink.flush()
    assert [item["msg"] for item in sink.pending] == ["a", "b"]
    assert sink.delivered == []

    await sink.flush()
    assert sink.pending == []
    assert sink.delivered == ["a", "b"]


@pytest.mark.asyncio
async def test_interval_timer_survives_failed_flushes() -> None:
    sink = _FlakySink(failures=2, flush_interval=0.01)
    sink.write(_record("late"))

    for _ in range(100):
        if sink.delivered:
            break
        await asyncio.sleep(0.01)

    assert sink.delivered == ["late"]
    await sink.close()


@pytest.mark.asyncio
async def test_interval_timer_flushes_partial_batches() -> None:
    endpoint = _Endpoint()
    transport = HttpTransport("https://logs.test/ingest", batch_size=100, flush_interval=0.01, client=endpoint.client())

    transport.write(_record("tick"))
    for _ in range(50):
        if endpoint.bodies:
            break
        await asyncio.sleep(0.01)

    assert [item["msg"] for item in endpoint.bodies[0]["logs"]] == ["tick"]
    await transport.close()


@pytest.mark.asyncio
async def test_file_transport_appends_json_lines(tmp_path: Path) -> None:
    target = tmp_path / "logs" / "app.log"
    transport = FileTransport(target, batch_size=10, flush_interval=0)

    transport.write(_record("one"))
    transport.write(_record("two", LogLevel.ERROR))
    await transport.close()

    lines = target.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["msg"] for line in lines] == ["one", "two"]
    with pytest.raises(RuntimeError, match="closed"):
        transport.write(_record("late"))


def test_invalid_batching_parameters_are_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="batch_size"):
        FileTransport(tmp_path / "x.log", batch_size=0)
    with pytest.raises(ValueError, match="flush_interval"):
        FileTransport(tmp_path / "x.log", flush_interval=-1)


def test_manager_isolates_failing_transports() -> None:
    manager = TransportManager()
    healthy = _MemoryTransport()
    manager.add(_BrokenTransport())
    manager.add(healthy)

    manager.write(_record("delivered"))

    assert [record["msg"] for record in healthy.records] == ["delivered"]


def test_manager_applies_levels_and_transforms() -> None:
    manager = TransportManager(default_level="debug")
    everything = _MemoryTransport()
    errors = _MemoryTransport()
    tagged = _MemoryTransport()
    manager.add(everything)
    manager.add(errors, level=LogLevel.ERROR)
    manager.add(tagged, transform=lambda record: None if record["msg"] == "drop" else {**record, "service": "api"})

    manager.write(_record("note", LogLevel.DEBUG))
    manager.write(_record("drop", LogLevel.INFO))
    manager.write(_record("boom", LogLevel.ERROR))

    assert [record["msg"] for record in everything.records] == ["note", "drop", "boom"]
    assert [record["msg"] for record in errors.records] == ["boom"]
    assert tagged.records == [{**_record("note", LogLevel.DEBUG), "service": "api"}, {**_record("boom", LogLevel.ERROR), "service": "api"}]


@pytest.mark.asyncio
async def test_manager_flush_and_close_tolerate_failures() -> None:
    manager = TransportManager()
    healthy = _MemoryTransport()
    manager.add(_BrokenTransport())
    healthy_id = manager.add(healthy)

    await manager.flush()
    assert healthy.flushed == 1
    assert manager.get(healthy_id) is healthy

    await manager.close()
    assert healthy.closed is True
    assert len(manager) == 0


@pytest.mark.asyncio
async def test_manager_remove_closes_the_transport() -> None:
    manager = TransportManager()
    sink = _MemoryTransport()
    transport_id = manager.add(sink)

    assert transport_id.startswith("transport-")
    assert await manager.remove(transport_id) is True
    assert sink.closed is True
    assert await manager.remove(transport_id) is False
    assert manager.ids() == []
