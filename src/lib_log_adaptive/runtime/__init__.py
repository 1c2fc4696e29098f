"""Runtime façade that wires the adaptive logging pipeline.

Purpose
-------
Expose a stable entry point (``init``, ``get``, ``export``, ``shutdown``) that
host applications use instead of importing the inner layers directly.

Contents
--------
* ``init`` - composition root installing the process-wide root logger.
* ``get`` - accessor returning the root logger or a scoped child.
* ``export`` - bridge from the log buffer to the export formatter.
* ``shutdown`` / ``shutdown_async`` - flush and close every transport.
* ``summary_info`` - metadata banner used by the CLI.

System Role
-----------
Forms the outer shell: adapters and use cases stay hidden behind this
interface, and :func:`build_logger` remains available for hosts that need
several independent pipelines.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from lib_log_adaptive.adapters import RichConsoleAdapter
from lib_log_adaptive.application.ports import ConsolePort, EnvironmentPort
from lib_log_adaptive.domain import ExportFilter, ExportFormat, ExportOptions, ExportResult

from ._composition import Logger, build_logger
from ._settings import LoggerConfig, build_logger_config
from ._state import LoggingRuntime, current_runtime, install_runtime, is_initialised, release_runtime

__all__ = [
    "Logger",
    "LoggerConfig",
    "LoggingRuntime",
    "RichConsoleAdapter",
    "build_logger",
    "export",
    "get",
    "init",
    "is_initialised",
    "shutdown",
    "shutdown_async",
    "summary_info",
]


def init(
    config: LoggerConfig | None = None,
    *,
    console: ConsolePort | None = None,
    environment: EnvironmentPort | None = None,
    **overrides: Any,
) -> Logger:
    """Compose the root logger and install it as the process-wide runtime.

    Inputs
    ------
    config:
        Optional base :class:`LoggerConfig`; ``LOG_*`` environment variables
        and then ``overrides`` are layered on top.
    console / environment:
        Adapter overrides, mainly for tests.

    Raises
    ------
    RuntimeError
        When a root logger is already installed; call :func:`shutdown` first.
    """

    settings = build_logger_config(config, **overrides)
    root = build_logger(settings, console=console, environment=environment)
    install_runtime(LoggingRuntime(logger=root, config=settings))
    return root


def get(prefix: str | None = None) -> Logger:
    """Return the root logger, or a child scoped to ``prefix``.

    Raises :class:`RuntimeError` when ``init`` has not been called.
    """

    root = current_runtime().logger
    return root.scope(prefix) if prefix else root


def export(
    export_format: ExportFormat | str = ExportFormat.JSON,
    *,
    filters: ExportFilter | None = None,
    options: ExportOptions | None = None,
    path: str | Path | None = None,
    **criteria: Any,
) -> ExportResult:
    """Export the root logger's buffer; see :meth:`Logger.export`."""

    return current_runtime().logger.export(export_format, filters=filters, options=options, path=path, **criteria)


def shutdown() -> None:
    """Blocking variant of :func:`shutdown_async` for code without an event loop.

    Inside a running loop this raises :class:`RuntimeError`; await
    :func:`shutdown_async` there instead.
    """

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        pass
    else:
        raise RuntimeError("lib_log_adaptive.shutdown() cannot run inside an active event loop; await lib_log_adaptive.shutdown_async() instead")
    asyncio.run(shutdown_async())


async def shutdown_async() -> None:
    """Flush and close transports, then clear the runtime singleton."""

    root = current_runtime().logger
    try:
        await root.shutdown()
    finally:
        release_runtime()


def summary_info() -> str:
    """Return the metadata banner used by the CLI entry point and docs."""

    from .. import __init__conf__

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)
