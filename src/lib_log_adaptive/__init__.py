"""Public package surface of the adaptive console logger.

``init`` installs a process-wide root logger; ``build_logger`` composes an
independent one. Scoped loggers, exports and transports hang off the
returned :class:`Logger`.

Examples
--------
>>> from io import StringIO
>>> from rich.console import Console
>>> sink = Console(file=StringIO(), width=200)
>>> log = build_logger(LoggerConfig(output_mode='plain', capture_location=False), console=RichConsoleAdapter(console=sink))
>>> _ = log.scope('db').warn('slow query')
>>> log.export('csv', options=ExportOptions(minimal=True)).data.splitlines()[0]
'Timestamp,Level,Prefix,Message'
"""

from __future__ import annotations

from .adapters import (
    UNDEFINED,
    AdaptiveRenderer,
    CircularReferenceError,
    CyclePolicy,
    ExportFormatter,
    FileTransport,
    HttpTransport,
    OsEnvironment,
    RichConsoleAdapter,
    SerializerRegistry,
    StyleCache,
    TransportManager,
)
from .application.hooks import HookEvent, HookRegistry
from .domain import (
    ColorCapability,
    EnvironmentSnapshot,
    ExportFilter,
    ExportFormat,
    ExportOptions,
    ExportResult,
    LogLevel,
    LogRecord,
    OutputMode,
    OutputTarget,
    PartStyle,
    StyleBuilder,
    StyleConfig,
)
from .runtime import (
    Logger,
    LoggerConfig,
    build_logger,
    export,
    get,
    init,
    is_initialised,
    shutdown,
    shutdown_async,
    summary_info,
)

__all__ = [
    "UNDEFINED",
    "AdaptiveRenderer",
    "CircularReferenceError",
    "ColorCapability",
    "CyclePolicy",
    "EnvironmentSnapshot",
    "ExportFilter",
    "ExportFormat",
    "ExportFormatter",
    "ExportOptions",
    "ExportResult",
    "FileTransport",
    "HookEvent",
    "HookRegistry",
    "HttpTransport",
    "LogLevel",
    "LogRecord",
    "Logger",
    "LoggerConfig",
    "OsEnvironment",
    "OutputMode",
    "OutputTarget",
    "PartStyle",
    "RichConsoleAdapter",
    "SerializerRegistry",
    "StyleBuilder",
    "StyleCache",
    "StyleConfig",
    "TransportManager",
    "build_logger",
    "export",
    "get",
    "init",
    "is_initialised",
    "shutdown",
    "shutdown_async",
    "summary_info",
]
