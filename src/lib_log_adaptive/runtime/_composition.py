"""Composition root assembling the logger facade from adapters and use cases.

Purpose
-------
Turn a :class:`LoggerConfig` into a fully wired :class:`Logger`: renderer
with style caches, environment-driven output target, buffer, serializer
registry, export formatter, transport manager, and the process/export/
shutdown use cases.

Contents
--------
* :class:`Logger` - public facade (levels, scopes, groups, styling, exports,
  transports, hooks, timers).
* :func:`build_logger` - composition root.

System Role
-----------
Scoped loggers created with :meth:`Logger.scope` share one pipeline, so the
buffer, caches, handlers and transports are common to the whole tree.
"""

from __future__ import annotations

import inspect
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from types import FrameType
from typing import Any, Callable, Iterator, Sequence

from lib_log_adaptive.adapters import (
    AdaptiveRenderer,
    ExportFormatter,
    OsEnvironment,
    RichConsoleAdapter,
    SerializerRegistry,
    TransportManager,
    format_table,
)
from lib_log_adaptive.adapters.transports.manager import Transform
from lib_log_adaptive.application.hooks import DEFAULT_PRIORITY, HookCallback, HookEvent, HookRegistry, Middleware
from lib_log_adaptive.application.ports import ClockPort, ConsolePort, EnvironmentPort, IdProvider, LogHandlerPort, TransportPort
from lib_log_adaptive.application.use_cases import PipelineState, create_export, create_process_record, create_shutdown
from lib_log_adaptive.application.use_cases.export import ExportCallable
from lib_log_adaptive.application.use_cases.process_record import ProcessCallable, ProcessResult
from lib_log_adaptive.domain import (
    BufferStats,
    ExportFilter,
    ExportFormat,
    ExportOptions,
    ExportResult,
    GroupInfo,
    LogBuffer,
    LogLevel,
    OutputMode,
    OutputTarget,
    SourceLocation,
    StyleConfig,
    preset_style_config,
    resolve_output_target,
)
from lib_log_adaptive.domain.styles import THEMES

from ._factories import SystemClock, UuidProvider, create_renderer
from ._settings import LoggerConfig, parse_verbosity

logger = logging.getLogger(__name__)

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent


def _join_prefix(parent: str | None, name: str | None) -> str | None:
    """Join prefixes with ``:``, skipping empty parts.

    Examples
    --------
    >>> _join_prefix('app', 'db'), _join_prefix(None, 'db'), _join_prefix('app', None)
    ('app:db', 'db', 'app')
    """
    parts = [part for part in (parent, name) if part]
    return ":".join(parts) if parts else None


def _is_internal(frame: FrameType) -> bool:
    filename = frame.f_code.co_filename
    try:
        return Path(filename).resolve().is_relative_to(_PACKAGE_ROOT)
    except (OSError, ValueError):
        return False


def capture_location(start: FrameType | None = None) -> SourceLocation | None:
    """Return the first caller frame outside this package, like ``logging.Logger.findCaller``."""

    frame = start or inspect.currentframe()
    while frame is not None and _is_internal(frame):
        frame = frame.f_back
    if frame is None:
        return None
    info = inspect.getframeinfo(frame, context=0)
    positions = getattr(info, "positions", None)
    column = (positions.col_offset or 0) + 1 if positions is not None and positions.col_offset is not None else 0
    return SourceLocation(file=Path(info.filename).name, line=info.lineno, column=column, function=info.function)


@dataclass(slots=True)
class _Pipeline:
    """Shared collaborators of a logger tree."""

    config: LoggerConfig
    state: PipelineState
    buffer: LogBuffer
    renderer: AdaptiveRenderer
    environment: EnvironmentPort
    serializer: SerializerRegistry
    transports: TransportManager
    process: ProcessCallable
    export: ExportCallable
    shutdown: Callable[[], Any]
    output_mode: OutputMode
    capture_location: bool
    hooks: HookRegistry = field(default_factory=HookRegistry)
    groups: list[str | None] = field(default_factory=list)
    timers: dict[str, float] = field(default_factory=dict)
    perf_counter: Callable[[], float] = time.perf_counter


class Logger:
    """Facade for logging calls, styling, buffering, exports and transports.

    Level helpers return the diagnostic dictionary of the process use case
    (``ok``, ``record_id``, ``buffered``, ``failed_handlers`` or ``reason``).
    """

    def __init__(self, pipeline: _Pipeline, prefix: str | None = None) -> None:
        self._pipeline = pipeline
        self._prefix = prefix

    # logging ---------------------------------------------------------------

    @property
    def prefix(self) -> str | None:
        return self._prefix

    def debug(self, message: Any, *args: Any) -> ProcessResult:
        return self._log(LogLevel.DEBUG, message, args)

    def info(self, message: Any, *args: Any) -> ProcessResult:
        return self._log(LogLevel.INFO, message, args)

    def warn(self, message: Any, *args: Any) -> ProcessResult:
        return self._log(LogLevel.WARN, message, args)

    warning = warn

    def error(self, message: Any, *args: Any) -> ProcessResult:
        return self._log(LogLevel.ERROR, message, args)

    def critical(self, message: Any, *args: Any) -> ProcessResult:
        return self._log(LogLevel.CRITICAL, message, args)

    def log(self, level: LogLevel | str | int, message: Any, *args: Any) -> ProcessResult:
        return self._log(LogLevel.coerce(level), message, args)

    def log_with_bindings(
        self,
        level: LogLevel | str | int,
        message: Any,
        *args: Any,
        scope: str | None = None,
        badges: Sequence[str] = (),
    ) -> ProcessResult:
        """Log with ``[badge]...[scope]`` tags prepended to the message.

        Unlike :meth:`scope` the tags apply to this one call only.
        """

        tags = "".join(f"[{badge}]" for badge in badges) + (f"[{scope}]" if scope else "")
        text = message if isinstance(message, str) else str(message)
        return self._log(LogLevel.coerce(level), f"{tags} {text}" if tags else text, args)

    def table(self, data: Any, columns: Sequence[str] | None = None) -> ProcessResult:
        """Log ``data`` as an ASCII table at ``INFO``; see :func:`~lib_log_adaptive.adapters.table.format_table`."""

        if not self._pipeline.state.accepts(LogLevel.INFO):
            return self._pipeline.process(level=LogLevel.INFO, message="")
        return self._log(LogLevel.INFO, f"TABLE\n{format_table(data, columns)}", ())

    def _log(self, level: LogLevel, message: Any, args: tuple[Any, ...]) -> ProcessResult:
        pipeline = self._pipeline
        if not pipeline.state.accepts(level):
            return pipeline.process(level=level, message="")
        groups = pipeline.groups
        return pipeline.process(
            level=level,
            message=message if isinstance(message, str) else str(message),
            args=args,
            prefix=self._prefix,
            location=capture_location() if pipeline.capture_location else None,
            group_info=GroupInfo(depth=len(groups), name=groups[-1]) if groups else None,
        )

    # scopes and groups -----------------------------------------------------

    def scope(self, name: str) -> "Logger":
        """Return a child logger whose prefix is ``<prefix>:<name>``."""

        return Logger(self._pipeline, _join_prefix(self._prefix, name))

    def group(self, name: str | None = None) -> None:
        """Indent subsequent records one level deeper."""

        self._pipeline.groups.append(name)

    def group_end(self) -> None:
        if self._pipeline.groups:
            self._pipeline.groups.pop()

    @contextmanager
    def grouped(self, name: str | None = None) -> Iterator["Logger"]:
        self.group(name)
        try:
            yield self
        finally:
            self.group_end()

    # styling and output ----------------------------------------------------

    @property
    def style(self) -> StyleConfig:
        return self._pipeline.state.style

    @property
    def target(self) -> OutputTarget:
        return self._pipeline.state.target

    def set_theme(self, theme: str) -> None:
        """Switch theme and drop every cached style."""

        normalized = theme.strip().lower()
        if normalized not in THEMES:
            raise ValueError(f"Unknown theme: {theme!r}")
        state = self._pipeline.state
        state.style = state.style.with_theme(normalized)
        self._pipeline.renderer.invalidate()

    def set_preset(self, preset: str | None) -> None:
        """Apply a preset's default styles (``None`` restores the generic styles)."""

        state = self._pipeline.state
        state.style = preset_style_config(preset, theme=state.style.theme)
        self._pipeline.renderer.invalidate()

    def set_style(self, part: str, **changes: Any) -> None:
        """Change one part's :class:`PartStyle` fields, e.g. ``set_style('location', show=False)``.

        Cached templates are keyed by render shape only, so they are dropped.
        """

        state = self._pipeline.state
        state.style = state.style.with_part(part, **changes)
        self._pipeline.renderer.invalidate()

    def set_output_mode(self, mode: OutputMode | str) -> OutputTarget:
        """Re-resolve the output target for ``mode`` against a fresh environment snapshot."""

        pipeline = self._pipeline
        pipeline.output_mode = OutputMode.from_name(mode) if isinstance(mode, str) else mode
        pipeline.state.target = resolve_output_target(pipeline.output_mode, pipeline.environment.snapshot())
        return pipeline.state.target

    def set_verbosity(self, level: LogLevel | str | int | None) -> None:
        """Set the minimum level; ``"silent"`` (or ``None``) discards everything."""

        self._pipeline.state.threshold = parse_verbosity(level)

    def cache_stats(self) -> dict[str, float | int]:
        return self._pipeline.renderer.cache_stats()

    # handlers and serializers ----------------------------------------------

    def add_handler(self, handler: LogHandlerPort) -> None:
        self._pipeline.state.handlers.append(handler)

    def remove_handler(self, handler: LogHandlerPort) -> bool:
        handlers = self._pipeline.state.handlers
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def add_serializer(self, predicate: Any, serializer: Callable[..., Any], *, priority: int = 50, name: str | None = None) -> None:
        self._pipeline.serializer.register(predicate, serializer, priority=priority, name=name)

    @property
    def serializer(self) -> SerializerRegistry:
        return self._pipeline.serializer

    # hooks and timers --------------------------------------------------------

    @property
    def hooks(self) -> HookRegistry:
        return self._pipeline.hooks

    def on(self, event: HookEvent | str, callback: HookCallback, *, priority: int = DEFAULT_PRIORITY) -> Callable[[], None]:
        """Register a ``before_log``/``after_log``/``on_error`` hook; returns an unsubscribe callable."""

        return self._pipeline.hooks.on(event, callback, priority=priority)

    def once(self, event: HookEvent | str, callback: HookCallback, *, priority: int = DEFAULT_PRIORITY) -> Callable[[], None]:
        return self._pipeline.hooks.once(event, callback, priority=priority)

    def off(self, event: HookEvent | str, callback: HookCallback) -> bool:
        return self._pipeline.hooks.off(event, callback)

    def use(self, middleware: Middleware, *, priority: int = DEFAULT_PRIORITY) -> Callable[[], None]:
        """Add middleware ``(record, next)``; returning ``None`` suppresses the record."""

        return self._pipeline.hooks.use(middleware, priority=priority)

    def time(self, label: str) -> None:
        """Start, or restart, the timer ``label``."""

        pipeline = self._pipeline
        pipeline.timers[label] = pipeline.perf_counter()
        self._log(LogLevel.INFO, f"Timer started: {label}", ())

    def time_end(self, label: str) -> float | None:
        """Stop ``label`` and log the elapsed milliseconds.

        Returns the elapsed time, or ``None`` (after a warning) when no such
        timer is running.
        """

        pipeline = self._pipeline
        started = pipeline.timers.pop(label, None)
        if started is None:
            self._log(LogLevel.WARN, f"Timer '{label}' does not exist", ())
            return None
        elapsed = (pipeline.perf_counter() - started) * 1000.0
        self._log(LogLevel.INFO, f"Timer ended: {label} - {elapsed:.2f}ms", ())
        return elapsed

    # transports --------------------------------------------------------------

    @property
    def transports(self) -> TransportManager:
        return self._pipeline.transports

    def add_transport(self, transport: TransportPort, *, level: LogLevel | str | None = None, transform: Transform | None = None) -> str:
        return self._pipeline.transports.add(transport, level=level, transform=transform)

    async def remove_transport(self, transport_id: str) -> bool:
        return await self._pipeline.transports.remove(transport_id)

    async def flush_transports(self) -> None:
        await self._pipeline.transports.flush()

    async def close_transports(self) -> None:
        await self._pipeline.transports.close()

    # buffer and exports ----------------------------------------------------

    def export(
        self,
        export_format: ExportFormat | str = ExportFormat.JSON,
        *,
        filters: ExportFilter | None = None,
        options: ExportOptions | None = None,
        path: str | Path | None = None,
        **criteria: Any,
    ) -> ExportResult:
        """Export buffered records; ``criteria`` are :class:`ExportFilter` fields.

        Raises
        ------
        ValueError
            If both ``filters`` and keyword criteria are given, or for an
            unsupported format.
        """

        if criteria:
            if filters is not None:
                raise ValueError("Pass either filters or keyword criteria, not both")
            filters = ExportFilter(**criteria)
        return self._pipeline.export(export_format, filters=filters, options=options, path=path)

    def buffer_stats(self) -> BufferStats:
        return self._pipeline.buffer.stats()

    def clear_buffer(self) -> None:
        self._pipeline.buffer.clear()

    def set_buffer_size(self, size: int) -> int:
        """Resize the buffer; returns the clamped capacity."""

        return self._pipeline.buffer.resize(size)

    def set_buffer_enabled(self, enabled: bool) -> None:
        self._pipeline.state.buffer_enabled = enabled

    @property
    def buffer(self) -> LogBuffer:
        return self._pipeline.buffer

    async def shutdown(self) -> None:
        """Flush and close every transport."""

        await self._pipeline.shutdown()


def build_logger(
    config: LoggerConfig | None = None,
    *,
    console: ConsolePort | None = None,
    environment: EnvironmentPort | None = None,
    renderer: AdaptiveRenderer | None = None,
    clock: ClockPort | None = None,
    id_provider: IdProvider | None = None,
    serializer: SerializerRegistry | None = None,
    use_console: bool = True,
    perf_counter: Callable[[], float] | None = None,
) -> Logger:
    """Assemble a :class:`Logger` from ``config`` and optional adapter overrides.

    Examples
    --------
    >>> from io import StringIO
    >>> from rich.console import Console
    >>> sink = Console(file=StringIO(), width=200)
    >>> log = build_logger(LoggerConfig(output_mode='plain', capture_location=False), console=RichConsoleAdapter(console=sink))
    >>> log.scope('api').info('ready')['ok']
    True
    >>> '[INFO] [api] ready' in sink.file.getvalue()
    True
    """
    settings = config or LoggerConfig()
    env = environment or OsEnvironment()
    active_renderer = renderer or create_renderer(settings)
    active_clock = clock or SystemClock()
    registry = serializer or SerializerRegistry(max_depth=settings.max_depth, cycle_policy=settings.cycle_policy)
    buffer = LogBuffer(settings.buffer_size)
    transports = TransportManager()
    hooks = HookRegistry()

    state = PipelineState(
        style=preset_style_config(settings.preset, theme=settings.theme),
        target=resolve_output_target(settings.output_mode, env.snapshot()),
        threshold=settings.verbosity,
        buffer_enabled=settings.buffer_enabled,
        handlers=[transports],
    )
    console_port: ConsolePort | None = None
    if use_console:
        console_port = console or RichConsoleAdapter()

    pipeline = _Pipeline(
        config=settings,
        state=state,
        buffer=buffer,
        renderer=active_renderer,
        environment=env,
        serializer=registry,
        transports=transports,
        process=create_process_record(
            state=state,
            buffer=buffer,
            renderer=active_renderer,
            console=console_port,
            clock=active_clock,
            id_provider=id_provider or UuidProvider(),
            hooks=hooks,
        ),
        export=create_export(buffer=buffer, formatter=ExportFormatter(serializer=registry), clock=active_clock),
        shutdown=create_shutdown(transports=transports),
        output_mode=settings.output_mode,
        capture_location=settings.capture_location,
        hooks=hooks,
        perf_counter=perf_counter or time.perf_counter,
    )
    return Logger(pipeline, prefix=settings.global_prefix or None)


__all__ = ["Logger", "build_logger", "capture_location"]
