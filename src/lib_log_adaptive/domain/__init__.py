"""Domain entities and value objects used by the adaptive logging pipeline."""

from __future__ import annotations

from .buffer import BufferStats, LogBuffer
from .colors import ColorCapability
from .environment import EnvironmentSnapshot, OutputMode, OutputTarget, resolve_output_target
from .export import ExportFormat, ExportOptions, ExportResult
from .filters import ExportFilter, parse_time_input
from .levels import LogLevel
from .record import GroupInfo, LogRecord, SourceLocation
from .styles import LevelTheme, PartStyle, RenderedOutput, StyleBuilder, StyleConfig, preset_style_config

__all__ = [
    "BufferStats",
    "ColorCapability",
    "EnvironmentSnapshot",
    "ExportFilter",
    "ExportFormat",
    "ExportOptions",
    "ExportResult",
    "GroupInfo",
    "LevelTheme",
    "LogBuffer",
    "LogLevel",
    "LogRecord",
    "OutputMode",
    "OutputTarget",
    "PartStyle",
    "RenderedOutput",
    "SourceLocation",
    "StyleBuilder",
    "StyleConfig",
    "parse_time_input",
    "preset_style_config",
    "resolve_output_target",
]
