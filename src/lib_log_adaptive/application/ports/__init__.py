"""Protocols describing the boundaries between use cases and adapters."""

from __future__ import annotations

from .console import ConsolePort
from .environment import EnvironmentPort
from .export import ExportFormatterPort
from .handler import LogHandlerPort
from .renderer import RendererPort
from .time import ClockPort, IdProvider
from .transport import TransportPort

__all__ = [
    "ClockPort",
    "ConsolePort",
    "EnvironmentPort",
    "ExportFormatterPort",
    "IdProvider",
    "LogHandlerPort",
    "RendererPort",
    "TransportPort",
]
