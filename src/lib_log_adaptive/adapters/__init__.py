"""Adapters implementing the application ports.

Contents
--------
* Rendering: :class:`AdaptiveRenderer` with its :class:`StyleCache`.
* Console: :class:`RichConsoleAdapter`.
* Environment: :class:`OsEnvironment`.
* Serialization and export: :class:`SerializerRegistry`, :class:`ExportFormatter`,
  :func:`format_table`.
* Transports: :class:`TransportManager`, :class:`HttpTransport`, :class:`FileTransport`.
"""

from __future__ import annotations

from .console import RichConsoleAdapter
from .environment import OsEnvironment
from .export import ExportFormatter
from .renderer import AdaptiveRenderer
from .serializer import UNDEFINED, CircularReferenceError, CyclePolicy, SerializerRegistry, default_registry
from .style_cache import StyleCache, StyleKey
from .table import format_table
from .transports import FileTransport, HttpTransport, TransportManager

__all__ = [
    "UNDEFINED",
    "AdaptiveRenderer",
    "CircularReferenceError",
    "CyclePolicy",
    "ExportFormatter",
    "FileTransport",
    "HttpTransport",
    "OsEnvironment",
    "RichConsoleAdapter",
    "SerializerRegistry",
    "StyleCache",
    "StyleKey",
    "TransportManager",
    "default_registry",
    "format_table",
]
