"""Export port defining how record sets become documents.

Purpose
-------
Describe the formatter contract so the export use case can produce JSON,
CSV, Markdown, plain-text or HTML documents without coupling to the adapter
implementation.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable

from lib_log_adaptive.domain.export import ExportFormat, ExportOptions
from lib_log_adaptive.domain.record import LogRecord


@runtime_checkable
class ExportFormatterPort(Protocol):
    """Render an already-filtered record sequence into one export format."""

    def format(
        self,
        records: Sequence[LogRecord],
        export_format: ExportFormat,
        options: ExportOptions,
        *,
        exported_at: datetime,
    ) -> str:
        """Return the document; an empty ``records`` still yields valid output."""


__all__ = ["ExportFormatterPort"]
