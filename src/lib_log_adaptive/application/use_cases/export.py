"""Use case exporting buffered records through an export formatter.

Purpose
-------
Provide the application-layer glue between the log buffer and the export
formatter adapter: filter, render, optionally persist, and report metadata.

System Role
-----------
Invoked by :meth:`Logger.export` and the module-level ``export`` helper.
Unlike a dump, exporting never clears the buffer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from lib_log_adaptive.application.ports import ClockPort, ExportFormatterPort
from lib_log_adaptive.domain import ExportFilter, ExportFormat, ExportOptions, ExportResult, LogBuffer

ExportCallable = Callable[..., ExportResult]


def create_export(*, buffer: LogBuffer, formatter: ExportFormatterPort, clock: ClockPort) -> ExportCallable:
    """Return a callable capturing the current dependencies.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> class DummyFormatter:
    ...     def format(self, records, export_format, options, *, exported_at):
    ...         return f'{export_format.value}:{len(records)}'
    >>> class DummyClock:
    ...     def now(self):
    ...         return datetime(2025, 1, 1, tzinfo=timezone.utc)
    >>> export = create_export(buffer=LogBuffer(max_size=5), formatter=DummyFormatter(), clock=DummyClock())
    >>> result = export('csv')
    >>> result.data, result.metadata['total_records'], result.metadata['filtered_records']
    ('csv:0', 0, 0)
    """

    def export(
        export_format: ExportFormat | str,
        *,
        filters: ExportFilter | None = None,
        options: ExportOptions | None = None,
        path: str | Path | None = None,
    ) -> ExportResult:
        """Render the matching records and optionally write them to ``path``.

        Raises
        ------
        ValueError
            If ``export_format`` names an unsupported format.
        """

        resolved = ExportFormat.from_name(export_format)
        shaping = options or ExportOptions()
        exported_at = clock.now()
        records = buffer.query(filters, now=exported_at)
        data = formatter.format(records, resolved, shaping, exported_at=exported_at)
        if path is not None:
            target = Path(path)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(data, encoding="utf-8")
        metadata = {
            "total_records": len(buffer),
            "filtered_records": len(records),
            "exported_at": exported_at.isoformat(),
            "filters": filters.to_dict() if filters is not None else {},
            "options": shaping.to_dict(),
        }
        return ExportResult(format=resolved, data=data, metadata=metadata)

    return export


__all__ = ["ExportCallable", "create_export"]
