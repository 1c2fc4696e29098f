"""Export formatter rendering record sets as JSON, CSV, Markdown, plain text or HTML.

Outputs
-------
* JSON arrays of record projections (pretty or compact).
* CSV with a fixed header row and quote-doubled message/argument cells.
* Markdown with an optional summary and optional per-level sections.
* Plain text with a fixed-width level column, optionally coloured via Rich.
* Self-contained HTML with per-level CSS classes and escaped text.

Purpose
-------
Turn buffer query results into shareable artefacts without depending on any
external sink.

Contents
--------
* :class:`ExportFormatter` - implementation of :class:`ExportFormatterPort`.

System Role
-----------
Called by :func:`lib_log_adaptive.application.use_cases.export.create_export`.
Argument lists go through the :class:`SerializerRegistry`, so cyclic or deep
arguments never break an export. Zero records always yield a well-formed
document.
"""

from __future__ import annotations

import html
import json
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from rich.console import Console
from rich.text import Text

from lib_log_adaptive import __init__conf__
from lib_log_adaptive.application.ports.export import ExportFormatterPort
from lib_log_adaptive.domain.export import ExportFormat, ExportOptions
from lib_log_adaptive.domain.levels import LogLevel
from lib_log_adaptive.domain.record import LogRecord

from ._formatting import build_display_payload, format_display_time
from .serializer import SerializerRegistry, default_registry

_STYLED_LEVELS: dict[LogLevel, str] = {
    LogLevel.DEBUG: "magenta",
    LogLevel.INFO: "blue",
    LogLevel.WARN: "yellow",
    LogLevel.ERROR: "red",
    LogLevel.CRITICAL: "bold white on red",
}

_CSV_HEADER = ("Timestamp", "Level", "Prefix", "Message", "File", "Line", "Args")
_CSV_HEADER_MINIMAL = _CSV_HEADER[:4]

_HTML_STYLE = """\
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; margin: 20px; line-height: 1.6; }
        .header { border-bottom: 2px solid #ddd; padding-bottom: 20px; margin-bottom: 20px; }
        .log-entry { margin: 5px 0; padding: 8px; border-radius: 4px; font-family: 'Monaco', 'Consolas', monospace; }
        .timestamp { color: #666; font-size: 0.9em; }
        .level { font-weight: bold; padding: 2px 6px; border-radius: 3px; margin: 0 8px; }
        .prefix { background: #2d3748; color: #e2e8f0; padding: 2px 6px; border-radius: 3px; margin: 0 8px; }
        .location { color: #718096; font-size: 0.9em; }
        .debug { background: #f0f4ff; }
        .info { background: #f0f9ff; }
        .warn { background: #fffbeb; }
        .error { background: #fef2f2; }
        .critical { background: #fef2f2; border-left: 4px solid #dc2626; }
        .level.debug { background: #667eea; color: white; }
        .level.info { background: #74b9ff; color: white; }
        .level.warn { background: #fdcb6e; color: #2d3436; }
        .level.error { background: #e84393; color: white; }
        .level.critical { background: #ff3838; color: white; }"""


def _csv_quote(value: str) -> str:
    """Wrap ``value`` in double quotes, doubling any embedded quote.

    Examples
    --------
    >>> _csv_quote('a "b" c')
    '"a ""b"" c"'
    """
    return '"' + value.replace('"', '""') + '"'


def _csv_cell(value: str) -> str:
    if any(char in value for char in ',"\n\r'):
        return _csv_quote(value)
    return value


class ExportFormatter(ExportFormatterPort):
    """Render filtered records into one of the supported export formats."""

    def __init__(self, *, serializer: SerializerRegistry | None = None) -> None:
        self._serializer = serializer

    @property
    def serializer(self) -> SerializerRegistry:
        return self._serializer or default_registry()

    def format(
        self,
        records: Sequence[LogRecord],
        export_format: ExportFormat,
        options: ExportOptions,
        *,
        exported_at: datetime,
    ) -> str:
        """Render ``records`` according to ``export_format``.

        Examples
        --------
        >>> from datetime import timezone
        >>> now = datetime(2025, 1, 1, tzinfo=timezone.utc)
        >>> ExportFormatter().format([], ExportFormat.JSON, ExportOptions(compact=True), exported_at=now)
        '[]'
        >>> ExportFormatter().format([], ExportFormat.CSV, ExportOptions(minimal=True), exported_at=now)
        'Timestamp,Level,Prefix,Message'
        """
        if export_format is ExportFormat.JSON:
            return self._render_json(records, options)
        if export_format is ExportFormat.CSV:
            return self._render_csv(records, options)
        if export_format is ExportFormat.MARKDOWN:
            return self._render_markdown(records, options, exported_at)
        if export_format is ExportFormat.PLAIN:
            return self._render_plain(records, options)
        if export_format is ExportFormat.HTML:
            return self._render_html(records, exported_at)
        raise ValueError(f"Unsupported export format: {export_format!r}")  # pragma: no cover - exhaustiveness guard

    def _serialize_args(self, record: LogRecord) -> list[Any]:
        serialized = self.serializer.serialize(list(record.args))
        return serialized if isinstance(serialized, list) else [serialized]

    def _render_json(self, records: Sequence[LogRecord], options: ExportOptions) -> str:
        payload: list[dict[str, Any]] = []
        for record in records:
            item: dict[str, Any] = {
                "id": record.record_id,
                "timestamp": record.timestamp.isoformat(),
                "level": record.level.severity,
                "prefix": record.prefix,
                "message": record.message,
            }
            if not options.minimal:
                item["args"] = self._serialize_args(record)
                item["location"] = record.location.to_dict() if record.location else None
                item["group_info"] = record.group_info.to_dict() if record.group_info else None
            payload.append(item)
        if options.compact:
            return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)
        return json.dumps(payload, indent=2, ensure_ascii=False, default=str)

    def _render_csv(self, records: Sequence[LogRecord], options: ExportOptions) -> str:
        header = _CSV_HEADER_MINIMAL if options.minimal else _CSV_HEADER
        lines = [",".join(header)]
        for record in records:
            data = build_display_payload(record)
            row = [data["time_full"], data["LEVEL"], _csv_cell(data["prefix"]), _csv_quote(record.message)]
            if not options.minimal:
                args = json.dumps(self._serialize_args(record), ensure_ascii=False, default=str)
                row.extend([_csv_cell(data["file"]), data["line"], _csv_quote(args)])
            lines.append(",".join(row))
        return "\n".join(lines)

    @staticmethod
    def _markdown_line(record: LogRecord, *, with_emoji: bool) -> str:
        data = build_display_payload(record)
        emoji = f" {data['emoji']}" if with_emoji else ""
        prefix = f" **{data['prefix']}**:" if data["prefix"] else ""
        location = f" ({data['location']})" if data["location"] else ""
        return f"- `{data['time_only']}`{emoji}{prefix} {record.message}{location}"

    def _render_markdown(self, records: Sequence[LogRecord], options: ExportOptions, exported_at: datetime) -> str:
        lines = [f"# Log Export - {format_display_time(exported_at)}", ""]
        if not options.minimal:
            errors = sum(1 for record in records if record.level.is_error)
            warnings = sum(1 for record in records if record.level is LogLevel.WARN)
            lines.extend(["## Summary", f"- **Total logs**: {len(records)}", f"- **Errors**: {errors}", f"- **Warnings**: {warnings}", ""])

        if options.group_by == "level":
            grouped: dict[LogLevel, list[LogRecord]] = {}
            for record in records:
                grouped.setdefault(record.level, []).append(record)
            for level, members in grouped.items():
                lines.extend([f"## {level.emoji} {level.label} ({len(members)})", ""])
                lines.extend(self._markdown_line(record, with_emoji=False) for record in members)
                lines.append("")
        else:
            lines.extend(["## Logs", ""])
            lines.extend(self._markdown_line(record, with_emoji=True) for record in records)
        return "\n".join(lines) + "\n"

    def _render_plain(self, records: Sequence[LogRecord], options: ExportOptions) -> str:
        """Render one line per record, coloured per level when ``styled`` is set."""

        if not records:
            return ""
        console: Console | None = None
        if options.styled:
            console = Console(color_system="truecolor", force_terminal=True, legacy_windows=False, width=10_000)

        lines: list[str] = []
        for record in records:
            data = build_display_payload(record)
            stamp = data["time_only"] if options.minimal else data["time_short"]
            prefix = f"[{data['prefix']}] " if data["prefix"] else ""
            location = f" ({data['location']})" if data["location"] and not options.minimal else ""
            line = f"{stamp} {data['LEVEL']:<8} {prefix}{record.message}{location}"
            if console is not None:
                with console.capture() as capture:
                    console.print(Text(line, style=_STYLED_LEVELS[record.level]), end="", markup=False, highlight=False)
                line = capture.get()
            lines.append(line)
        return "\n".join(lines)

    @staticmethod
    def _render_html(records: Sequence[LogRecord], exported_at: datetime) -> str:
        title = f"Log Export - {format_display_time(exported_at)}"
        entries: list[str] = []
        for record in records:
            data = build_display_payload(record)
            level = record.level.severity
            prefix = f' <span class="prefix">{html.escape(data["prefix"])}</span>' if data["prefix"] else ""
            location = f' <span class="location">({html.escape(data["location"])})</span>' if data["location"] else ""
            entries.append(
                f'        <div class="log-entry {level}">\n'
                f'            <span class="timestamp">{html.escape(data["time_full"])}</span>\n'
                f'            <span class="level {level}">{data["LEVEL"]}</span>{prefix}\n'
                f'            <span class="message">{html.escape(record.message)}</span>{location}\n'
                "        </div>"
            )
        body = "\n".join(entries)
        return (
            "<!DOCTYPE html>\n"
            '<html lang="en">\n'
            "<head>\n"
            '    <meta charset="UTF-8">\n'
            '    <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
            f"    <title>{html.escape(title)}</title>\n"
            f"    <style>\n{_HTML_STYLE}\n    </style>\n"
            "</head>\n"
            "<body>\n"
            '    <div class="header">\n'
            f"        <h1>{html.escape(title)}</h1>\n"
            f"        <p>Generated by {html.escape(__init__conf__.name)} {html.escape(__init__conf__.version)}</p>\n"
            "    </div>\n"
            '    <div class="logs">\n'
            f"{body}\n"
            "    </div>\n"
            "</body>\n"
            "</html>\n"
        )


__all__ = ["ExportFormatter"]
