from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from lib_log_adaptive.adapters.export import ExportFormatter
from lib_log_adaptive.adapters.serializer import SerializerRegistry
from lib_log_adaptive.domain import ExportFormat, ExportOptions, GroupInfo, LogLevel

EXPORTED_AT = datetime(2025, 9, 23, 13, 0, tzinfo=timezone.utc)


def _format(records, export_format: ExportFormat, **options) -> str:
    return ExportFormatter().format(records, export_format, ExportOptions(**options), exported_at=EXPORTED_AT)


def test_json_export_includes_serialized_args(make_record, location) -> None:
    record = make_record(LogLevel.WARN, "slow", {"ms": 1200}, prefix="db", location=location, group_info=GroupInfo(depth=1))

    payload = json.loads(_format([record], ExportFormat.JSON))

    assert payload == [
        {
            "id": record.record_id,
            "timestamp": record.timestamp.isoformat(),
            "level": "warn",
            "prefix": "db",
            "message": "slow",
            "args": [{"ms": 1200}],
            "location": {"file": "service.py", "line": 42, "column": 7, "function": "handle"},
            "group_info": {"depth": 1},
        }
    ]


def test_json_minimal_and_compact(make_record) -> None:
    records = [make_record(LogLevel.INFO, "a"), make_record(LogLevel.INFO, "b")]

    text = _format(records, ExportFormat.JSON, minimal=True, compact=True)

    assert "\n" not in text
    payload = json.loads(text)
    assert len(payload) == 2
    assert set(payload[0]) == {"id", "timestamp", "level", "prefix", "message"}


def test_json_export_uses_the_injected_registry(make_record) -> None:
    loop: dict[str, object] = {}
    loop["self"] = loop
    formatter = ExportFormatter(serializer=SerializerRegistry(cycle_policy="skip"))

    text = formatter.format([make_record(LogLevel.INFO, "loop", loop)], ExportFormat.JSON, ExportOptions(), exported_at=EXPORTED_AT)

    assert json.loads(text)[0]["args"] == [{}]


def test_csv_quotes_messages_and_doubles_embedded_quotes(make_record, location) -> None:
    record = make_record(LogLevel.ERROR, 'said "hi", then left', prefix="chat,room", location=location)

    lines = _format([record], ExportFormat.CSV).splitlines()

    assert lines[0] == "Timestamp,Level,Prefix,Message,File,Line,Args"
    assert lines[1] == f'2025-09-23 12:00:01,ERROR,"chat,room","said ""hi"", then left",service.py,42,"[]"'


def test_csv_minimal_has_four_columns(make_record) -> None:
    lines = _format([make_record(LogLevel.INFO, "plain")], ExportFormat.CSV, minimal=True).splitlines()

    assert lines == ["Timestamp,Level,Prefix,Message", '2025-09-23 12:00:01,INFO,,"plain"']


def test_markdown_groups_by_level_in_first_appearance_order(make_record) -> None:
    records = [
        make_record(LogLevel.INFO, "one"),
        make_record(LogLevel.ERROR, "bad"),
        make_record(LogLevel.INFO, "two"),
        make_record(LogLevel.INFO, "three"),
    ]

    text = _format(records, ExportFormat.MARKDOWN, group_by="level")

    assert text.startswith("# Log Export - 2025-09-23 13:00:00\n")
    assert "- **Total logs**: 4" in text
    assert "- **Errors**: 1" in text
    assert "- **Warnings**: 0" in text
    info_heading = f"## {LogLevel.INFO.emoji} INFO (3)"
    error_heading = f"## {LogLevel.ERROR.emoji} ERROR (1)"
    assert info_heading in text
    assert error_heading in text
    assert text.index(info_heading) < text.index(error_heading)


def test_markdown_list_without_summary_when_minimal(make_record) -> None:
    text = _format([make_record(LogLevel.INFO, "hello", prefix="api")], ExportFormat.MARKDOWN, minimal=True)

    assert "## Summary" not in text
    assert "## Logs" in text
    assert f"- `12:00:01` {LogLevel.INFO.emoji} **api**: hello" in text


def test_plain_export_lines(make_record, location) -> None:
    records = [make_record(LogLevel.INFO, "up", prefix="api", location=location), make_record(LogLevel.ERROR, "down")]

    lines = _format(records, ExportFormat.PLAIN).splitlines()

    assert lines == [
        "09-23 12:00:01 INFO     [api] up (service.py:42)",
        "09-23 12:00:02 ERROR    down",
    ]


def test_plain_export_of_nothing_is_empty() -> None:
    assert _format([], ExportFormat.PLAIN) == ""


def test_styled_plain_export_contains_escape_codes(make_record) -> None:
    text = _format([make_record(LogLevel.ERROR, "down")], ExportFormat.PLAIN, styled=True)

    assert "\x1b[" in text
    assert "down" in text


def test_html_export_escapes_content(make_record) -> None:
    text = _format([make_record(LogLevel.CRITICAL, "<script>alert(1)</script>", prefix="web")], ExportFormat.HTML)

    assert text.startswith("<!DOCTYPE html>")
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in text
    assert "<script>" not in text
    assert '<div class="log-entry critical">' in text
    assert "Generated by lib_log_adaptive" in text


def test_unknown_format_names_are_rejected() -> None:
    with pytest.raises(ValueError):
        ExportFormat.from_name("yaml")
