"""Utilities that normalise log records into display-friendly dictionaries.

Why
---
Every text-based export (CSV, Markdown, plain text, HTML) shows the same
timestamps, level labels and location strings. Producing them in one place
keeps the formats consistent with each other.

Contents
--------
* :func:`format_display_time` - render a timestamp in one of three styles.
* :func:`build_display_payload` - placeholder values for one record.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from lib_log_adaptive.domain.record import LogRecord

TimeStyle = Literal["full", "short", "time-only"]

_TIME_FORMATS: dict[str, str] = {
    "full": "%Y-%m-%d %H:%M:%S",
    "short": "%m-%d %H:%M:%S",
    "time-only": "%H:%M:%S",
}


def format_display_time(moment: datetime, style: TimeStyle = "full") -> str:
    """Render ``moment`` using the named display style.

    Examples
    --------
    >>> from datetime import timezone
    >>> moment = datetime(2025, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
    >>> format_display_time(moment), format_display_time(moment, 'short'), format_display_time(moment, 'time-only')
    ('2025-03-04 05:06:07', '03-04 05:06:07', '05:06:07')
    """
    try:
        pattern = _TIME_FORMATS[style]
    except KeyError as exc:
        raise ValueError(f"Unknown time style: {style!r}") from exc
    return moment.strftime(pattern)


def build_display_payload(record: LogRecord) -> dict[str, Any]:
    """Return the display strings shared by the text-based exporters."""

    location = record.location
    return {
        "time_full": format_display_time(record.timestamp, "full"),
        "time_short": format_display_time(record.timestamp, "short"),
        "time_only": format_display_time(record.timestamp, "time-only"),
        "level": record.level.severity,
        "LEVEL": record.level.label,
        "emoji": record.level.emoji,
        "prefix": record.prefix or "",
        "message": record.message,
        "file": location.file if location else "",
        "line": str(location.line) if location else "",
        "location": location.short() if location else "",
    }


__all__ = ["build_display_payload", "format_display_time"]
