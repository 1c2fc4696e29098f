from __future__ import annotations

from datetime import datetime, timedelta, timezone
from io import StringIO
from typing import Any, Callable

import pytest
from rich.console import Console

from lib_log_adaptive.domain import LogLevel, LogRecord, SourceLocation

BASE_TIME = datetime(2025, 9, 23, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def record_console() -> Console:
    """Rich console that records output without touching the real terminal."""

    return Console(file=StringIO(), record=True, width=200, color_system=None, force_terminal=False)


@pytest.fixture
def make_record() -> Callable[..., LogRecord]:
    """Factory producing records one second apart with stable identifiers."""

    counter = {"value": 0}

    def _make(level: LogLevel | str = LogLevel.INFO, message: str = "hello", *args: Any, **fields: Any) -> LogRecord:
        counter["value"] += 1
        index = counter["value"]
        fields.setdefault("timestamp", BASE_TIME + timedelta(seconds=index))
        return LogRecord(
            record_id=f"rec-{index}",
            level=LogLevel.coerce(level),
            message=message,
            args=args,
            **fields,
        )

    return _make


@pytest.fixture
def location() -> SourceLocation:
    return SourceLocation(file="service.py", line=42, column=7, function="handle")


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME
