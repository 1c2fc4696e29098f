"""Tabular rendering for :meth:`Logger.table`.

Rows may be a sequence of mappings (columns are the union of keys in first
seen order), a sequence of sequences (columns are positions), a mapping of
rows (an ``(index)`` column holds the keys) or a sequence of scalars (a
single ``Values`` column). Rich lays the table out as ASCII text so the
result flows through every output target and export format unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from io import StringIO
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

INDEX_COLUMN = "(index)"
VALUES_COLUMN = "Values"
TABLE_WIDTH = 160


def _is_row_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _rows(data: Any) -> tuple[list[str], list[dict[str, Any]]]:
    if isinstance(data, Mapping):
        items = list(data.items())
    elif _is_row_sequence(data):
        items = list(enumerate(data))
    else:
        raise TypeError(f"table() expects a sequence or mapping of rows, got {type(data).__name__}")

    columns: list[str] = [INDEX_COLUMN]
    rows: list[dict[str, Any]] = []
    for key, value in items:
        if isinstance(value, Mapping):
            cells = {str(name): cell for name, cell in value.items()}
        elif _is_row_sequence(value):
            cells = {str(position): cell for position, cell in enumerate(value)}
        else:
            cells = {VALUES_COLUMN: value}
        for name in cells:
            if name not in columns:
                columns.append(name)
        rows.append({INDEX_COLUMN: key, **cells})
    return columns, rows


def format_table(data: Any, columns: Sequence[str] | None = None) -> str:
    """Render ``data`` as an ASCII table; ``columns`` restricts and orders the data columns.

    Raises
    ------
    TypeError
        When ``data`` is neither a sequence nor a mapping.

    Examples
    --------
    >>> def cells(line):
    ...     return [cell.strip() for cell in line.strip("|").split("|")]
    >>> lines = format_table([{"name": "ana", "age": 30}, {"name": "bo"}]).splitlines()
    >>> cells(lines[1]), cells(lines[3]), cells(lines[4])
    (['(index)', 'name', 'age'], ['0', 'ana', '30'], ['1', 'bo', ''])
    >>> cells(format_table({"a": 1}, columns=["Values"]).splitlines()[3])
    ['a', '1']
    """
    known, rows = _rows(data)
    selected = [INDEX_COLUMN, *(name for name in columns if name != INDEX_COLUMN)] if columns else known

    table = Table(box=box.ASCII, show_header=True, expand=False)
    for name in selected:
        table.add_column(Text(name), overflow="fold")
    for row in rows:
        table.add_row(*(Text("" if name not in row else str(row[name])) for name in selected))

    sink = Console(file=StringIO(), width=TABLE_WIDTH, color_system=None, force_terminal=False, legacy_windows=False)
    sink.print(table)
    return "\n".join(line.rstrip() for line in sink.file.getvalue().splitlines())


__all__ = ["INDEX_COLUMN", "VALUES_COLUMN", "format_table"]
