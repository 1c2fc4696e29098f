"""Export format enumeration, options and result value objects.

Purpose
-------
Standardise the supported export targets and the option surface shared by
the formatter adapter, the export use case and the CLI.

Contents
--------
* :class:`ExportFormat` enumeration with parsing helpers and file metadata.
* :class:`ExportOptions` shaping flags.
* :class:`ExportResult` returned by the export use case.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ExportFormat(Enum):
    """Define the supported export targets.

    Examples
    --------
    >>> ExportFormat.MARKDOWN.value
    'markdown'
    >>> ExportFormat.CSV.extension
    '.csv'
    """

    JSON = "json"
    CSV = "csv"
    MARKDOWN = "markdown"
    PLAIN = "plain"
    HTML = "html"

    @property
    def extension(self) -> str:
        return _FILE_META[self][0]

    @property
    def mime_type(self) -> str:
        return _FILE_META[self][1]

    @classmethod
    def from_name(cls, name: "str | ExportFormat") -> "ExportFormat":
        """Return the matching enum member for a case-insensitive name.

        Parameters
        ----------
        name:
            Human-entered string, typically from CLI flags or config files.

        Raises
        ------
        ValueError
            If the provided name is not recognised; the message names it.

        Examples
        --------
        >>> ExportFormat.from_name('JSON') is ExportFormat.JSON
        True
        >>> ExportFormat.from_name(' md ') is ExportFormat.MARKDOWN
        True
        >>> ExportFormat.from_name('yaml')
        Traceback (most recent call last):
        ...
        ValueError: Unsupported export format: 'yaml'
        """

        if isinstance(name, ExportFormat):
            return name
        normalized = str(name).strip().lower()
        normalized = _ALIASES.get(normalized, normalized)
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unsupported export format: {name!r}")


_ALIASES = {"md": "markdown", "txt": "plain", "text": "plain", "htm": "html"}

_FILE_META = {
    ExportFormat.JSON: (".json", "application/json"),
    ExportFormat.CSV: (".csv", "text/csv"),
    ExportFormat.MARKDOWN: (".md", "text/markdown"),
    ExportFormat.PLAIN: (".txt", "text/plain"),
    ExportFormat.HTML: (".html", "text/html"),
}


@dataclass(slots=True, frozen=True)
class ExportOptions:
    """Output shaping flags.

    Attributes
    ----------
    minimal:
        Drop arguments, location and group metadata (and the Markdown summary).
    compact:
        Remove formatting whitespace from JSON.
    group_by:
        ``"level"`` groups Markdown output into one section per level.
    styled:
        Colour plain-text output with per-level styles.
    """

    minimal: bool = False
    compact: bool = False
    group_by: str | None = None
    styled: bool = False

    def __post_init__(self) -> None:
        if self.group_by is not None and self.group_by != "level":
            raise ValueError(f"Unsupported group_by value: {self.group_by!r}")

    def to_dict(self) -> dict[str, Any]:
        return {"minimal": self.minimal, "compact": self.compact, "group_by": self.group_by, "styled": self.styled}


@dataclass(slots=True, frozen=True)
class ExportResult:
    """Rendered export document plus bookkeeping metadata."""

    format: ExportFormat
    data: str
    metadata: dict[str, Any] = field(default_factory=dict)


__all__ = ["ExportFormat", "ExportOptions", "ExportResult"]
