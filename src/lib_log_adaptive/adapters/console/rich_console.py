"""Rich-powered console adapter implementing :class:`ConsolePort`.

Purpose
-------
Print rendered records through Rich whatever target they were composed for:
ANSI lines are parsed back into Rich text, plain lines are printed verbatim,
and CSS-styled lines (``%c`` placeholders plus declaration strings) are
translated into Rich styles so browser-style output stays readable in a
terminal.

Contents
--------
* :func:`css_to_style` - translate a CSS declaration string into a Rich style.
* :func:`css_line_to_text` - assemble a ``%c`` formatted line into Rich text.
* :class:`RichConsoleAdapter` - adapter constructed by the runtime.

System Role
-----------
Primary human-facing sink; honours ``force_color``/``no_color`` overrides.
"""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.style import Style
from rich.text import Text

from lib_log_adaptive.application.ports.console import ConsolePort
from lib_log_adaptive.domain.colors import color_to_hex
from lib_log_adaptive.domain.environment import OutputTarget
from lib_log_adaptive.domain.record import LogRecord
from lib_log_adaptive.domain.styles import RenderedOutput


def css_to_style(declarations: str) -> Style:
    """Translate the subset of CSS a terminal can show into a Rich style.

    Examples
    --------
    >>> style = css_to_style('color: rgb(255, 0, 0); font-weight: bold; opacity: 0.7')
    >>> style.color.name, style.bold, style.dim
    ('#ff0000', True, True)
    >>> css_to_style('border-radius: 4px') == Style()
    True
    """
    color: str | None = None
    background: str | None = None
    bold = italic = underline = dim = None
    for declaration in declarations.split(";"):
        prop, _, value = declaration.partition(":")
        prop = prop.strip().lower()
        value = value.strip()
        if not value:
            continue
        if prop == "color":
            color = color_to_hex(value)
        elif prop in ("background", "background-color"):
            background = color_to_hex(value)
        elif prop == "font-weight":
            bold = value.lower() in ("bold", "bolder") or value.isdigit() and int(value) >= 600
        elif prop == "font-style":
            italic = value.lower() == "italic"
        elif prop == "text-decoration":
            underline = "underline" in value.lower()
        elif prop == "opacity":
            try:
                dim = float(value) < 1.0
            except ValueError:
                dim = None
    return Style(color=color, bgcolor=background, bold=bold, italic=italic, underline=underline, dim=dim)


def css_line_to_text(line: str, style_args: Sequence[str]) -> Text:
    """Assemble a ``%c`` formatted line into styled Rich text.

    Each ``%c`` starts a segment styled by the next entry of ``style_args``;
    ``%%`` is an escaped percent sign.

    Examples
    --------
    >>> text = css_line_to_text('  %c[INFO]%c 100%% done', ['font-weight: bold', ''])
    >>> text.plain
    '  [INFO] 100% done'
    """
    text = Text()
    segments = line.replace("%%", "\x00").split("%c")
    text.append(segments[0].replace("\x00", "%"))
    for index, segment in enumerate(segments[1:]):
        css = style_args[index] if index < len(style_args) else ""
        text.append(segment.replace("\x00", "%"), style=css_to_style(css))
    return text


class RichConsoleAdapter(ConsolePort):
    """Print rendered records using Rich."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
    ) -> None:
        """Configure the console adapter with colour overrides."""
        if console is not None:
            self._console = console
        else:
            self._console = Console(force_terminal=force_color or None, no_color=no_color, highlight=False, soft_wrap=True)
        self._no_color = no_color

    @property
    def console(self) -> Console:
        return self._console

    def emit(self, record: LogRecord, rendered: RenderedOutput, *, target: OutputTarget) -> None:
        """Print ``rendered`` for ``record``.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True, width=200)
        >>> adapter = RichConsoleAdapter(console=console)
        >>> from datetime import datetime, timezone
        >>> from lib_log_adaptive.domain.levels import LogLevel
        >>> record = LogRecord('r1', datetime(2025, 1, 1, tzinfo=timezone.utc), LogLevel.INFO, 'msg')
        >>> adapter.emit(record, RenderedOutput('%cINFO%c msg', ('font-weight: bold', '')), target=OutputTarget.CSS)
        >>> console.export_text().strip()
        'INFO msg'
        """
        if target is OutputTarget.CSS:
            text = css_line_to_text(rendered.format, rendered.style_args)
        elif target.is_ansi:
            text = Text.from_ansi(rendered.format)
        else:
            text = Text(rendered.format)
        if self._no_color:
            text = Text(text.plain)
        self._console.print(text, markup=False, highlight=False, soft_wrap=True)


__all__ = ["RichConsoleAdapter", "css_line_to_text", "css_to_style"]
