"""Console adapters."""

from __future__ import annotations

from .rich_console import RichConsoleAdapter, css_line_to_text, css_to_style

__all__ = ["RichConsoleAdapter", "css_line_to_text", "css_to_style"]
