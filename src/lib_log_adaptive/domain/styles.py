"""Style configuration, level themes, preset defaults and the CSS style builder.

Purpose
-------
Describe *what* a rendered line should look like independently of the
output target. The adaptive renderer turns these value objects into CSS
declarations or ANSI sequences.

Contents
--------
* :class:`PartStyle` / :class:`StyleConfig` - per-part visibility and styling.
* :class:`LevelTheme` and :data:`THEMES` - per-level badge palettes.
* :data:`PRESET_NAMES` and :func:`preset_style_config` - preset defaults.
* :class:`StyleBuilder` - chained builder for CSS declaration strings.

System Role
-----------
The active theme is a field of :class:`StyleConfig`, owned by each logger's
configuration, so two loggers can render with different themes side by side.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from .levels import LogLevel


PART_NAMES: tuple[str, ...] = ("timestamp", "level", "prefix", "message", "location")
"""Fixed rendering order of the parts of a line."""


@dataclass(slots=True, frozen=True)
class PartStyle:
    """Visibility and styling of one part of a rendered line."""

    show: bool = True
    color: str | None = None
    background: str | None = None
    bold: bool = False
    dim: bool = False
    italic: bool = False
    underline: bool = False
    font: str | None = None
    size: str | None = None


@dataclass(slots=True, frozen=True)
class StyleConfig:
    """Complete styling input for one render call.

    Examples
    --------
    >>> config = StyleConfig()
    >>> config.theme, config.preset
    ('default', None)
    >>> config.with_part('location', show=False).location.show
    False
    """

    theme: str = "default"
    preset: str | None = None
    timestamp: PartStyle = field(default_factory=lambda: PartStyle(dim=True))
    level: PartStyle = field(default_factory=lambda: PartStyle(bold=True))
    prefix: PartStyle = field(default_factory=lambda: PartStyle(color="cyan", background="black"))
    message: PartStyle = field(default_factory=PartStyle)
    location: PartStyle = field(default_factory=lambda: PartStyle(dim=True))

    def part(self, name: str) -> PartStyle:
        if name not in PART_NAMES:
            raise ValueError(f"Unknown style part: {name!r}")
        return getattr(self, name)

    def with_part(self, name: str, **changes: Any) -> "StyleConfig":
        """Return a copy with ``changes`` applied to the named part."""
        return replace(self, **{name: replace(self.part(name), **changes)})

    def with_theme(self, theme: str) -> "StyleConfig":
        return replace(self, theme=theme)

    def with_preset(self, preset: str | None) -> "StyleConfig":
        return replace(self, preset=preset)


@dataclass(slots=True, frozen=True)
class LevelTheme:
    """Badge palette for one level within a theme."""

    emoji: str
    label: str
    color: str
    background: str
    border: str = "none"
    shadow: str = "none"


def _theme(rows: Mapping[LogLevel, tuple[str, str, str, str, str]]) -> Mapping[LogLevel, LevelTheme]:
    return MappingProxyType(
        {level: LevelTheme(emoji, level.label, color, background, border, shadow) for level, (emoji, color, background, border, shadow) in rows.items()}
    )


THEMES: Mapping[str, Mapping[LogLevel, LevelTheme]] = MappingProxyType(
    {
        "default": _theme(
            {
                LogLevel.DEBUG: ("🐞", "#ffffff", "linear-gradient(135deg, #667eea 0%, #764ba2 100%)", "1px solid #667eea", "0 2px 4px rgba(102, 126, 234, 0.3)"),
                LogLevel.INFO: ("ℹ️", "#ffffff", "linear-gradient(135deg, #74b9ff 0%, #0984e3 100%)", "1px solid #74b9ff", "0 2px 4px rgba(116, 185, 255, 0.3)"),
                LogLevel.WARN: ("⚠️", "#2d3436", "linear-gradient(135deg, #fdcb6e 0%, #e17055 100%)", "1px solid #fdcb6e", "0 2px 4px rgba(253, 203, 110, 0.3)"),
                LogLevel.ERROR: ("❌", "#ffffff", "linear-gradient(135deg, #e84393 0%, #d63031 100%)", "1px solid #e84393", "0 2px 4px rgba(232, 67, 147, 0.3)"),
                LogLevel.CRITICAL: ("🔥", "#ffffff", "linear-gradient(135deg, #ff3838 0%, #ff1744 100%)", "2px solid #ff3838", "0 4px 8px rgba(255, 56, 56, 0.5)"),
            }
        ),
        "dark": _theme(
            {
                LogLevel.DEBUG: ("🌙", "#e2e8f0", "linear-gradient(135deg, #2d3748 0%, #4a5568 100%)", "1px solid #4a5568", "0 2px 4px rgba(45, 55, 72, 0.8)"),
                LogLevel.INFO: ("💡", "#90cdf4", "linear-gradient(135deg, #1a202c 0%, #2d3748 100%)", "1px solid #3182ce", "0 2px 4px rgba(26, 32, 44, 0.8)"),
                LogLevel.WARN: ("⚡", "#faf089", "linear-gradient(135deg, #744210 0%, #975a16 100%)", "1px solid #d69e2e", "0 2px 4px rgba(116, 66, 16, 0.8)"),
                LogLevel.ERROR: ("💀", "#feb2b2", "linear-gradient(135deg, #742a2a 0%, #9b2c2c 100%)", "1px solid #e53e3e", "0 2px 4px rgba(116, 42, 42, 0.8)"),
                LogLevel.CRITICAL: ("💥", "#ffffff", "linear-gradient(135deg, #1a1a1a 0%, #ff0000 100%)", "2px solid #ff0000", "0 4px 8px rgba(255, 0, 0, 0.9)"),
            }
        ),
        "neon": _theme(
            {
                LogLevel.DEBUG: ("⚡", "#00ffff", "linear-gradient(135deg, #0f3460 0%, #e94560 100%)", "1px solid #00ffff", "0 0 10px rgba(0, 255, 255, 0.5)"),
                LogLevel.INFO: ("🔮", "#00ff41", "linear-gradient(135deg, #16213e 0%, #0f3460 100%)", "1px solid #00ff41", "0 0 10px rgba(0, 255, 65, 0.5)"),
                LogLevel.WARN: ("⚠️", "#ffff00", "linear-gradient(135deg, #533a03 0%, #e94560 100%)", "1px solid #ffff00", "0 0 10px rgba(255, 255, 0, 0.5)"),
                LogLevel.ERROR: ("💥", "#ff073a", "linear-gradient(135deg, #5c0a0a 0%, #ff073a 100%)", "1px solid #ff073a", "0 0 10px rgba(255, 7, 58, 0.8)"),
                LogLevel.CRITICAL: ("☢️", "#ff00ff", "linear-gradient(135deg, #000000 0%, #ff00ff 100%)", "2px solid #ff00ff", "0 0 20px rgba(255, 0, 255, 0.9)"),
            }
        ),
        "classic": _theme(
            {
                LogLevel.DEBUG: ("🐞", "#00cdcd", "#000000", "none", "none"),
                LogLevel.INFO: ("ℹ️", "#00cd00", "#000000", "none", "none"),
                LogLevel.WARN: ("⚠️", "#cdcd00", "#000000", "none", "none"),
                LogLevel.ERROR: ("❌", "#ffffff", "#cd0000", "none", "none"),
                LogLevel.CRITICAL: ("🔥", "#ffff00", "#cd00cd", "1px solid #ff00ff", "none"),
            }
        ),
        "pastel": _theme(
            {
                LogLevel.DEBUG: ("🫧", "#4a4e69", "#c9f2e7", "1px solid #9ad1c3", "none"),
                LogLevel.INFO: ("🌤️", "#22577a", "#bde0fe", "1px solid #a2d2ff", "none"),
                LogLevel.WARN: ("🌼", "#6b4f00", "#fff1b6", "1px solid #ffe17d", "none"),
                LogLevel.ERROR: ("🍓", "#7a1e2c", "#ffc6c4", "1px solid #ffa3a0", "none"),
                LogLevel.CRITICAL: ("🌋", "#5a189a", "#e0c3fc", "2px solid #c77dff", "none"),
            }
        ),
    }
)
"""Built-in badge palettes keyed by theme name."""


def resolve_theme(name: str) -> Mapping[LogLevel, LevelTheme]:
    """Return the palette for ``name``, falling back to ``default`` when unknown."""
    return THEMES.get(name.strip().lower(), THEMES["default"])


PRESET_NAMES: tuple[str, ...] = ("neon", "minimal", "production", "debug", "glass")


def preset_style_config(name: str | None, *, theme: str = "default") -> StyleConfig:
    """Return the default :class:`StyleConfig` for a named preset.

    Examples
    --------
    >>> config = preset_style_config('production')
    >>> config.prefix.show, config.location.show
    (False, False)
    >>> preset_style_config('minimal').timestamp.show
    False
    >>> preset_style_config('tiny')
    Traceback (most recent call last):
    ...
    ValueError: Unknown style preset: 'tiny'
    """
    if name is None:
        return StyleConfig(theme=theme)
    normalized = name.strip().lower()
    if normalized not in PRESET_NAMES:
        raise ValueError(f"Unknown style preset: {name!r}")
    base = StyleConfig(theme=theme, preset=normalized)
    if normalized == "neon":
        return replace(
            base,
            timestamp=PartStyle(color="#ff00ff"),
            prefix=PartStyle(color="#00ffff", background="#000000", bold=True),
            message=PartStyle(color="#e0e0e0"),
            location=PartStyle(show=False),
        )
    if normalized == "minimal":
        return replace(
            base,
            timestamp=PartStyle(show=False),
            level=PartStyle(bold=False),
            prefix=PartStyle(color="#abb2bf"),
            location=PartStyle(show=False),
        )
    if normalized == "production":
        return replace(base, prefix=PartStyle(show=False), location=PartStyle(show=False))
    if normalized == "debug":
        return replace(
            base,
            level=PartStyle(bold=False, font="monospace", size="11px"),
            message=PartStyle(font="monospace", size="11px"),
            location=PartStyle(dim=True, underline=True, font="monospace"),
        )
    return replace(
        base,
        level=PartStyle(background="rgba(128, 128, 128, 0.35)", bold=True),
        prefix=PartStyle(color="#e2e8f0", background="#1e3a5f"),
    )


@dataclass(slots=True, frozen=True)
class RenderedOutput:
    """Target-specific output of one render call.

    ``format`` is the composed line (with ``%c`` placeholders on the CSS
    target) and ``style_args`` holds one CSS declaration string per
    placeholder; it is empty on every other target.
    """

    format: str
    style_args: tuple[str, ...] = ()


class StyleBuilder:
    """Chained builder producing a CSS declaration string.

    Examples
    --------
    >>> StyleBuilder().color('#fff').bg('#000').bold().rounded().build()
    'color: #fff; background: #000; font-weight: bold; border-radius: 4px'
    >>> str(StyleBuilder('display: inline-block').padding('2px 6px'))
    'display: inline-block; padding: 2px 6px'
    """

    def __init__(self, base_style: str = "") -> None:
        self._declarations: list[str] = [base_style] if base_style else []

    def _add(self, declaration: str) -> "StyleBuilder":
        self._declarations.append(declaration)
        return self

    def bg(self, background: str) -> "StyleBuilder":
        return self._add(f"background: {background}")

    def color(self, color: str) -> "StyleBuilder":
        return self._add(f"color: {color}")

    def border(self, border: str) -> "StyleBuilder":
        return self._add(f"border: {border}")

    def shadow(self, shadow: str) -> "StyleBuilder":
        return self._add(f"box-shadow: {shadow}")

    def padding(self, padding: str) -> "StyleBuilder":
        return self._add(f"padding: {padding}")

    def margin(self, margin: str) -> "StyleBuilder":
        return self._add(f"margin: {margin}")

    def rounded(self, radius: str = "4px") -> "StyleBuilder":
        return self._add(f"border-radius: {radius}")

    def bold(self) -> "StyleBuilder":
        return self._add("font-weight: bold")

    def italic(self) -> "StyleBuilder":
        return self._add("font-style: italic")

    def font(self, font: str) -> "StyleBuilder":
        return self._add(f"font-family: {font}")

    def size(self, size: str) -> "StyleBuilder":
        return self._add(f"font-size: {size}")

    def underline(self) -> "StyleBuilder":
        return self._add("text-decoration: underline")

    def uppercase(self) -> "StyleBuilder":
        return self._add("text-transform: uppercase")

    def opacity(self, value: float) -> "StyleBuilder":
        return self._add(f"opacity: {value}")

    def display(self, value: str) -> "StyleBuilder":
        return self._add(f"display: {value}")

    def part(self, style: PartStyle) -> "StyleBuilder":
        """Apply every declaration implied by a :class:`PartStyle`."""
        if style.color:
            self.color(style.color)
        if style.background:
            self.bg(style.background)
        if style.bold:
            self.bold()
        if style.italic:
            self.italic()
        if style.underline:
            self.underline()
        if style.dim:
            self.opacity(0.7)
        if style.font:
            self.font(style.font)
        if style.size:
            self.size(style.size)
        return self

    def build(self) -> str:
        return "; ".join(self._declarations)

    def __str__(self) -> str:
        return self.build()


__all__ = [
    "PART_NAMES",
    "PRESET_NAMES",
    "THEMES",
    "LevelTheme",
    "PartStyle",
    "RenderedOutput",
    "StyleBuilder",
    "StyleConfig",
    "preset_style_config",
    "resolve_theme",
]
