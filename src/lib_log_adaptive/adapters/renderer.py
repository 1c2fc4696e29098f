"""Adaptive renderer composing records for CSS, ANSI and plain-text targets.

Purpose
-------
Turn a :class:`~lib_log_adaptive.domain.record.LogRecord`, a
:class:`~lib_log_adaptive.domain.styles.StyleConfig` and an
:class:`~lib_log_adaptive.domain.environment.OutputTarget` into a
:class:`~lib_log_adaptive.domain.styles.RenderedOutput`.

Contents
--------
* :class:`PartComposer` - generic composer driven purely by ``StyleConfig``.
* Preset composers (``neon``, ``minimal``, ``production``, ``debug``, ``glass``)
  overriding individual parts.
* :class:`AdaptiveRenderer` - cache-aware entry point implementing
  :class:`~lib_log_adaptive.application.ports.RendererPort`.

System Role
-----------
Composers produce *templates*: the styled skeleton of a line with
placeholders for the per-record values (timestamp, prefix, message,
location, indentation). Templates are cached by render shape, so a cache hit
only substitutes values. Parts always appear in the order timestamp, level,
prefix, message, location.

Alignment Notes
---------------
Rendering never raises. If CSS (or ANSI) composition fails, that single call
falls back to the plain-text composer and the failure is logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping

from lib_log_adaptive.application.ports.renderer import RendererPort
from lib_log_adaptive.domain.colors import SGR, ColorCapability, color_to_hex, to_ansi
from lib_log_adaptive.domain.environment import OutputTarget
from lib_log_adaptive.domain.levels import LogLevel
from lib_log_adaptive.domain.record import LogRecord
from lib_log_adaptive.domain.styles import LevelTheme, PartStyle, RenderedOutput, StyleBuilder, StyleConfig, resolve_theme

from .style_cache import StyleCache, StyleKey

logger = logging.getLogger(__name__)

RESET = SGR["reset"]

_TERMINAL_LEVEL_COLORS: Mapping[LogLevel, str] = {
    LogLevel.DEBUG: "magenta",
    LogLevel.INFO: "blue",
    LogLevel.WARN: "yellow",
    LogLevel.ERROR: "red",
    LogLevel.CRITICAL: "red",
}

_NEON_COLORS: Mapping[LogLevel, str] = {
    LogLevel.DEBUG: "#ff00ff",
    LogLevel.INFO: "#00ffff",
    LogLevel.WARN: "#ffff00",
    LogLevel.ERROR: "#ff0040",
    LogLevel.CRITICAL: "#ff0000",
}

_MINIMAL_COLORS: Mapping[LogLevel, str] = {
    LogLevel.DEBUG: "#c678dd",
    LogLevel.INFO: "#61afef",
    LogLevel.WARN: "#e5c07b",
    LogLevel.ERROR: "#e06c75",
    LogLevel.CRITICAL: "#be5046",
}

_SHORT_LABELS: Mapping[LogLevel, str] = {
    LogLevel.DEBUG: "DBG",
    LogLevel.INFO: "INF",
    LogLevel.WARN: "WRN",
    LogLevel.ERROR: "ERR",
    LogLevel.CRITICAL: "CRT",
}


def _literal(text: str) -> str:
    """Escape ``text`` for inclusion in a ``str.format`` template."""
    return text.replace("{", "{{").replace("}", "}}")


@dataclass(slots=True, frozen=True)
class ComposeContext:
    """Inputs shared by every part of one composition."""

    level: LogLevel
    style: StyleConfig
    palette: LevelTheme
    capability: ColorCapability
    has_prefix: bool
    has_location: bool


Template = tuple[str, tuple[str, ...]]


class PartComposer:
    """Generic composer; subclasses override single parts to form presets.

    Each ``*_ansi`` method returns a template fragment (or ``None`` to omit
    the part); each ``*_css`` method returns a ``(fragment, css)`` pair.
    """

    suppress_prefix = False
    suppress_location = False

    def visible(self, ctx: ComposeContext, part: str) -> bool:
        if not ctx.style.part(part).show:
            return False
        if part == "prefix":
            return ctx.has_prefix and not self.suppress_prefix
        if part == "location":
            return ctx.has_location and not self.suppress_location
        return True

    # plain -----------------------------------------------------------------

    def compose_plain(self, ctx: ComposeContext) -> Template:
        parts: list[str] = []
        if self.visible(ctx, "timestamp"):
            parts.append("[{timestamp}]")
        if self.visible(ctx, "level"):
            parts.append(f"[{_literal(ctx.level.label)}]")
        if self.visible(ctx, "prefix"):
            parts.append("[{prefix}]")
        if self.visible(ctx, "message"):
            parts.append("{message}")
        if self.visible(ctx, "location"):
            parts.append("({location})")
        return "{indent}" + " ".join(parts), ()

    # ansi ------------------------------------------------------------------

    def compose_ansi(self, ctx: ComposeContext) -> Template:
        builders: tuple[tuple[str, Callable[[ComposeContext], str | None]], ...] = (
            ("timestamp", self.timestamp_ansi),
            ("level", self.level_ansi),
            ("prefix", self.prefix_ansi),
            ("message", self.message_ansi),
            ("location", self.location_ansi),
        )
        fragments: list[str] = []
        for part, build in builders:
            fragment = build(ctx) if self.visible(ctx, part) else None
            if fragment:
                fragments.append(fragment)
        return "{indent}" + " ".join(fragments), ()

    @staticmethod
    def paint(text: str, style: PartStyle, capability: ColorCapability, *, color: str | None = None, background: str | None = None) -> str:
        """Wrap ``text`` in the escape codes implied by ``style``."""
        if capability is ColorCapability.NONE:
            return text
        codes = ""
        if style.bold:
            codes += SGR["bold"]
        if style.dim:
            codes += SGR["dim"]
        if style.italic:
            codes += SGR["italic"]
        if style.underline:
            codes += SGR["underline"]
        codes += to_ansi(color or style.color, capability)
        codes += to_ansi(background or style.background, capability, background=True)
        return f"{codes}{text}{RESET}" if codes else text

    def timestamp_ansi(self, ctx: ComposeContext) -> str | None:
        return self.paint("[{timestamp}]", ctx.style.timestamp, ctx.capability)

    def level_color(self, ctx: ComposeContext) -> tuple[str, str | None]:
        """Return ``(foreground, background)`` of the level badge."""
        if ctx.style.theme == "default":
            return _TERMINAL_LEVEL_COLORS[ctx.level], None
        return ctx.palette.color, ctx.palette.background

    def level_ansi(self, ctx: ComposeContext) -> str | None:
        foreground, background = self.level_color(ctx)
        return self.paint(f"[{_literal(ctx.level.label)}]", ctx.style.level, ctx.capability, color=foreground, background=background)

    def prefix_ansi(self, ctx: ComposeContext) -> str | None:
        return self.paint("[{prefix_upper}]", ctx.style.prefix, ctx.capability)

    def message_ansi(self, ctx: ComposeContext) -> str | None:
        return self.paint("{message}", ctx.style.message, ctx.capability)

    def location_ansi(self, ctx: ComposeContext) -> str | None:
        return self.paint("({location})", ctx.style.location, ctx.capability)

    # css -------------------------------------------------------------------

    def compose_css(self, ctx: ComposeContext) -> Template:
        builders: tuple[tuple[str, Callable[[ComposeContext], tuple[str, str]]], ...] = (
            ("timestamp", self.timestamp_css),
            ("level", self.level_css),
            ("prefix", self.prefix_css),
            ("message", self.message_css),
            ("location", self.location_css),
        )
        fragments: list[str] = []
        styles: list[str] = []
        for part, build in builders:
            if not self.visible(ctx, part):
                continue
            fragment, css = build(ctx)
            fragments.append(f"%c{fragment}")
            styles.append(css)
        return "{indent}" + " ".join(fragments), tuple(styles)

    def timestamp_css(self, ctx: ComposeContext) -> tuple[str, str]:
        return "{timestamp}", StyleBuilder().color("#888888").part(ctx.style.timestamp).build()

    def level_css(self, ctx: ComposeContext) -> tuple[str, str]:
        palette = ctx.palette
        css = StyleBuilder().bg(palette.background).color(palette.color).border(palette.border).shadow(palette.shadow).padding("2px 6px").rounded().part(ctx.style.level).build()
        return _literal(f"{palette.emoji} {palette.label}"), css

    def prefix_css(self, ctx: ComposeContext) -> tuple[str, str]:
        return "{prefix}", StyleBuilder().padding("2px 6px").rounded().part(ctx.style.prefix).build()

    def message_css(self, ctx: ComposeContext) -> tuple[str, str]:
        return "{message}", StyleBuilder().part(ctx.style.message).build()

    def location_css(self, ctx: ComposeContext) -> tuple[str, str]:
        return "({location})", StyleBuilder().color("#999999").part(ctx.style.location).build()


class NeonComposer(PartComposer):
    """High-contrast palette on black."""

    def level_color(self, ctx: ComposeContext) -> tuple[str, str | None]:
        return _NEON_COLORS[ctx.level], "#000000"

    def level_css(self, ctx: ComposeContext) -> tuple[str, str]:
        color = _NEON_COLORS[ctx.level]
        css = StyleBuilder().bg("#000000").color(color).border(f"1px solid {color}").shadow(f"0 0 10px {color}").padding("2px 6px").rounded().bold().build()
        return _literal(f"{ctx.palette.emoji} {ctx.level.label}"), css

    def message_css(self, ctx: ComposeContext) -> tuple[str, str]:
        return "{message}", StyleBuilder().color(_NEON_COLORS[ctx.level]).part(ctx.style.message).build()


class MinimalComposer(PartComposer):
    """Muted palette, no badges."""

    def level_color(self, ctx: ComposeContext) -> tuple[str, str | None]:
        return _MINIMAL_COLORS[ctx.level], None

    def level_css(self, ctx: ComposeContext) -> tuple[str, str]:
        return _literal(ctx.level.label), StyleBuilder().color(_MINIMAL_COLORS[ctx.level]).part(ctx.style.level).build()


class ProductionComposer(PartComposer):
    """Essential information only; prefix and location are always suppressed."""

    suppress_prefix = True
    suppress_location = True


class DebugComposer(PartComposer):
    """Dense monospace layout with a clickable location."""

    def level_ansi(self, ctx: ComposeContext) -> str | None:
        foreground, _ = PartComposer.level_color(self, ctx)
        return self.paint(f"[{_SHORT_LABELS[ctx.level]}]", ctx.style.level, ctx.capability, color=foreground)

    def location_ansi(self, ctx: ComposeContext) -> str | None:
        style = ctx.style.location
        return self.paint("{location}", PartStyle(dim=style.dim, underline=True, color=style.color), ctx.capability)

    def level_css(self, ctx: ComposeContext) -> tuple[str, str]:
        palette = ctx.palette
        css = StyleBuilder().color(color_to_hex(palette.background)).font("monospace").size("11px").part(ctx.style.level).build()
        return _literal(_SHORT_LABELS[ctx.level]), css

    def location_css(self, ctx: ComposeContext) -> tuple[str, str]:
        return "{location}", StyleBuilder().color("#4a90d9").underline().font("monospace").size("11px").build()


class GlassComposer(PartComposer):
    """Translucent badges."""

    def level_color(self, ctx: ComposeContext) -> tuple[str, str | None]:
        return ctx.palette.color if ctx.style.theme != "default" else "#ffffff", "#808080"

    def prefix_ansi(self, ctx: ComposeContext) -> str | None:
        return self.paint("[{prefix_upper}]", ctx.style.prefix, ctx.capability, background="#1e3a5f")

    def level_css(self, ctx: ComposeContext) -> tuple[str, str]:
        palette = ctx.palette
        css = (
            StyleBuilder()
            .bg("rgba(255, 255, 255, 0.1)")
            .color(color_to_hex(palette.background))
            .border("1px solid rgba(255, 255, 255, 0.2)")
            .shadow("0 8px 32px rgba(31, 38, 135, 0.37)")
            .padding("4px 10px")
            .rounded("8px")
            .bold()
            .build()
        )
        return _literal(f"{palette.emoji} {palette.label}"), css

    def prefix_css(self, ctx: ComposeContext) -> tuple[str, str]:
        return "{prefix}", StyleBuilder().bg("#1e3a5f").color("#e2e8f0").padding("2px 8px").rounded("8px").build()


PRESET_COMPOSERS: Mapping[str, PartComposer] = {
    "neon": NeonComposer(),
    "minimal": MinimalComposer(),
    "production": ProductionComposer(),
    "debug": DebugComposer(),
    "glass": GlassComposer(),
}
"""Composer per preset name; unknown or absent presets use :class:`PartComposer`."""

_GENERIC = PartComposer()


def _format_message(record: LogRecord) -> str:
    if not record.args:
        return record.message
    return " ".join([record.message, *(str(arg) for arg in record.args)])


def _format_timestamp(record: LogRecord) -> str:
    local = record.timestamp.astimezone()
    return local.strftime("%H:%M:%S.") + f"{local.microsecond // 1000:03d}"


def _values(record: LogRecord, *, escape_percent: bool) -> dict[str, str]:
    prefix = record.prefix or ""
    values = {
        "timestamp": _format_timestamp(record),
        "prefix": prefix,
        "prefix_upper": prefix.upper(),
        "message": _format_message(record),
        "location": record.location.full() if record.location else "",
        "indent": "  " * (record.group_info.depth if record.group_info else 0),
    }
    if escape_percent:
        values = {key: value.replace("%", "%%") for key, value in values.items()}
    return values


class AdaptiveRenderer(RendererPort):
    """Render records for any :class:`OutputTarget`, caching composed templates.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> record = LogRecord('r1', datetime(2025, 1, 1, tzinfo=timezone.utc), LogLevel.INFO, 'ready', prefix='api')
    >>> renderer = AdaptiveRenderer()
    >>> out = renderer.render(record, StyleConfig(), OutputTarget.PLAIN)
    >>> out.format.endswith('[INFO] [api] ready')
    True
    >>> out.style_args
    ()
    >>> renderer.render(record, StyleConfig(), OutputTarget.CSS).format.count('%c')
    4
    """

    def __init__(self, *, cache_factory: Callable[[], StyleCache] | None = None, cache_enabled: bool = True) -> None:
        self._cache_factory = cache_factory or StyleCache
        self._cache_enabled = cache_enabled
        self._caches: dict[OutputTarget, StyleCache] = {}

    def cache_for(self, target: OutputTarget) -> StyleCache:
        cache = self._caches.get(target)
        if cache is None:
            cache = self._cache_factory()
            cache.set_enabled(self._cache_enabled)
            self._caches[target] = cache
        return cache

    def invalidate(self) -> None:
        """Clear every cached template (used on theme changes)."""

        for cache in self._caches.values():
            cache.clear()

    def set_cache_enabled(self, enabled: bool) -> None:
        self._cache_enabled = enabled
        for cache in self._caches.values():
            cache.set_enabled(enabled)

    def cache_stats(self) -> dict[str, float | int]:
        """Aggregate statistics across the per-target caches."""

        totals = {"size": 0, "hits": 0, "misses": 0}
        for cache in self._caches.values():
            stats = cache.stats()
            for key in totals:
                totals[key] += int(stats[key])
        lookups = totals["hits"] + totals["misses"]
        return {**totals, "hit_rate": totals["hits"] / lookups if lookups else 0.0}

    def render(self, record: LogRecord, style: StyleConfig, target: OutputTarget) -> RenderedOutput:
        """Compose ``record`` for ``target``; never raises."""

        try:
            template, style_args = self._template(record, style, target)
            values = _values(record, escape_percent=target is OutputTarget.CSS)
            return RenderedOutput(template.format_map(values), style_args)
        except Exception as exc:
            logger.debug("Styled composition failed; falling back to plain text", exc_info=exc)
            return self._plain(record, style)

    def _composer(self, style: StyleConfig) -> PartComposer:
        if style.preset is None:
            return _GENERIC
        return PRESET_COMPOSERS.get(style.preset, _GENERIC)

    def _context(self, record: LogRecord, style: StyleConfig, capability: ColorCapability) -> ComposeContext:
        return ComposeContext(
            level=record.level,
            style=style,
            palette=resolve_theme(style.theme)[record.level],
            capability=capability,
            has_prefix=bool(record.prefix),
            has_location=record.has_location,
        )

    def _template(self, record: LogRecord, style: StyleConfig, target: OutputTarget) -> Template:
        key = StyleKey(record.level, style.theme, bool(record.prefix), record.has_location, style.preset)
        cache = self.cache_for(target)
        cached = cache.get(key)
        if cached is not None:
            return cached.format, cached.style_args

        composer = self._composer(style)
        ctx = self._context(record, style, target.capability)
        if target is OutputTarget.CSS:
            template = composer.compose_css(ctx)
        elif target.is_ansi:
            template = composer.compose_ansi(ctx)
        else:
            template = composer.compose_plain(ctx)
        cache.set(key, *template)
        return template

    def _plain(self, record: LogRecord, style: StyleConfig) -> RenderedOutput:
        ctx = self._context(record, style, ColorCapability.NONE)
        template, _ = self._composer(style).compose_plain(ctx)
        return RenderedOutput(template.format_map(_values(record, escape_percent=False)), ())


__all__ = ["PRESET_COMPOSERS", "AdaptiveRenderer", "ComposeContext", "PartComposer"]
