"""Runtime configuration: the :class:`LoggerConfig` value object and env overrides.

Purpose
-------
Collect every knob of the logging pipeline in one frozen dataclass and
resolve it from defaults, an optional base config, environment variables and
explicit keyword overrides (in increasing precedence).

Contents
--------
* :class:`LoggerConfig` - validated configuration.
* :func:`build_logger_config` - precedence-aware builder.
* ``ENV_*`` constants naming the environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from lib_log_adaptive.adapters.serializer import DEFAULT_MAX_DEPTH, CyclePolicy
from lib_log_adaptive.adapters.style_cache import DEFAULT_MAX_ENTRIES, DEFAULT_TTL_SECONDS
from lib_log_adaptive.domain.buffer import DEFAULT_BUFFER_SIZE
from lib_log_adaptive.domain.environment import OutputMode
from lib_log_adaptive.domain.levels import LogLevel
from lib_log_adaptive.domain.styles import PRESET_NAMES, THEMES

ENV_VERBOSITY = "LOG_VERBOSITY"
ENV_OUTPUT_MODE = "LOG_OUTPUT_MODE"
ENV_THEME = "LOG_THEME"
ENV_PRESET = "LOG_PRESET"
ENV_BUFFER_ENABLED = "LOG_BUFFER_ENABLED"
ENV_BUFFER_SIZE = "LOG_BUFFER_SIZE"
ENV_CAPTURE_LOCATION = "LOG_CAPTURE_LOCATION"
ENV_STYLE_CACHE = "LOG_STYLE_CACHE"

SILENT = "silent"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_verbosity(value: LogLevel | str | int | None) -> LogLevel | None:
    """Return the threshold level, or ``None`` for ``silent``.

    Examples
    --------
    >>> parse_verbosity('warning') is LogLevel.WARN
    True
    >>> parse_verbosity('SILENT') is None
    True
    """
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() == SILENT:
        return None
    return LogLevel.coerce(value)


@dataclass(slots=True, frozen=True)
class LoggerConfig:
    """Validated configuration for one logger pipeline.

    Attributes
    ----------
    verbosity:
        Minimum level, or ``None`` to silence every record.
    output_mode:
        :class:`OutputMode`; ``AUTO`` consults the environment.
    theme / preset:
        Visual theme name and optional style preset.
    buffer_enabled / buffer_size:
        Whether records are retained for export, and the capacity.
    capture_location:
        Record the caller's file/line/column.
    cache_enabled / cache_size / cache_ttl:
        Style cache switches.
    global_prefix:
        Prefix prepended to every scoped prefix.
    max_depth / cycle_policy:
        Serializer limits used by exports.

    Examples
    --------
    >>> LoggerConfig(verbosity='warn', output_mode='plain').verbosity is LogLevel.WARN
    True
    >>> LoggerConfig(theme='sepia')
    Traceback (most recent call last):
    ...
    ValueError: Unknown theme: 'sepia'
    """

    verbosity: LogLevel | None = LogLevel.DEBUG
    output_mode: OutputMode = OutputMode.AUTO
    theme: str = "default"
    preset: str | None = None
    buffer_enabled: bool = True
    buffer_size: int = DEFAULT_BUFFER_SIZE
    capture_location: bool = True
    cache_enabled: bool = True
    cache_size: int = DEFAULT_MAX_ENTRIES
    cache_ttl: float = DEFAULT_TTL_SECONDS
    global_prefix: str | None = None
    max_depth: int = DEFAULT_MAX_DEPTH
    cycle_policy: CyclePolicy = CyclePolicy.PLACEHOLDER

    def __post_init__(self) -> None:
        if not isinstance(self.verbosity, LogLevel) and self.verbosity is not None:
            object.__setattr__(self, "verbosity", parse_verbosity(self.verbosity))
        object.__setattr__(self, "output_mode", OutputMode.from_name(self.output_mode) if isinstance(self.output_mode, str) else self.output_mode)
        theme = self.theme.strip().lower()
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {self.theme!r}")
        object.__setattr__(self, "theme", theme)
        if self.preset is not None:
            preset = self.preset.strip().lower()
            if preset not in PRESET_NAMES:
                raise ValueError(f"Unknown style preset: {self.preset!r}")
            object.__setattr__(self, "preset", preset)
        object.__setattr__(self, "cycle_policy", CyclePolicy.from_name(self.cycle_policy))
        if self.cache_size <= 0:
            raise ValueError("cache_size must be positive")
        if self.cache_ttl <= 0:
            raise ValueError("cache_ttl must be positive")
        if self.max_depth <= 0:
            raise ValueError("max_depth must be positive")

    def to_dict(self) -> dict[str, Any]:
        data = {item.name: getattr(self, item.name) for item in fields(self)}
        data["verbosity"] = self.verbosity.severity if self.verbosity else SILENT
        data["output_mode"] = self.output_mode.value
        data["cycle_policy"] = self.cycle_policy.value
        return data


def _env_bool(environ: Mapping[str, str], name: str) -> bool | None:
    """Return the boolean value of ``name`` or ``None`` when unset.

    Examples
    --------
    >>> _env_bool({'X': 'On'}, 'X'), _env_bool({'X': '0'}, 'X'), _env_bool({}, 'X')
    (True, False, None)
    >>> _env_bool({'X': 'maybe'}, 'X')
    Traceback (most recent call last):
    ...
    ValueError: X must be a boolean (1/0, true/false, yes/no, on/off), got 'maybe'
    """
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off), got {raw!r}")


def _env_int(environ: Mapping[str, str], name: str) -> int | None:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_str(environ: Mapping[str, str], name: str) -> str | None:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _environment_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    candidates: dict[str, Any] = {
        "verbosity": _env_str(environ, ENV_VERBOSITY),
        "output_mode": _env_str(environ, ENV_OUTPUT_MODE),
        "theme": _env_str(environ, ENV_THEME),
        "preset": _env_str(environ, ENV_PRESET),
        "buffer_enabled": _env_bool(environ, ENV_BUFFER_ENABLED),
        "buffer_size": _env_int(environ, ENV_BUFFER_SIZE),
        "capture_location": _env_bool(environ, ENV_CAPTURE_LOCATION),
        "cache_enabled": _env_bool(environ, ENV_STYLE_CACHE),
    }
    return {key: value for key, value in candidates.items() if value is not None}


def build_logger_config(config: LoggerConfig | None = None, *, environ: Mapping[str, str] | None = None, **overrides: Any) -> LoggerConfig:
    """Resolve configuration: defaults < ``config`` < environment < ``overrides``.

    Raises
    ------
    ValueError
        For unknown keyword overrides or invalid values.

    Examples
    --------
    >>> build_logger_config(environ={'LOG_VERBOSITY': 'error'}).verbosity is LogLevel.ERROR
    True
    >>> build_logger_config(environ={'LOG_VERBOSITY': 'error'}, verbosity='info').verbosity is LogLevel.INFO
    True
    """
    base = config or LoggerConfig()
    known = {item.name for item in fields(LoggerConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown configuration option(s): {', '.join(unknown)}")
    merged = {**_environment_overrides(os.environ if environ is None else environ), **overrides}
    if "verbosity" in merged:
        merged["verbosity"] = parse_verbosity(merged["verbosity"])
    return replace(base, **merged)


__all__ = [
    "ENV_BUFFER_ENABLED",
    "ENV_BUFFER_SIZE",
    "ENV_CAPTURE_LOCATION",
    "ENV_OUTPUT_MODE",
    "ENV_PRESET",
    "ENV_STYLE_CACHE",
    "ENV_THEME",
    "ENV_VERBOSITY",
    "SILENT",
    "LoggerConfig",
    "build_logger_config",
    "parse_verbosity",
]
