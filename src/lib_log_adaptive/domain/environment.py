"""Output target resolution from configuration and environment signals.

Purpose
-------
Decide which of the four output strategies (browser-style CSS, truecolor
ANSI, 16-colour ANSI, plain text) applies, given an explicit output mode and
a snapshot of the environment.

Contents
--------
* :class:`OutputMode` - user-facing configuration values.
* :class:`OutputTarget` - resolved strategy with its colour capability.
* :class:`EnvironmentSnapshot` - injectable view of environment signals.
* :func:`resolve_output_target` - the decision procedure.

System Role
-----------
The snapshot is produced by an :class:`~lib_log_adaptive.application.ports.EnvironmentPort`
adapter, so tests substitute deterministic values instead of depending on
process globals. Explicit modes always win over auto-detection.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .colors import ColorCapability


class OutputMode(Enum):
    """Configured output mode; ``AUTO`` defers to environment detection."""

    AUTO = "auto"
    CSS = "css"
    ANSI = "ansi"
    PLAIN = "plain"
    BUILD = "build"
    CI = "ci"

    @classmethod
    def from_name(cls, name: str) -> "OutputMode":
        """Return the matching mode for a case-insensitive name.

        Examples
        --------
        >>> OutputMode.from_name(' ANSI ') is OutputMode.ANSI
        True
        >>> OutputMode.from_name('vga')
        Traceback (most recent call last):
        ...
        ValueError: Unsupported output mode: 'vga'
        """
        normalized = name.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unsupported output mode: {name!r}")


class OutputTarget(Enum):
    """Resolved rendering strategy."""

    CSS = "css"
    ANSI_FULL = "ansi_full"
    ANSI_BASIC = "ansi_basic"
    PLAIN = "plain"

    @property
    def capability(self) -> ColorCapability:
        """Colour tier of the target.

        Examples
        --------
        >>> OutputTarget.ANSI_BASIC.capability is ColorCapability.BASIC
        True
        >>> OutputTarget.PLAIN.capability is ColorCapability.NONE
        True
        """
        return _CAPABILITY_BY_TARGET[self]

    @property
    def is_ansi(self) -> bool:
        return self in (OutputTarget.ANSI_FULL, OutputTarget.ANSI_BASIC)


_CAPABILITY_BY_TARGET = {
    OutputTarget.CSS: ColorCapability.FULL,
    OutputTarget.ANSI_FULL: ColorCapability.FULL,
    OutputTarget.ANSI_BASIC: ColorCapability.BASIC,
    OutputTarget.PLAIN: ColorCapability.NONE,
}


@dataclass(slots=True, frozen=True)
class EnvironmentSnapshot:
    """Environment signals consulted during output resolution.

    Attributes
    ----------
    color_depth:
        Colour depth hinted by the terminal (``NONE`` when ANSI is unsupported).
    is_ci:
        A continuous-integration marker is present.
    is_build:
        A production/build marker is present.
    is_tty:
        The output stream is an interactive terminal.
    force_color / no_color:
        Explicit user overrides.
    """

    color_depth: ColorCapability = ColorCapability.NONE
    is_ci: bool = False
    is_build: bool = False
    is_tty: bool = False
    force_color: bool = False
    no_color: bool = False

    @property
    def supports_ansi(self) -> bool:
        return self.color_depth is not ColorCapability.NONE or self.force_color


def _ansi_target(snapshot: EnvironmentSnapshot) -> OutputTarget:
    if snapshot.color_depth is ColorCapability.FULL:
        return OutputTarget.ANSI_FULL
    return OutputTarget.ANSI_BASIC


def resolve_output_target(mode: OutputMode, snapshot: EnvironmentSnapshot) -> OutputTarget:
    """Pick the output target for ``mode`` under ``snapshot``.

    Examples
    --------
    >>> tty = EnvironmentSnapshot(color_depth=ColorCapability.FULL, is_tty=True)
    >>> resolve_output_target(OutputMode.AUTO, tty).value
    'ansi_full'
    >>> ci = EnvironmentSnapshot(color_depth=ColorCapability.FULL, is_tty=True, is_ci=True)
    >>> resolve_output_target(OutputMode.AUTO, ci).value
    'plain'
    >>> resolve_output_target(OutputMode.CSS, ci).value
    'css'
    """
    if mode is OutputMode.CSS:
        return OutputTarget.CSS
    if mode is OutputMode.ANSI:
        return _ansi_target(snapshot)
    if mode in (OutputMode.PLAIN, OutputMode.CI):
        return OutputTarget.PLAIN
    if mode is OutputMode.BUILD:
        return OutputTarget.ANSI_BASIC if snapshot.supports_ansi and not snapshot.no_color else OutputTarget.PLAIN

    if snapshot.no_color:
        return OutputTarget.PLAIN
    if snapshot.is_ci:
        return OutputTarget.ANSI_BASIC if snapshot.force_color else OutputTarget.PLAIN
    if snapshot.is_build:
        return OutputTarget.ANSI_BASIC if snapshot.supports_ansi else OutputTarget.PLAIN
    if snapshot.force_color or (snapshot.is_tty and snapshot.supports_ansi):
        return _ansi_target(snapshot)
    return OutputTarget.PLAIN


__all__ = ["EnvironmentSnapshot", "OutputMode", "OutputTarget", "resolve_output_target"]
