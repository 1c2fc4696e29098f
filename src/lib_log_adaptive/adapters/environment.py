"""Process-environment adapter feeding the capability detector.

Purpose
-------
Read CI/build markers and user overrides from ``os.environ`` and ask Rich
what the output stream can display, producing an
:class:`~lib_log_adaptive.domain.environment.EnvironmentSnapshot`.

System Role
-----------
The only place that touches the real process environment for output
resolution; tests substitute a mapping or a stub :class:`EnvironmentPort`.
Terminal detection (``TERM``, ``COLORTERM``, ``FORCE_COLOR``, ``NO_COLOR``,
``isatty``) is Rich's; only the CI and build markers plus the library's own
``LOG_FORCE_COLOR``/``LOG_NO_COLOR`` switches are read here.
"""

from __future__ import annotations

import os
from typing import IO, Mapping

from rich.console import Console

from lib_log_adaptive.application.ports.environment import EnvironmentPort
from lib_log_adaptive.domain.colors import ColorCapability
from lib_log_adaptive.domain.environment import EnvironmentSnapshot

CI_MARKERS: tuple[str, ...] = ("CI", "GITHUB_ACTIONS", "JENKINS_URL", "GITLAB_CI", "TRAVIS", "CIRCLECI", "BUILDKITE")
BUILD_MARKERS: tuple[str, ...] = ("PYTHON_ENV", "APP_ENV", "BUILD_MODE")
LOG_FORCE_COLOR = "LOG_FORCE_COLOR"
LOG_NO_COLOR = "LOG_NO_COLOR"

_FALSY = {"", "0", "false", "no", "off"}

_COLOR_SYSTEMS: dict[str | None, ColorCapability] = {
    "truecolor": ColorCapability.FULL,
    "256": ColorCapability.FULL,
    "standard": ColorCapability.BASIC,
    "windows": ColorCapability.BASIC,
    None: ColorCapability.NONE,
}


def _flag(environ: Mapping[str, str], names: tuple[str, ...]) -> bool:
    return any(environ.get(name, "").strip().lower() not in _FALSY for name in names)


def rich_console_for(environ: Mapping[str, str], stream: IO[str] | None = None) -> Console:
    """Build the Rich console whose detection answers our capability questions.

    ``LOG_FORCE_COLOR`` and ``LOG_NO_COLOR`` are passed to Rich as explicit
    ``force_terminal``/``no_color`` arguments; everything else comes from
    ``environ`` through Rich's own rules.
    """
    return Console(
        file=stream,
        force_terminal=True if _flag(environ, (LOG_FORCE_COLOR,)) else None,
        no_color=True if _flag(environ, (LOG_NO_COLOR,)) else None,
        force_jupyter=False,
        _environ=dict(environ),
    )


def color_depth_of(console: Console) -> ColorCapability:
    """Map Rich's detected ``color_system`` onto :class:`ColorCapability`.

    Examples
    --------
    >>> import io
    >>> color_depth_of(rich_console_for({'FORCE_COLOR': '1', 'COLORTERM': 'truecolor'}, io.StringIO())).value
    'full'
    >>> color_depth_of(rich_console_for({'FORCE_COLOR': '1', 'TERM': 'xterm'}, io.StringIO())).value
    'basic'
    >>> color_depth_of(rich_console_for({'TERM': 'xterm-256color'}, io.StringIO())).value
    'none'
    """
    return _COLOR_SYSTEMS.get(console.color_system, ColorCapability.BASIC)


class OsEnvironment(EnvironmentPort):
    """Snapshot the live process environment.

    Examples
    --------
    >>> snapshot = OsEnvironment(environ={'CI': 'true', 'FORCE_COLOR': '1', 'TERM': 'xterm-256color'}).snapshot()
    >>> snapshot.is_ci, snapshot.color_depth.value, snapshot.force_color
    (True, 'full', True)
    >>> OsEnvironment(environ={'APP_ENV': 'production'}).snapshot().is_build
    True
    """

    def __init__(self, *, environ: Mapping[str, str] | None = None, stream: IO[str] | None = None) -> None:
        self._environ = environ
        self._stream = stream

    def snapshot(self) -> EnvironmentSnapshot:
        environ = os.environ if self._environ is None else self._environ
        console = rich_console_for(environ, self._stream)
        return EnvironmentSnapshot(
            color_depth=color_depth_of(console),
            is_ci=_flag(environ, CI_MARKERS),
            is_build=any(environ.get(name, "").strip().lower() == "production" for name in BUILD_MARKERS),
            is_tty=console.is_terminal,
            force_color="FORCE_COLOR" in environ or _flag(environ, (LOG_FORCE_COLOR,)),
            no_color=console.no_color,
        )


__all__ = ["BUILD_MARKERS", "CI_MARKERS", "OsEnvironment", "color_depth_of", "rich_console_for"]
