"""Opt-in ``.env`` loading for the logging configuration.

Purpose
-------
Let operators keep ``LOG_*`` settings in a ``.env`` file next to the
application. Loading never overrides variables already present in the
process environment, and happens at most once per process.

Contents
--------
* :func:`enable_dotenv` - locate and load the nearest ``.env`` file.
* :func:`use_dotenv_requested` - resolve the CLI flag against
  :data:`DOTENV_ENV_VAR`.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import find_dotenv, load_dotenv

DOTENV_ENV_VAR = "LOG_USE_DOTENV"

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_LOCK = Lock()
_LOADED: Path | None = None


def enable_dotenv(search_from: str | Path | None = None) -> Path | None:
    """Load the nearest ``.env`` walking upwards from ``search_from`` (default: cwd).

    Returns the resolved path of the loaded file, or ``None`` when no file was
    found. Subsequent calls return the first result without reloading.
    """

    global _LOADED
    with _LOCK:
        if _LOADED is not None:
            return _LOADED
        if search_from is None:
            found = find_dotenv(usecwd=True)
        else:
            found = _search_upwards(Path(search_from))
        if not found:
            logger.debug("No .env file found")
            return None
        path = Path(found).resolve()
        load_dotenv(path, override=False)
        _LOADED = path
        logger.debug("Loaded environment from %s", path)
        return path


def _search_upwards(start: Path) -> str:
    directory = start if start.is_dir() else start.parent
    for candidate in (directory, *directory.parents):
        env_file = candidate / ".env"
        if env_file.is_file():
            return str(env_file)
    return ""


def use_dotenv_requested(flag: bool | None) -> bool:
    """Return whether ``.env`` loading is requested; an explicit ``flag`` wins.

    Examples
    --------
    >>> use_dotenv_requested(False)
    False
    >>> use_dotenv_requested(True)
    True
    """

    if flag is not None:
        return flag
    return os.environ.get(DOTENV_ENV_VAR, "").strip().lower() in _TRUTHY


def _reset_dotenv_state_for_testing() -> None:
    global _LOADED
    with _LOCK:
        _LOADED = None


__all__ = ["DOTENV_ENV_VAR", "enable_dotenv", "use_dotenv_requested"]
