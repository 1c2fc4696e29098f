"""Static package metadata surfaced by the CLI banner and HTML exports.

Contents
--------
* Module constants (``name``, ``title``, ``version``, ``author``, ...).
* :func:`print_info` - write the metadata banner through a writer callable.
"""

from __future__ import annotations

import sys
from typing import Callable

name = "lib_log_adaptive"
title = "Adaptive console logging with buffered exports and batched transports"
version = "0.1.0"
author = "bitranox"
shell_command = "lib_log_adaptive"


def print_info(writer: Callable[[str], object] | None = None) -> None:
    """Write the metadata banner, one ``writer`` call per line.

    Examples
    --------
    >>> lines = []
    >>> print_info(writer=lines.append)
    >>> lines[0]
    'Info for lib_log_adaptive:\\n'
    >>> any(line.strip().startswith('version') for line in lines)
    True
    """
    fields = (
        ("name", name),
        ("title", title),
        ("version", version),
        ("author", author),
        ("shell_command", shell_command),
    )
    write = writer or sys.stdout.write
    pad = max(len(label) for label, _ in fields)
    write(f"Info for {name}:\n")
    write("\n")
    for label, value in fields:
        write(f"    {label:<{pad}} = {value}\n")


__all__ = ["author", "name", "print_info", "shell_command", "title", "version"]
