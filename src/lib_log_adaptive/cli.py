"""Command line interface for inspecting the adaptive logging pipeline.

Purpose
-------
Offer quick operator tooling: the metadata banner, a capability report for
the current terminal, and a demo that renders sample records with a chosen
theme, preset and output mode and optionally exports them.

Contents
--------
* :data:`cli` - Click group with global ``--use-dotenv`` and ``--traceback``
  switches.
* ``info`` / ``detect`` / ``demo`` - subcommands.
* :func:`main` - ``lib_cli_exit_tools`` entry point used by the console
  script and ``python -m lib_log_adaptive``.
"""

from __future__ import annotations

from typing import Any, Sequence

import click
import lib_cli_exit_tools

from . import __init__conf__
from . import config as log_config
from .adapters import OsEnvironment
from .domain import ExportFilter, ExportOptions, LogLevel, OutputMode, resolve_output_target
from .domain.export import ExportFormat
from .domain.styles import PRESET_NAMES, THEMES
from .runtime import LoggerConfig, build_logger, summary_info

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

_DEMO_MESSAGES: tuple[tuple[LogLevel, str, tuple[Any, ...]], ...] = (
    (LogLevel.DEBUG, "Resolving configuration", ()),
    (LogLevel.INFO, "Service ready", ({"port": 8080},)),
    (LogLevel.WARN, "Cache miss ratio high", (0.42,)),
    (LogLevel.ERROR, "Upstream request failed", (ValueError("timeout"),)),
    (LogLevel.CRITICAL, "Shutting down", ()),
)


def _apply_traceback(enabled: bool) -> None:
    lib_cli_exit_tools.config.traceback = enabled
    lib_cli_exit_tools.config.traceback_force_color = enabled


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=None,
    help=f"Load LOG_* settings from the nearest .env file (default: ${log_config.DOTENV_ENV_VAR}).",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, use_dotenv: bool | None, traceback: bool) -> None:
    """Root command; prints the metadata banner when no subcommand is given."""

    if log_config.use_dotenv_requested(use_dotenv):
        log_config.enable_dotenv()
    _apply_traceback(traceback)
    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print resolved metadata so users can inspect installation details."""

    click.echo(summary_info(), nl=False)


@cli.command("detect", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--mode",
    type=click.Choice([mode.value for mode in OutputMode], case_sensitive=False),
    default=OutputMode.AUTO.value,
    show_default=True,
    help="Output mode to resolve against the current environment.",
)
def cli_detect(mode: str) -> None:
    """Report the detected terminal capabilities and the resolved output target."""

    snapshot = OsEnvironment().snapshot()
    target = resolve_output_target(OutputMode.from_name(mode), snapshot)
    rows: list[tuple[str, Any]] = [
        ("color_depth", snapshot.color_depth.value),
        ("is_tty", snapshot.is_tty),
        ("is_ci", snapshot.is_ci),
        ("is_build", snapshot.is_build),
        ("force_color", snapshot.force_color),
        ("no_color", snapshot.no_color),
        ("mode", mode.lower()),
        ("target", target.value),
    ]
    pad = max(len(label) for label, _ in rows)
    for label, value in rows:
        click.echo(f"{label.ljust(pad)} = {value}")


@cli.command("demo", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--theme",
    type=click.Choice(sorted(THEMES), case_sensitive=False),
    default="default",
    show_default=True,
)
@click.option("--preset", type=click.Choice(PRESET_NAMES, case_sensitive=False), default=None)
@click.option(
    "--mode",
    type=click.Choice([mode.value for mode in OutputMode], case_sensitive=False),
    default=OutputMode.AUTO.value,
    show_default=True,
)
@click.option(
    "--format",
    "export_format",
    type=click.Choice([fmt.value for fmt in ExportFormat], case_sensitive=False),
    default=None,
    help="Export the demo records in this format after rendering them.",
)
@click.option("--errors-only", is_flag=True, default=False, help="Restrict the export to ERROR and CRITICAL records.")
@click.option("--last", type=click.IntRange(min=0), default=None, help="Export only the newest N matching records.")
def cli_demo(theme: str, preset: str | None, mode: str, export_format: str | None, errors_only: bool, last: int | None) -> None:
    """Render sample records for one theme and optionally export them."""

    click.echo(f"=== Theme: {theme.lower()} ===")
    logger = build_logger(LoggerConfig(theme=theme, preset=preset, output_mode=mode))
    api = logger.scope("demo").scope("api")
    emitted = 0
    with api.grouped("startup"):
        for level, message, args in _DEMO_MESSAGES:
            if api.log(level, message, *args)["ok"]:
                emitted += 1
    click.echo(f"emitted {emitted} records")

    if export_format is not None:
        filters = ExportFilter(errors_only=errors_only, last=last)
        result = logger.export(export_format, filters=filters, options=ExportOptions())
        click.echo(result.data)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point restoring traceback preferences after running the CLI.

    Returns
    -------
    int
        Exit code reported by ``lib_cli_exit_tools.run_cli``.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        lib_cli_exit_tools.config.traceback = previous_traceback
        lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
