"""CLI behaviour coverage for the click adapter."""

from __future__ import annotations

import json
import re
import sys
from typing import Callable

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner

from lib_log_adaptive import __init__conf__
from lib_log_adaptive import cli as cli_mod
from lib_log_adaptive.runtime import summary_info

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    """Return ``text`` without ANSI colour codes.

    Examples
    --------
    >>> strip_ansi("\x1b[31mred\x1b[0m")
    'red'
    """

    return ANSI_RE.sub("", text)


def run_cli(args: list[str] | None = None) -> tuple[int, str, BaseException | None]:
    """Invoke the click command with ``CliRunner`` and capture output."""

    runner = CliRunner()
    original_argv = sys.argv
    sys.argv = [__init__conf__.shell_command]
    try:
        result = runner.invoke(
            cli_mod.cli,
            args or [],
            prog_name=__init__conf__.shell_command,
        )
    finally:
        sys.argv = original_argv
    return result.exit_code, result.output, result.exception


def test_cli_without_subcommand_prints_summary() -> None:
    exit_code, stdout, _ = run_cli()

    assert exit_code == 0
    assert stdout == summary_info()


def test_cli_info_command_matches_summary() -> None:
    runner = CliRunner()
    result = runner.invoke(cli_mod.cli, ["info"])

    assert result.exit_code == 0
    assert result.output == summary_info()


def test_cli_version_option() -> None:
    exit_code, stdout, _ = run_cli(["--version"])

    assert exit_code == 0
    assert stdout.strip() == f"{__init__conf__.shell_command} version {__init__conf__.version}"


def test_cli_no_traceback_option(monkeypatch: pytest.MonkeyPatch) -> None:
    """`--no-traceback` should disable verbose tracebacks for subsequent commands."""

    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", True, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", True, raising=False)

    exit_code, _stdout, _exception = run_cli(["--no-traceback", "info"])

    assert exit_code == 0
    assert lib_cli_exit_tools.config.traceback is False
    assert lib_cli_exit_tools.config.traceback_force_color is False


def test_cli_detect_reports_capabilities(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("FORCE_COLOR", raising=False)

    exit_code, stdout, _ = run_cli(["detect", "--mode", "CSS"])

    assert exit_code == 0
    rows = dict(line.split(" = ", 1) for line in stdout.splitlines())
    assert {key.strip() for key in rows} >= {"color_depth", "is_tty", "is_ci", "mode", "target"}
    values = {key.strip(): value for key, value in rows.items()}
    assert values["no_color"] == "True"
    assert values["mode"] == "css"
    assert values["target"] == "css"


def test_cli_demo_runs_for_single_theme() -> None:
    exit_code, stdout, _ = run_cli(["demo", "--theme", "classic", "--mode", "plain"])

    assert exit_code == 0
    plain_output = strip_ansi(stdout)
    assert "=== Theme: classic ===" in plain_output
    assert "[demo:api] Service ready" in plain_output
    assert "emitted 5 records" in plain_output


def test_cli_demo_exports_filtered_records() -> None:
    exit_code, stdout, _ = run_cli(["demo", "--mode", "plain", "--format", "json", "--errors-only", "--last", "1"])

    assert exit_code == 0
    exported = stdout.split("emitted 5 records", 1)[1]
    payload = json.loads(exported)
    assert [item["message"] for item in payload] == ["Shutting down"]
    assert payload[0]["prefix"] == "demo:api"


def test_cli_demo_rejects_unknown_theme() -> None:
    exit_code, _stdout, _ = run_cli(["demo", "--theme", "sepia"])

    assert exit_code != 0


def test_main_restores_traceback_preferences(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", True, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", True, raising=False)

    recorded: dict[str, bool] = {}

    def fake_run_cli(command: Callable[..., int], argv: list[str] | None = None, *, prog_name: str | None = None, **_: object) -> int:
        runner = CliRunner()
        result = runner.invoke(command, ["--no-traceback", "info"] if argv is None else argv)
        if result.exception is not None:
            raise result.exception
        recorded["traceback"] = lib_cli_exit_tools.config.traceback
        recorded["traceback_force_color"] = lib_cli_exit_tools.config.traceback_force_color
        return result.exit_code

    monkeypatch.setattr(lib_cli_exit_tools, "run_cli", fake_run_cli)

    exit_code = cli_mod.main(["--no-traceback", "info"])

    assert exit_code == 0
    assert recorded == {"traceback": False, "traceback_force_color": False}
    assert lib_cli_exit_tools.config.traceback is True
    assert lib_cli_exit_tools.config.traceback_force_color is True


def test_main_consumes_sys_argv(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", False, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", False, raising=False)
    monkeypatch.setattr(sys, "argv", [__init__conf__.shell_command, "info"], raising=False)

    exit_code = cli_mod.main()
    captured = capsys.readouterr()

    assert exit_code == 0
    assert __init__conf__.name in captured.out
