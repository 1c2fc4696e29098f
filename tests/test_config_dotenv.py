from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

import pytest
from click.testing import CliRunner

from lib_log_adaptive import cli as cli_module
from lib_log_adaptive import config as log_config
from lib_log_adaptive.runtime._settings import build_logger_config


@pytest.fixture(autouse=True)
def _reset_dotenv_state() -> Iterator[None]:
    """Reset shared dotenv state around each test."""

    log_config._reset_dotenv_state_for_testing()
    yield
    log_config._reset_dotenv_state_for_testing()


def test_enable_dotenv_populates_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Loading the nearest .env injects values the config builder then reads."""

    nested = tmp_path / "nested"
    nested.mkdir()
    env_file = tmp_path / ".env"
    env_file.write_text("LOG_THEME=neon\n")
    monkeypatch.chdir(nested)
    monkeypatch.delenv("LOG_THEME", raising=False)

    loaded = log_config.enable_dotenv()

    assert loaded == env_file.resolve()
    assert os.environ["LOG_THEME"] == "neon"
    assert build_logger_config().theme == "neon"

    os.environ.pop("LOG_THEME", None)


def test_enable_dotenv_respects_existing_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Existing environment variables keep precedence over .env entries."""

    nested = tmp_path / "nested"
    nested.mkdir()
    (tmp_path / ".env").write_text("LOG_THEME=neon\n")
    monkeypatch.chdir(nested)
    monkeypatch.setenv("LOG_THEME", "pastel")

    result = log_config.enable_dotenv()

    assert result is not None
    assert os.environ["LOG_THEME"] == "pastel"


def test_enable_dotenv_with_explicit_start(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    deep = tmp_path / "a" / "b"
    deep.mkdir(parents=True)
    env_file = tmp_path / "a" / ".env"
    env_file.write_text("LOG_VERBOSITY=error\n")
    monkeypatch.delenv("LOG_VERBOSITY", raising=False)

    assert log_config.enable_dotenv(deep) == env_file.resolve()
    assert os.environ["LOG_VERBOSITY"] == "error"

    os.environ.pop("LOG_VERBOSITY", None)


def test_enable_dotenv_loads_once(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (first / ".env").write_text("LOG_PRESET=neon\n")
    (second / ".env").write_text("LOG_PRESET=minimal\n")
    monkeypatch.delenv("LOG_PRESET", raising=False)

    loaded = log_config.enable_dotenv(first)

    assert log_config.enable_dotenv(second) == loaded
    assert os.environ["LOG_PRESET"] == "neon"

    os.environ.pop("LOG_PRESET", None)


def test_use_dotenv_requested_reads_toggle(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(log_config.DOTENV_ENV_VAR, "Yes")
    assert log_config.use_dotenv_requested(None) is True
    assert log_config.use_dotenv_requested(False) is False

    monkeypatch.setenv(log_config.DOTENV_ENV_VAR, "0")
    assert log_config.use_dotenv_requested(None) is False


def test_cli_dotenv_toggle_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    """CLI flag wins over environment toggle when deciding whether to load .env."""

    runner = CliRunner()

    calls: list[tuple[tuple[object, ...], dict[str, object]]] = []

    def record_enable(*args: object, **kwargs: object) -> None:
        calls.append((args, kwargs))

    monkeypatch.setattr(log_config, "enable_dotenv", record_enable)
    monkeypatch.delenv(log_config.DOTENV_ENV_VAR, raising=False)

    result = runner.invoke(cli_module.cli, ["--use-dotenv", "info"])
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    env = {log_config.DOTENV_ENV_VAR: "1"}
    result = runner.invoke(cli_module.cli, ["info"], env=env)
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    env = {log_config.DOTENV_ENV_VAR: "1"}
    result = runner.invoke(cli_module.cli, ["--no-use-dotenv", "info"], env=env)
    assert result.exit_code == 0
    assert calls == []
