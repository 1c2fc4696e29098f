from __future__ import annotations

import pytest

from lib_log_adaptive.adapters.serializer import CyclePolicy
from lib_log_adaptive.domain import LogLevel, OutputMode
from lib_log_adaptive.runtime._settings import LoggerConfig, build_logger_config, parse_verbosity


def test_defaults() -> None:
    config = LoggerConfig()

    assert config.verbosity is LogLevel.DEBUG
    assert config.output_mode is OutputMode.AUTO
    assert config.theme == "default"
    assert config.buffer_size == 1000
    assert config.cycle_policy is CyclePolicy.PLACEHOLDER


def test_strings_are_coerced() -> None:
    config = LoggerConfig(verbosity="warning", output_mode="CSS", theme=" Dark ", preset="Neon", cycle_policy="skip")

    assert config.verbosity is LogLevel.WARN
    assert config.output_mode is OutputMode.CSS
    assert config.theme == "dark"
    assert config.preset == "neon"
    assert config.cycle_policy is CyclePolicy.SKIP


@pytest.mark.parametrize(
    "kwargs, error_match",
    [
        ({"theme": "sepia"}, "Unknown theme"),
        ({"preset": "retro"}, "Unknown style preset"),
        ({"output_mode": "hologram"}, "Unsupported output mode"),
        ({"cache_size": 0}, "cache_size must be positive"),
        ({"cache_ttl": 0}, "cache_ttl must be positive"),
        ({"max_depth": 0}, "max_depth must be positive"),
        ({"cycle_policy": "ignore"}, "Unsupported cycle policy"),
    ],
)
def test_invalid_values_are_rejected(kwargs: dict[str, object], error_match: str) -> None:
    with pytest.raises(ValueError, match=error_match):
        LoggerConfig(**kwargs)


def test_silent_verbosity() -> None:
    assert parse_verbosity("silent") is None
    assert LoggerConfig(verbosity=None).to_dict()["verbosity"] == "silent"


def test_environment_overrides_base_config() -> None:
    environ = {
        "LOG_VERBOSITY": "error",
        "LOG_OUTPUT_MODE": "plain",
        "LOG_THEME": "neon",
        "LOG_BUFFER_SIZE": "25",
        "LOG_BUFFER_ENABLED": "off",
        "LOG_CAPTURE_LOCATION": "no",
        "LOG_STYLE_CACHE": "0",
    }

    config = build_logger_config(LoggerConfig(theme="dark"), environ=environ)

    assert config.verbosity is LogLevel.ERROR
    assert config.output_mode is OutputMode.PLAIN
    assert config.theme == "neon"
    assert config.buffer_size == 25
    assert config.buffer_enabled is False
    assert config.capture_location is False
    assert config.cache_enabled is False


def test_keyword_overrides_win_over_environment() -> None:
    config = build_logger_config(environ={"LOG_THEME": "neon", "LOG_VERBOSITY": "silent"}, theme="pastel", verbosity="info")

    assert config.theme == "pastel"
    assert config.verbosity is LogLevel.INFO


def test_blank_environment_values_are_ignored() -> None:
    assert build_logger_config(environ={"LOG_THEME": "   "}).theme == "default"


@pytest.mark.parametrize(
    "environ, error_match",
    [
        ({"LOG_BUFFER_ENABLED": "maybe"}, "LOG_BUFFER_ENABLED must be a boolean"),
        ({"LOG_BUFFER_SIZE": "lots"}, "LOG_BUFFER_SIZE must be an integer"),
        ({"LOG_VERBOSITY": "chatty"}, "Unknown log level"),
    ],
)
def test_invalid_environment_values(environ: dict[str, str], error_match: str) -> None:
    with pytest.raises(ValueError, match=error_match):
        build_logger_config(environ=environ)


def test_unknown_override_names_are_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown configuration option"):
        build_logger_config(environ={}, colour="red")
