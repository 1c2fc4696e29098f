from __future__ import annotations

import pytest

from lib_log_adaptive.domain import ColorCapability, EnvironmentSnapshot, OutputMode, OutputTarget, PartStyle, StyleBuilder, StyleConfig, resolve_output_target
from lib_log_adaptive.domain.levels import LogLevel
from lib_log_adaptive.domain.styles import PRESET_NAMES, THEMES, preset_style_config, resolve_theme

TTY_FULL = EnvironmentSnapshot(color_depth=ColorCapability.FULL, is_tty=True)
TTY_BASIC = EnvironmentSnapshot(color_depth=ColorCapability.BASIC, is_tty=True)
PIPE = EnvironmentSnapshot()


@pytest.mark.parametrize(
    "mode, snapshot, expected",
    [
        (OutputMode.AUTO, TTY_FULL, OutputTarget.ANSI_FULL),
        (OutputMode.AUTO, TTY_BASIC, OutputTarget.ANSI_BASIC),
        (OutputMode.AUTO, PIPE, OutputTarget.PLAIN),
        (OutputMode.AUTO, EnvironmentSnapshot(color_depth=ColorCapability.FULL, is_tty=True, no_color=True), OutputTarget.PLAIN),
        (OutputMode.AUTO, EnvironmentSnapshot(is_ci=True, force_color=True), OutputTarget.ANSI_BASIC),
        (OutputMode.AUTO, EnvironmentSnapshot(color_depth=ColorCapability.FULL, is_build=True), OutputTarget.ANSI_BASIC),
        (OutputMode.AUTO, EnvironmentSnapshot(force_color=True), OutputTarget.ANSI_BASIC),
        (OutputMode.CSS, PIPE, OutputTarget.CSS),
        (OutputMode.ANSI, TTY_FULL, OutputTarget.ANSI_FULL),
        (OutputMode.PLAIN, TTY_FULL, OutputTarget.PLAIN),
        (OutputMode.CI, TTY_FULL, OutputTarget.PLAIN),
        (OutputMode.BUILD, TTY_FULL, OutputTarget.ANSI_BASIC),
        (OutputMode.BUILD, PIPE, OutputTarget.PLAIN),
    ],
)
def test_resolve_output_target(mode: OutputMode, snapshot: EnvironmentSnapshot, expected: OutputTarget) -> None:
    assert resolve_output_target(mode, snapshot) is expected


def test_output_mode_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="Unsupported output mode"):
        OutputMode.from_name("hologram")


@pytest.mark.parametrize("theme", sorted(THEMES))
def test_every_theme_covers_every_level(theme: str) -> None:
    palette = THEMES[theme]
    assert set(palette) == set(LogLevel)
    assert all(entry.label == level.label for level, entry in palette.items())


def test_unknown_theme_resolves_to_default() -> None:
    assert resolve_theme("sepia") is THEMES["default"]


@pytest.mark.parametrize("preset", PRESET_NAMES)
def test_presets_record_their_name_and_theme(preset: str) -> None:
    config = preset_style_config(preset, theme="dark")
    assert config.preset == preset
    assert config.theme == "dark"


def test_production_preset_hides_prefix_and_location() -> None:
    config = preset_style_config("production")
    assert config.prefix.show is False
    assert config.location.show is False
    assert config.message.show is True


def test_with_part_replaces_only_named_fields() -> None:
    config = StyleConfig().with_part("prefix", color="#ff0000")

    assert config.prefix.color == "#ff0000"
    assert config.prefix.background == "black"
    assert config.timestamp == StyleConfig().timestamp


def test_with_part_rejects_unknown_parts() -> None:
    with pytest.raises(ValueError, match="Unknown style part"):
        StyleConfig().with_part("footer", show=False)


def test_style_builder_translates_part_style() -> None:
    css = StyleBuilder().part(PartStyle(color="red", bold=True, dim=True, underline=True)).build()

    assert css == "color: red; font-weight: bold; text-decoration: underline; opacity: 0.7"
