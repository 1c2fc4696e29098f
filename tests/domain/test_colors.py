from __future__ import annotations

import pytest

from lib_log_adaptive.domain.colors import (
    ColorCapability,
    color_to_hex,
    extract_color_tokens,
    gradient_to_single_color,
    nearest_basic_color,
    to_ansi,
)


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("rgb(255,0,0)", "#ff0000"),
        ("rgba(0, 128, 255, 0.5)", "#0080ff"),
        ("#ABC", "#aabbcc"),
        ("#00FF00", "#00ff00"),
        ("RebeccaPurple", "#663399"),
        ("", "#ffffff"),
        ("definitely not a colour", "#ffffff"),
    ],
)
def test_color_to_hex_normalises_expressions(expression: str, expected: str) -> None:
    assert color_to_hex(expression) == expected


def test_rgb_red_maps_to_basic_red_escape() -> None:
    hex_value = color_to_hex("rgb(255,0,0)")

    assert hex_value == "#ff0000"
    assert to_ansi(hex_value, ColorCapability.BASIC) == "\x1b[31m"
    assert to_ansi(hex_value, ColorCapability.BASIC, background=True) == "\x1b[41m"


def test_full_capability_uses_truecolor_sequences() -> None:
    assert to_ansi("#102030", ColorCapability.FULL) == "\x1b[38;2;16;32;48m"
    assert to_ansi("#102030", ColorCapability.FULL, background=True) == "\x1b[48;2;16;32;48m"


@pytest.mark.parametrize("expression", ["red", "#ff0000", None, ""])
def test_no_capability_never_emits_escape_codes(expression: str | None) -> None:
    assert to_ansi(expression, ColorCapability.NONE) == ""


def test_gradient_stops_are_averaged() -> None:
    gradient = "linear-gradient(135deg, #ff0000 0%, #0000ff 100%)"

    assert extract_color_tokens(gradient) == ["#ff0000", "#0000ff"]
    assert gradient_to_single_color(gradient) == "#800080"
    assert color_to_hex(gradient) == "#800080"


def test_gradient_without_stops_falls_back_to_white() -> None:
    assert color_to_hex("radial-gradient(circle, transparentish)") == "#ffffff"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("#ff0000", "red"),
        ("#00ee00", "green"),
        ("#fafafa", "white"),
        ("#101010", "black"),
    ],
)
def test_nearest_basic_color(value: str, expected: str) -> None:
    assert nearest_basic_color(value) == expected
