from __future__ import annotations

import pytest

from lib_log_adaptive.adapters.renderer import AdaptiveRenderer, PartComposer
from lib_log_adaptive.adapters.style_cache import StyleCache, StyleKey
from lib_log_adaptive.domain import GroupInfo, LogLevel, OutputTarget, StyleConfig
from lib_log_adaptive.domain.styles import preset_style_config


def test_plain_render_orders_parts(make_record, location) -> None:
    record = make_record(LogLevel.INFO, "ready", prefix="api", location=location)

    output = AdaptiveRenderer().render(record, StyleConfig(), OutputTarget.PLAIN)

    assert output.format.startswith("[")
    assert output.format.endswith("[INFO] [api] ready (service.py:42:7)")
    assert "\x1b" not in output.format
    assert output.style_args == ()


def test_plain_render_omits_absent_parts(make_record) -> None:
    output = AdaptiveRenderer().render(make_record(LogLevel.WARN, "bare"), StyleConfig(), OutputTarget.PLAIN)

    assert output.format.endswith("[WARN] bare")
    assert "()" not in output.format


def test_group_depth_indents_two_spaces_per_level(make_record) -> None:
    record = make_record(LogLevel.INFO, "nested", group_info=GroupInfo(depth=2, name="outer"))

    output = AdaptiveRenderer().render(record, StyleConfig(), OutputTarget.PLAIN)

    assert output.format.startswith("    [")


def test_args_are_appended_to_the_message(make_record) -> None:
    record = make_record(LogLevel.INFO, "user", {"id": 1}, 42)

    output = AdaptiveRenderer().render(record, StyleConfig(), OutputTarget.PLAIN)

    assert output.format.endswith("user {'id': 1} 42")


def test_basic_ansi_uses_terminal_level_colours(make_record) -> None:
    record = make_record(LogLevel.INFO, "ready", prefix="api")

    output = AdaptiveRenderer().render(record, StyleConfig(), OutputTarget.ANSI_BASIC)

    assert "\x1b[1m\x1b[34m[INFO]\x1b[0m" in output.format
    assert "[API]" in output.format
    assert "\x1b[36m" in output.format


def test_full_ansi_uses_truecolor_for_themed_badges(make_record) -> None:
    style = StyleConfig(theme="classic")

    output = AdaptiveRenderer().render(make_record(LogLevel.ERROR, "boom"), style, OutputTarget.ANSI_FULL)

    assert "\x1b[38;2;255;255;255m" in output.format
    assert "\x1b[48;2;205;0;0m" in output.format


def test_css_render_emits_one_style_per_placeholder(make_record, location) -> None:
    record = make_record(LogLevel.ERROR, "disk at 95%", prefix="fs", location=location)

    output = AdaptiveRenderer().render(record, StyleConfig(), OutputTarget.CSS)

    assert output.format.count("%c") == 5
    assert len(output.style_args) == 5
    assert "disk at 95%%" in output.format
    assert "ERROR" in output.format
    assert any("linear-gradient" in css for css in output.style_args)


def test_css_failure_falls_back_to_plain(make_record, monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(self, ctx):
        raise RuntimeError("css unavailable")

    monkeypatch.setattr(PartComposer, "compose_css", boom)

    output = AdaptiveRenderer().render(make_record(LogLevel.INFO, "still shown"), StyleConfig(), OutputTarget.CSS)

    assert output.style_args == ()
    assert output.format.endswith("[INFO] still shown")


def test_cache_hits_for_records_with_the_same_shape(make_record) -> None:
    renderer = AdaptiveRenderer()

    first = renderer.render(make_record(LogLevel.INFO, "one", prefix="a"), StyleConfig(), OutputTarget.PLAIN)
    second = renderer.render(make_record(LogLevel.INFO, "two", prefix="b"), StyleConfig(), OutputTarget.PLAIN)

    assert first.format.endswith("[a] one")
    assert second.format.endswith("[b] two")
    stats = renderer.cache_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["size"] == 1


def test_cache_keys_distinguish_prefix_presence_and_target(make_record) -> None:
    renderer = AdaptiveRenderer()

    renderer.render(make_record(LogLevel.INFO, "one", prefix="a"), StyleConfig(), OutputTarget.PLAIN)
    renderer.render(make_record(LogLevel.INFO, "two"), StyleConfig(), OutputTarget.PLAIN)
    renderer.render(make_record(LogLevel.INFO, "three"), StyleConfig(), OutputTarget.CSS)

    assert renderer.cache_stats()["size"] == 3
    assert StyleKey(LogLevel.INFO, "default", True, False) in renderer.cache_for(OutputTarget.PLAIN)


def test_invalidate_clears_every_target_cache(make_record) -> None:
    renderer = AdaptiveRenderer()
    renderer.render(make_record(), StyleConfig(), OutputTarget.PLAIN)
    renderer.render(make_record(), StyleConfig(), OutputTarget.ANSI_BASIC)

    renderer.invalidate()

    assert renderer.cache_stats()["size"] == 0


def test_disabled_cache_stores_nothing(make_record) -> None:
    renderer = AdaptiveRenderer(cache_enabled=False)
    renderer.render(make_record(), StyleConfig(), OutputTarget.PLAIN)
    renderer.render(make_record(), StyleConfig(), OutputTarget.PLAIN)

    assert renderer.cache_stats()["size"] == 0
    assert renderer.cache_stats()["hits"] == 0


def test_production_preset_suppresses_prefix_and_location(make_record, location) -> None:
    record = make_record(LogLevel.INFO, "quiet", prefix="api", location=location)

    output = AdaptiveRenderer().render(record, preset_style_config("production"), OutputTarget.PLAIN)

    assert output.format.endswith("[INFO] quiet")


def test_minimal_preset_hides_timestamp(make_record) -> None:
    output = AdaptiveRenderer().render(make_record(LogLevel.INFO, "hi"), preset_style_config("minimal"), OutputTarget.PLAIN)

    assert output.format == "[INFO] hi"


def test_debug_preset_uses_short_labels_on_ansi(make_record, location) -> None:
    record = make_record(LogLevel.WARN, "check", location=location)

    output = AdaptiveRenderer().render(record, preset_style_config("debug"), OutputTarget.ANSI_BASIC)

    assert "[WRN]" in output.format
    assert "service.py:42:7" in output.format


def test_style_cache_expires_entries_after_ttl() -> None:
    now = {"value": 0.0}
    cache = StyleCache(max_entries=5, ttl=10.0, clock=lambda: now["value"])
    key = StyleKey(LogLevel.INFO, "default", False, False)
    cache.set(key, "{message}", ())

    now["value"] = 11.0

    assert cache.get(key) is None
    assert len(cache) == 0


def test_style_cache_evicts_least_recently_touched() -> None:
    cache = StyleCache(max_entries=2)
    first, second, third = (StyleKey(level, "default", False, False) for level in (LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN))
    cache.set(first, "a", ())
    cache.set(second, "b", ())
    cache.get(first)

    cache.set(third, "c", ())

    assert first in cache
    assert second not in cache
    assert third in cache
