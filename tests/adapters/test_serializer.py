from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType

import pytest

from lib_log_adaptive.adapters.serializer import (
    CIRCULAR_MARKER,
    MAX_DEPTH_MARKER,
    UNDEFINED,
    UNDEFINED_MARKER,
    CircularReferenceError,
    CyclePolicy,
    SerializerRegistry,
)


class Color(Enum):
    RED = "red"


@dataclass
class Point:
    x: int
    y: int


class Plain:
    def __init__(self) -> None:
        self.name = "plain"
        self.tags = ["a", "b"]


def test_diamond_reference_is_serialized_fully_on_both_branches() -> None:
    shared = {"id": 7, "tags": ["x"]}
    value = {"left": {"node": shared}, "right": {"node": shared}}

    result = SerializerRegistry().serialize(value)

    assert result == {"left": {"node": {"id": 7, "tags": ["x"]}}, "right": {"node": {"id": 7, "tags": ["x"]}}}


def test_self_reference_becomes_placeholder() -> None:
    loop: dict[str, object] = {"name": "root", "children": []}
    loop["children"].append(loop)  # type: ignore[union-attr]

    result = SerializerRegistry().serialize(loop)

    assert result == {"name": "root", "children": [CIRCULAR_MARKER]}


def test_skip_policy_drops_the_cyclic_entry() -> None:
    loop: dict[str, object] = {"name": "root"}
    loop["self"] = loop

    result = SerializerRegistry(cycle_policy="skip").serialize(loop)

    assert result == {"name": "root"}


def test_error_policy_reports_the_path() -> None:
    loop: dict[str, object] = {"inner": {}}
    loop["inner"]["back"] = loop  # type: ignore[index]

    with pytest.raises(CircularReferenceError, match=r"inner\.back") as info:
        SerializerRegistry(cycle_policy=CyclePolicy.ERROR).serialize(loop)

    assert info.value.path == ("inner", "back")


def test_depth_limit_replaces_deep_values() -> None:
    nested = {"l1": {"l2": {"l3": {"l4": "deep"}}}}

    result = SerializerRegistry(max_depth=2).serialize(nested)

    assert result == {"l1": {"l2": MAX_DEPTH_MARKER}}


def test_leaves_pass_through_unchanged() -> None:
    registry = SerializerRegistry()
    for leaf in (None, True, 3, 2.5, "text"):
        assert registry.serialize(leaf) == leaf


def test_builtin_serializers_cover_common_types() -> None:
    registry = SerializerRegistry()
    moment = datetime(2025, 1, 1, tzinfo=timezone.utc)

    assert registry.serialize(moment) == {"iso": "2025-01-01T00:00:00+00:00", "timestamp": moment.timestamp()}
    pattern = re.compile("a+", re.IGNORECASE)
    assert registry.serialize(pattern) == {"pattern": "a+", "flags": int(pattern.flags)}
    assert registry.serialize(pattern)["flags"] & re.IGNORECASE
    assert registry.serialize(MappingProxyType({"a": 1})) == {"__type__": "mappingproxy", "entries": [["a", 1]]}
    assert registry.serialize({3}) == {"__type__": "set", "values": [3]}
    assert registry.serialize(b"\x00\xff") == {"__type__": "bytes", "length": 2, "preview": "00ff"}


def test_exception_serialization_includes_cause() -> None:
    try:
        try:
            raise KeyError("missing")
        except KeyError as inner:
            raise RuntimeError("wrapped") from inner
    except RuntimeError as exc:
        result = SerializerRegistry().serialize(exc)

    assert result["name"] == "RuntimeError"
    assert result["message"] == "wrapped"
    assert len(result["stack"]) <= 10
    assert result["cause"]["name"] == "KeyError"


def test_callables_classes_enums_and_objects() -> None:
    registry = SerializerRegistry()

    def handler() -> None:
        return None

    assert registry.serialize(handler) == "[Function: handler]"
    assert registry.serialize(lambda: None) == "[Function: anonymous]"
    assert registry.serialize(Point) == "[Class: Point]"
    assert registry.serialize(Color.RED) == "red"
    assert registry.serialize(Point(1, 2)) == {"x": 1, "y": 2}
    assert registry.serialize(Plain()) == {"name": "plain", "tags": ["a", "b"]}


def test_undefined_is_distinct_from_none() -> None:
    assert SerializerRegistry().serialize([None, UNDEFINED]) == [None, UNDEFINED_MARKER]
    assert SerializerRegistry(preserve_undefined=True).serialize(UNDEFINED) is UNDEFINED


def test_custom_serializer_outranks_builtins_by_priority() -> None:
    registry = SerializerRegistry()
    registry.register(datetime, lambda value, ctx: value.strftime("%Y"), priority=200)

    assert registry.serialize(datetime(2024, 5, 1, tzinfo=timezone.utc)) == "2024"
    assert registry.entries()[0].name == "datetime"


def test_equal_priorities_keep_registration_order() -> None:
    registry = SerializerRegistry(include_builtins=False)
    registry.register(lambda value: isinstance(value, Point), lambda value, ctx: "first", name="first")
    registry.register(lambda value: isinstance(value, Point), lambda value, ctx: "second", name="second")

    assert registry.serialize(Point(0, 0)) == "first"


def test_unregister_restores_generic_walk() -> None:
    registry = SerializerRegistry()
    registry.register(Point, lambda value, ctx: f"{value.x},{value.y}")

    assert registry.has("Point")
    assert registry.serialize(Point(1, 2)) == "1,2"
    assert registry.unregister("Point") is True
    assert registry.serialize(Point(1, 2)) == {"x": 1, "y": 2}
    assert registry.unregister("Point") is False


def test_custom_serializers_recurse_through_context() -> None:
    registry = SerializerRegistry()
    registry.register(Point, lambda value, ctx: {"coords": ctx.child([value.x, value.y], "coords")})

    assert registry.serialize({"p": Point(3, 4)}) == {"p": {"coords": [3, 4]}}
