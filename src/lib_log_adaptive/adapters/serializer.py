"""Priority-ordered serializer registry with depth and cycle protection.

Purpose
-------
Convert arbitrary logging arguments into JSON-safe structures before they are
exported. Users can register additional serializers that outrank the
built-ins.

Contents
--------
* :class:`CyclePolicy` - behaviour on self-referencing values.
* :class:`CircularReferenceError` - raised under :attr:`CyclePolicy.ERROR`.
* :data:`UNDEFINED` - explicit "no value" sentinel.
* :class:`SerializerEntry` / :class:`SerializeContext` - registry plumbing.
* :class:`SerializerRegistry` and :func:`default_registry`.

System Role
-----------
Used by the export formatter for argument lists. Cycle detection tracks the
*ancestor path* of the value being walked (pushed on entry, popped on exit),
so an object reachable twice through independent branches serializes fully
both times while a genuine cycle yields ``"[Circular]"``.
"""

from __future__ import annotations

import dataclasses
import re
import traceback
from collections.abc import Mapping
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Callable, Iterable

Predicate = Callable[[Any], bool]
SerializerFn = Callable[[Any, "SerializeContext"], Any]

DEFAULT_MAX_DEPTH = 5
DEFAULT_PRIORITY = 50
MAX_DEPTH_MARKER = "[Max Depth]"
CIRCULAR_MARKER = "[Circular]"
UNDEFINED_MARKER = "[undefined]"


class CyclePolicy(Enum):
    """Reaction to a value that is its own ancestor."""

    PLACEHOLDER = "placeholder"
    SKIP = "skip"
    ERROR = "error"

    @classmethod
    def from_name(cls, name: "str | CyclePolicy") -> "CyclePolicy":
        """Resolve a case-insensitive policy name.

        Examples
        --------
        >>> CyclePolicy.from_name('Skip') is CyclePolicy.SKIP
        True
        >>> CyclePolicy.from_name('ignore')
        Traceback (most recent call last):
        ...
        ValueError: Unsupported cycle policy: 'ignore'
        """
        if isinstance(name, CyclePolicy):
            return name
        normalized = str(name).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unsupported cycle policy: {name!r}")


class CircularReferenceError(ValueError):
    """Raised when a cycle is met under :attr:`CyclePolicy.ERROR`."""

    def __init__(self, path: tuple[str, ...]) -> None:
        self.path = path
        super().__init__(f"Circular reference at {'.'.join(path) or '<root>'}")


class _Undefined:
    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()
"""Marker for "explicitly absent" values, distinct from ``None``."""

_SKIP = object()


@dataclasses.dataclass(slots=True, frozen=True)
class SerializerEntry:
    """One registered serializer."""

    predicate: Predicate
    serializer: SerializerFn
    priority: int = DEFAULT_PRIORITY
    name: str | None = None


@dataclasses.dataclass(slots=True)
class _WalkState:
    ancestors: set[int] = dataclasses.field(default_factory=set)


@dataclasses.dataclass(slots=True, frozen=True)
class SerializeContext:
    """Position of the current value; serializers recurse through :meth:`child`."""

    registry: "SerializerRegistry"
    path: tuple[str, ...]
    depth: int
    _state: _WalkState

    def child(self, value: Any, key: str) -> Any:
        """Serialize a nested value one level deeper under ``key``."""

        return self.registry._walk(value, SerializeContext(self.registry, (*self.path, key), self.depth + 1, self._state))

    def is_skipped(self, value: Any) -> bool:
        return value is _SKIP


def _is_leaf(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def _callable_name(value: Any) -> str:
    name = getattr(value, "__name__", None)
    if not name or name == "<lambda>":
        return "anonymous"
    return str(name)


def _serialize_exception(value: BaseException, ctx: SerializeContext) -> dict[str, Any]:
    lines = "".join(traceback.format_exception(type(value), value, value.__traceback__)).splitlines()
    data: dict[str, Any] = {"name": type(value).__name__, "message": str(value), "stack": lines[:10]}
    cause = value.__cause__ or value.__context__
    if cause is not None:
        data["cause"] = ctx.child(cause, "cause")
    return data


def _serialize_temporal(value: date | time, ctx: SerializeContext) -> dict[str, Any]:
    data: dict[str, Any] = {"iso": value.isoformat()}
    if isinstance(value, datetime):
        data["timestamp"] = value.timestamp()
    return data


def _serialize_pattern(value: re.Pattern[Any], ctx: SerializeContext) -> dict[str, Any]:
    return {"pattern": value.pattern, "flags": int(value.flags)}


def _serialize_mapping(value: Mapping[Any, Any], ctx: SerializeContext) -> dict[str, Any]:
    entries = []
    for key, item in value.items():
        serialized = ctx.child(item, str(key))
        if not ctx.is_skipped(serialized):
            entries.append([str(key), serialized])
    return {"__type__": type(value).__name__, "entries": entries}


def _serialize_set(value: Iterable[Any], ctx: SerializeContext) -> dict[str, Any]:
    values = [ctx.child(item, f"[{index}]") for index, item in enumerate(value)]
    return {"__type__": "set", "values": [item for item in values if not ctx.is_skipped(item)]}


def _serialize_bytes(value: bytes | bytearray | memoryview, ctx: SerializeContext) -> dict[str, Any]:
    raw = bytes(value)
    return {"__type__": "bytes", "length": len(raw), "preview": raw[:50].hex()}


def _builtin_entries() -> list[SerializerEntry]:
    return [
        SerializerEntry(lambda v: isinstance(v, BaseException), _serialize_exception, 100, "exception"),
        SerializerEntry(lambda v: isinstance(v, (datetime, date, time)), _serialize_temporal, 90, "datetime"),
        SerializerEntry(lambda v: isinstance(v, re.Pattern), _serialize_pattern, 90, "pattern"),
        SerializerEntry(lambda v: isinstance(v, Mapping) and not isinstance(v, dict), _serialize_mapping, 80, "mapping"),
        SerializerEntry(lambda v: isinstance(v, (set, frozenset)), _serialize_set, 80, "set"),
        SerializerEntry(lambda v: isinstance(v, (bytes, bytearray, memoryview)), _serialize_bytes, 70, "bytes"),
    ]


class SerializerRegistry:
    """Ordered list of ``(predicate, serializer, priority)`` entries.

    Examples
    --------
    >>> registry = SerializerRegistry()
    >>> shared = {'id': 1}
    >>> registry.serialize({'a': shared, 'b': shared})
    {'a': {'id': 1}, 'b': {'id': 1}}
    >>> loop = {'name': 'root'}
    >>> loop['self'] = loop
    >>> registry.serialize(loop)
    {'name': 'root', 'self': '[Circular]'}
    >>> registry.serialize(lambda: None)
    '[Function: anonymous]'
    """

    def __init__(
        self,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        cycle_policy: CyclePolicy | str = CyclePolicy.PLACEHOLDER,
        preserve_undefined: bool = False,
        include_builtins: bool = True,
    ) -> None:
        if max_depth <= 0:
            raise ValueError("max_depth must be positive")
        self.max_depth = max_depth
        self.cycle_policy = CyclePolicy.from_name(cycle_policy)
        self.preserve_undefined = preserve_undefined
        self._entries: list[SerializerEntry] = _builtin_entries() if include_builtins else []
        self._sort()

    def _sort(self) -> None:
        # sort is stable: equal priorities keep registration order
        self._entries.sort(key=lambda entry: -entry.priority)

    def register(self, predicate: Predicate | type, serializer: SerializerFn, *, priority: int = DEFAULT_PRIORITY, name: str | None = None) -> SerializerEntry:
        """Add a serializer; a class is accepted in place of a predicate.

        Registering a ``name`` that already exists replaces that entry.
        """

        if isinstance(predicate, type):
            kind = predicate
            predicate = lambda value: isinstance(value, kind)  # noqa: E731
            name = name or kind.__name__
        if name is not None:
            self.unregister(name)
        entry = SerializerEntry(predicate, serializer, priority, name)
        self._entries.append(entry)
        self._sort()
        return entry

    def unregister(self, name: str) -> bool:
        """Remove the entry named ``name``; return whether one was removed."""

        before = len(self._entries)
        self._entries = [entry for entry in self._entries if entry.name != name]
        return len(self._entries) != before

    def has(self, name: str) -> bool:
        return any(entry.name == name for entry in self._entries)

    def entries(self) -> list[SerializerEntry]:
        """Return the entries in evaluation order (highest priority first)."""

        return list(self._entries)

    def serialize(self, value: Any) -> Any:
        """Convert ``value`` into an export-safe structure.

        Raises
        ------
        CircularReferenceError
            Only under :attr:`CyclePolicy.ERROR`.
        """

        result = self._walk(value, SerializeContext(self, (), 0, _WalkState()))
        return None if result is _SKIP else result

    def _walk(self, value: Any, ctx: SerializeContext) -> Any:
        if value is UNDEFINED:
            return value if self.preserve_undefined else UNDEFINED_MARKER
        if _is_leaf(value):
            return value
        if callable(value) and not isinstance(value, type) and not self._match(value):
            return f"[Function: {_callable_name(value)}]"
        if ctx.depth >= self.max_depth:
            return MAX_DEPTH_MARKER

        identity = id(value)
        ancestors = ctx._state.ancestors
        if identity in ancestors:
            return self._on_cycle(ctx)
        ancestors.add(identity)
        try:
            entry = self._match(value)
            if entry is not None:
                return entry.serializer(value, ctx)
            return self._walk_structure(value, ctx)
        finally:
            ancestors.discard(identity)

    def _match(self, value: Any) -> SerializerEntry | None:
        for entry in self._entries:
            if entry.predicate(value):
                return entry
        return None

    def _on_cycle(self, ctx: SerializeContext) -> Any:
        if self.cycle_policy is CyclePolicy.ERROR:
            raise CircularReferenceError(ctx.path)
        if self.cycle_policy is CyclePolicy.SKIP:
            return _SKIP
        return CIRCULAR_MARKER

    def _walk_structure(self, value: Any, ctx: SerializeContext) -> Any:
        if isinstance(value, dict):
            return self._walk_items(value.items(), ctx)
        if isinstance(value, (list, tuple)):
            items = [ctx.child(item, f"[{index}]") for index, item in enumerate(value)]
            return [item for item in items if item is not _SKIP]
        if isinstance(value, Enum):
            return ctx.child(value.value, "value")
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return self._walk_items(((f.name, getattr(value, f.name)) for f in dataclasses.fields(value)), ctx)
        if isinstance(value, type):
            return f"[Class: {value.__name__}]"
        attributes = getattr(value, "__dict__", None)
        if isinstance(attributes, dict):
            return self._walk_items(attributes.items(), ctx)
        return repr(value)

    def _walk_items(self, items: Iterable[tuple[Any, Any]], ctx: SerializeContext) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, item in items:
            serialized = ctx.child(item, str(key))
            if serialized is not _SKIP:
                result[str(key)] = serialized
        return result


_DEFAULT_REGISTRY: SerializerRegistry | None = None


def default_registry() -> SerializerRegistry:
    """Return the lazily created process-wide registry."""

    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = SerializerRegistry()
    return _DEFAULT_REGISTRY


__all__ = [
    "CIRCULAR_MARKER",
    "MAX_DEPTH_MARKER",
    "UNDEFINED",
    "UNDEFINED_MARKER",
    "CircularReferenceError",
    "CyclePolicy",
    "SerializeContext",
    "SerializerEntry",
    "SerializerRegistry",
    "default_registry",
]
