"""Structural diff between a freshly built snapshot and the host state.

The diff is a cheap approximation rather than a minimal one: any change in
shape (a resized list, an added or removed field) replaces the whole subtree
at that path instead of patching element by element. Paths use ``.field`` and
``[index]`` suffixes, e.g. ``$root.0,1-1.items[2].name``.
"""

import enum
from collections.abc import Mapping, Sequence
from typing import Any

from treesync.config import PATH_SEPARATOR


class _Missing:
    """Marker for a value that is absent, as opposed to None."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class Kind(enum.Enum):
    """Value classification used to pick a comparison strategy."""

    NULLISH = "nullish"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    KEYED = "keyed"
    OTHER = "other"


def classify(value: Any) -> Kind:
    if value is None or value is MISSING:
        return Kind.NULLISH
    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, int | float):
        return Kind.NUMBER
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, Mapping):
        return Kind.KEYED
    if isinstance(value, Sequence) and not isinstance(value, bytes | bytearray):
        return Kind.SEQUENCE
    return Kind.OTHER


def resolve_path(state: Any, field_name: str) -> Any:
    """Look up a dotted field name in state, returning MISSING on any miss."""
    value = state
    for segment in field_name.split(PATH_SEPARATOR):
        kind = classify(value)
        if kind is Kind.KEYED:
            value = value.get(segment, MISSING)
        elif kind is Kind.SEQUENCE and segment.isdigit() and int(segment) < len(value):
            value = value[int(segment)]
        else:
            return MISSING
    return value


def _compare(patch: dict[str, Any], path: str, new: Any, old: Any) -> None:
    if new is MISSING or new is old:
        return

    new_kind = classify(new)
    old_kind = classify(old)
    if new_kind is Kind.NULLISH or old_kind is Kind.NULLISH or new_kind is not old_kind:
        patch[path] = new
    elif new_kind is Kind.SEQUENCE:
        if len(new) != len(old):
            patch[path] = new
            return
        for i, (new_item, old_item) in enumerate(zip(new, old, strict=True)):
            _compare(patch, f"{path}[{i}]", new_item, old_item)
    elif new_kind is Kind.KEYED:
        # Length first; set equality only when lengths match.
        if len(new) != len(old) or new.keys() != old.keys():
            patch[path] = new
            return
        for name, value in new.items():
            _compare(patch, f"{path}{PATH_SEPARATOR}{name}", value, old[name])
    elif new != old:
        patch[path] = new


def diff(new_state: Mapping[str, Any], old_state: Any) -> dict[str, Any]:
    """Compute the patch that brings old_state in line with new_state.

    Each top-level field of new_state is looked up in old_state as a dotted
    path, so a snapshot key like ``$root.0,1-1`` is compared against
    ``old_state["$root"]["0,1-1"]``. Never raises on data shape; anything
    that cannot be compared element-wise becomes a full replacement.

    Args:
        new_state: Freshly computed snapshot or record mapping.
        old_state: Current host state, or None if the host has none yet.

    Returns:
        Mapping of field path to replacement value. Empty when in sync.
    """
    if old_state is None:
        old_state = {}
    patch: dict[str, Any] = {}
    for name, value in new_state.items():
        _compare(patch, name, value, resolve_path(old_state, name))
    return patch
