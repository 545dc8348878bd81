"""Parse patch paths and apply patches to nested host state."""

import copy
import re
from collections.abc import Mapping
from typing import Any

_SEGMENT_RE = re.compile(r"([^.\[\]]+)|\[(\d+)\]")


def parse_path(path: str) -> list[str | int]:
    """Split a patch path like ``a.b[2].c`` into ``["a", "b", 2, "c"]``."""
    segments: list[str | int] = []
    pos = 0
    while pos < len(path):
        if path[pos] == ".":
            pos += 1
            continue
        match = _SEGMENT_RE.match(path, pos)
        if match is None:
            msg = f"Malformed patch path {path!r} at offset {pos}"
            raise ValueError(msg)
        name, index = match.groups()
        segments.append(int(index) if index is not None else name)
        pos = match.end()
    if not segments:
        msg = "Empty patch path"
        raise ValueError(msg)
    return segments


def _child(container: Any, segment: str | int, next_segment: str | int) -> Any:
    """Return the container at segment, creating or replacing it as needed."""
    fresh: Any = [] if isinstance(next_segment, int) else {}
    if isinstance(segment, int):
        _pad(container, segment)
        current = container[segment]
    else:
        current = container.get(segment)
    wanted = list if isinstance(next_segment, int) else dict
    if not isinstance(current, wanted):
        current = fresh
        container[segment] = current
    return current


def _pad(container: list[Any], index: int) -> None:
    if len(container) <= index:
        container.extend([None] * (index + 1 - len(container)))


def apply_patch(state: dict[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Write every patch entry into state in place and return it.

    Intermediate containers are created when missing, and a scalar standing
    where a container is needed is overwritten. Lists are padded with None.
    """
    for path, value in patch.items():
        segments = parse_path(path)
        if isinstance(segments[0], int):
            msg = f"Patch path {path!r} must start with a field name"
            raise ValueError(msg)
        target: Any = state
        for segment, next_segment in zip(segments, segments[1:]):
            target = _child(target, segment, next_segment)
        last = segments[-1]
        if isinstance(last, int):
            _pad(target, last)
        target[last] = value
    return state


def is_descendant(path: str, ancestor: str) -> bool:
    """Whether path addresses something inside ancestor, e.g. ``a.b`` or ``a[0]`` in ``a``."""
    return path.startswith(ancestor + ".") or path.startswith(ancestor + "[")


def merge_patch(base: Mapping[str, Any], update: Mapping[str, Any]) -> dict[str, Any]:
    """Merge update into a copy of base, as if both were applied in order.

    A path in update replaces the same path and every descendant path in
    base, and moves to the end so later writes keep applying last. A path
    falling inside an ancestor already in base is written into that
    ancestor's value, so the result never holds a path and its ancestor.
    """
    merged = dict(base)
    for path, value in update.items():
        for existing in list(merged):
            if existing == path or is_descendant(existing, path):
                del merged[existing]

        ancestor = next((p for p in merged if is_descendant(path, p)), None)
        if ancestor is None:
            merged[path] = value
            continue
        holder = {"_": copy.deepcopy(merged[ancestor])}
        apply_patch(holder, {"_" + path[len(ancestor) :]: value})
        merged[ancestor] = holder["_"]
    return merged
