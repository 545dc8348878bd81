"""Tests for the structural differ."""

import pytest

from treesync.core.diff import MISSING, Kind, classify, diff, resolve_path


@pytest.mark.parametrize(
    ("value", "kind"),
    [
        (None, Kind.NULLISH),
        (MISSING, Kind.NULLISH),
        (True, Kind.BOOLEAN),
        (3, Kind.NUMBER),
        (2.5, Kind.NUMBER),
        ("x", Kind.STRING),
        ([1], Kind.SEQUENCE),
        ((1,), Kind.SEQUENCE),
        ({"a": 1}, Kind.KEYED),
        (b"raw", Kind.OTHER),
    ],
)
def test_classify(value: object, kind: Kind) -> None:
    assert classify(value) is kind


@pytest.mark.parametrize(
    "value",
    [1, "s", True, None, [1, [2, 3]], {"a": {"b": [1, {"c": 2}]}}, []],
)
def test_equal_values_produce_empty_patch(value: object) -> None:
    import copy

    assert diff({"f": value}, {"f": value}) == {}
    assert diff({"f": value}, {"f": copy.deepcopy(value)}) == {}


def test_missing_new_value_is_skipped() -> None:
    assert diff({"f": MISSING}, {"f": 1}) == {}


def test_array_element_change_patches_index() -> None:
    assert diff({"a": [1, 2, 3]}, {"a": [1, 9, 3]}) == {"a[1]": 2}


def test_array_length_change_replaces_array() -> None:
    assert diff({"a": [1, 2, 3]}, {"a": [1, 2]}) == {"a": [1, 2, 3]}


def test_keyed_field_change_patches_field() -> None:
    assert diff({"o": {"x": 1, "y": 2}}, {"o": {"x": 1, "y": 3}}) == {"o.y": 2}


def test_nested_change_goes_deep() -> None:
    new = {"o": {"list": [{"name": "a"}, {"name": "b"}]}}
    old = {"o": {"list": [{"name": "a"}, {"name": "z"}]}}
    assert diff(new, old) == {"o.list[1].name": "b"}


def test_keyed_field_set_change_replaces_structure() -> None:
    assert diff({"o": {"x": 1, "z": 2}}, {"o": {"x": 1, "y": 2}}) == {"o": {"x": 1, "z": 2}}
    assert diff({"o": {"x": 1}}, {"o": {"x": 1, "y": 2}}) == {"o": {"x": 1}}


def test_field_order_does_not_matter() -> None:
    assert diff({"o": {"x": 1, "y": 2}}, {"o": {"y": 2, "x": 1}}) == {}


@pytest.mark.parametrize(
    ("new", "old"),
    [
        (1, "1"),
        (True, 1),
        ([1], {"0": 1}),
        ({"a": 1}, None),
        (None, {"a": 1}),
        ("x", [1]),
    ],
)
def test_kind_mismatch_replaces(new: object, old: object) -> None:
    assert diff({"f": new}, {"f": old}) == {"f": new}


def test_int_and_float_compare_by_value() -> None:
    assert diff({"f": 1}, {"f": 1.0}) == {}


def test_scalar_change_emits_new_value() -> None:
    assert diff({"f": "new"}, {"f": "old"}) == {"f": "new"}


def test_absent_old_field_is_full_replace() -> None:
    assert diff({"f": {"a": 1}}, {}) == {"f": {"a": 1}}


def test_none_old_state_is_treated_as_empty() -> None:
    assert diff({"f": 1}, None) == {"f": 1}


def test_dotted_top_level_name_is_resolved_in_old_state() -> None:
    new = {"$root.0,1-1": {"count": 2, "$k": "0,1-1"}}
    old = {"$root": {"0,1-1": {"count": 1, "$k": "0,1-1"}}}
    assert diff(new, old) == {"$root.0,1-1.count": 2}


def test_ancestor_replace_suppresses_descendant_paths() -> None:
    patch = diff({"o": {"a": {"b": 1}, "new": 1}}, {"o": {"a": {"b": 2}}})
    assert patch == {"o": {"a": {"b": 1}, "new": 1}}


@pytest.mark.parametrize(
    ("state", "name", "expected"),
    [
        ({"a": {"b": 1}}, "a.b", 1),
        ({"a": {"b": 1}}, "a.c", MISSING),
        ({"a": {"b": 1}}, "x.b", MISSING),
        ({"a": None}, "a.b", MISSING),
        ({"a": 5}, "a.b", MISSING),
        ({"a": [10, 20]}, "a.1", 20),
        ({"a": [10, 20]}, "a.2", MISSING),
        ("not a mapping", "a", MISSING),
    ],
)
def test_resolve_path_never_raises(state: object, name: str, expected: object) -> None:
    assert resolve_path(state, name) is expected or resolve_path(state, name) == expected


def test_diff_does_not_mutate_inputs() -> None:
    new = {"o": {"x": [1, 2]}}
    old = {"o": {"x": [1, 3]}}
    diff(new, old)
    assert new == {"o": {"x": [1, 2]}}
    assert old == {"o": {"x": [1, 3]}}
