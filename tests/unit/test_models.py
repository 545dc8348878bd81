"""Tests for the component tree arena."""

import pytest

from treesync.config import check_namespace
from treesync.core.flatten import flatten
from treesync.models.node import ComponentTree


def test_generated_keys_use_depth_and_sibling_ordinal(tree: ComponentTree) -> None:
    keys = [n.key for n in tree]
    assert keys == ["0", "1-1", "2-1", "1-2"]


def test_generated_key_is_not_reused_after_destroy() -> None:
    tree = ComponentTree()
    root = tree.add()
    first = tree.add(parent=root)
    tree.destroy(first)
    second = tree.add(parent=root)
    assert tree.node(second).key == "1-2"


def test_parent_link_is_an_id() -> None:
    tree = ComponentTree()
    root = tree.add("app")
    child = tree.add("c", parent=root)
    assert tree.node(child).parent_id == root
    assert tree.parent(child) is tree.node(root)
    assert tree.parent(root) is None


def test_duplicate_sibling_key_raises() -> None:
    tree = ComponentTree()
    root = tree.add("app")
    tree.add("c", parent=root)
    with pytest.raises(ValueError, match="Duplicate key"):
        tree.add("c", parent=root)


@pytest.mark.parametrize("key", ["", "a.b", "a,b"])
def test_invalid_key_raises(key: str) -> None:
    tree = ComponentTree()
    with pytest.raises(ValueError):
        tree.add(key)


def test_unknown_node_raises_key_error() -> None:
    with pytest.raises(KeyError, match="Unknown node id"):
        ComponentTree().node(42)


def test_destroy_marks_whole_subtree(tree: ComponentTree) -> None:
    tree.destroy(1)
    assert tree.node(1).destroyed
    assert tree.node(2).destroyed
    assert not tree.node(3).destroyed
    assert [c.id for c in tree.children(0)] == [3]


def test_view_is_read_only(tree: ComponentTree) -> None:
    view = tree.view(1)
    assert dict(view) == {"count": 1, "step": 1}
    with pytest.raises(TypeError):
        view["count"] = 2  # type: ignore[index]


def test_from_dict_builds_nested_tree() -> None:
    tree = ComponentTree.from_dict(
        {
            "key": "app",
            "state": {"a": 1},
            "children": [{"key": "x", "props": {"p": True}}, {"state": {"b": 2}}],
        }
    )
    assert len(tree) == 3
    assert [c.key for c in tree.children(tree.root)] == ["x", "1-2"]
    assert tree.node(1).props == {"p": True}


@pytest.mark.parametrize("key", ["r[0]", "a]", "[x"])
def test_key_with_path_brackets_raises(key: str) -> None:
    tree = ComponentTree()
    root = tree.add()
    with pytest.raises(ValueError, match="must not contain"):
        tree.add(key, parent=root)


@pytest.mark.parametrize("namespace", ["", "app.root", "r[0]", "r]"])
def test_check_namespace_rejects_path_characters(namespace: str) -> None:
    with pytest.raises(ValueError):
        check_namespace(namespace)


def test_check_namespace_accepts_plain_names() -> None:
    assert check_namespace("$root") == "$root"
    assert check_namespace("app-tree") == "app-tree"


def test_flatten_rejects_bad_namespace(tree: ComponentTree) -> None:
    with pytest.raises(ValueError, match="namespace"):
        flatten(tree, namespace="a[0]")
