"""Flatten a component tree into a path-keyed snapshot of records."""

from typing import Any

from treesync.config import (
    KEY_SEPARATOR,
    OWN_KEY_FIELD,
    PARENT_KEY_FIELD,
    PATH_SEPARATOR,
    PREFIX_KEY_FIELD,
    ROOT_NAMESPACE,
    check_namespace,
)
from treesync.core.keypath import encode_key, parent_key
from treesync.models.node import ComponentTree


def node_fields(tree: ComponentTree, node_id: int) -> dict[str, Any]:
    """Combine state, props and computed fields; later sources shadow earlier ones."""
    node = tree.node(node_id)
    fields: dict[str, Any] = {**node.state, **node.props}
    view = tree.view(node_id)
    for name, compute in node.computed.items():
        fields[name] = compute(view)
    return fields


def format_node(
    tree: ComponentTree, node_id: int, *, namespace: str = ROOT_NAMESPACE
) -> dict[str, dict[str, Any]]:
    """Build the single-entry snapshot for one node.

    Returns:
        ``{namespace + "." + path_key: record}`` where the record holds the
        node's fields plus its own key, prefix key and parent key.
    """
    check_namespace(namespace)
    own = encode_key(tree, node_id)
    record = node_fields(tree, node_id)
    record[OWN_KEY_FIELD] = own
    record[PREFIX_KEY_FIELD] = own + KEY_SEPARATOR
    record[PARENT_KEY_FIELD] = parent_key(tree, node_id)
    return {f"{namespace}{PATH_SEPARATOR}{own}": record}


def flatten(
    tree: ComponentTree, node_id: int | None = None, *, namespace: str = ROOT_NAMESPACE
) -> dict[str, dict[str, Any]]:
    """Snapshot every live node of the subtree rooted at node_id (default: root)."""
    check_namespace(namespace)
    start = tree.root if node_id is None else node_id
    snapshot: dict[str, dict[str, Any]] = {}
    if tree.node(start).destroyed:
        return snapshot

    # Explicit stack so deep trees do not hit the recursion limit.
    todo = [start]
    while todo:
        current = todo.pop()
        snapshot.update(format_node(tree, current, namespace=namespace))
        todo.extend(child.id for child in reversed(tree.children(current)))
    return snapshot
