"""Derive hierarchical path keys for nodes in a component tree."""

from treesync.config import KEY_SEPARATOR
from treesync.models.node import ComponentTree


def parent_key(tree: ComponentTree, node_id: int) -> str:
    """Join ancestor keys from the root down to the immediate parent.

    Ancestors without a key contribute nothing; that only happens for a root.
    """
    keys = [a.key for a in tree.ancestors(node_id) if a.key]
    keys.reverse()
    return KEY_SEPARATOR.join(keys)


def encode_key(tree: ComponentTree, node_id: int) -> str:
    """Return the path key of a node, e.g. ``0,1-2,2-1``."""
    prefix = parent_key(tree, node_id)
    own = tree.node(node_id).key or ""
    if not prefix:
        return own
    return f"{prefix}{KEY_SEPARATOR}{own}"
