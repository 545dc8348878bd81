"""Component tree stored as an arena of nodes indexed by id."""

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from treesync.config import KEY_SEPARATOR, RESERVED_PATH_CHARS

ComputedField = Callable[[Mapping[str, Any]], Any]


@dataclass
class Node:
    """A single component instance in the tree.

    The parent link is an id into the owning ComponentTree, never a reference,
    so ownership only flows from parent to children.
    """

    id: int
    key: str | None
    parent_id: int | None
    state: dict[str, Any] = field(default_factory=dict)
    props: dict[str, Any] = field(default_factory=dict)
    computed: dict[str, ComputedField] = field(default_factory=dict)
    children: list[int] = field(default_factory=list)
    destroyed: bool = False
    # Children ever added, destroyed ones included; feeds generated keys.
    added_children: int = field(default=0, repr=False)


def _check_key(key: str) -> None:
    if not key:
        msg = "Node key must be a non-empty string"
        raise ValueError(msg)
    for char in (KEY_SEPARATOR, *RESERVED_PATH_CHARS):
        if char in key:
            msg = f"Node key {key!r} must not contain {char!r}"
            raise ValueError(msg)


class ComponentTree:
    """Owns every node; children are ordered id lists, parents are ids."""

    def __init__(self) -> None:
        self._nodes: dict[int, Node] = {}
        self._next_id = 0

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def add(
        self,
        key: str | None = None,
        *,
        parent: int | None = None,
        state: Mapping[str, Any] | None = None,
        props: Mapping[str, Any] | None = None,
        computed: Mapping[str, ComputedField] | None = None,
    ) -> int:
        """Create a node and return its id.

        Args:
            key: Key unique among siblings. Generated when omitted.
            parent: Id of the parent node, None for a root.
            state: Own state fields.
            props: External inputs passed down by the parent.
            computed: Field name -> function of the combined state and props.
        """
        parent_node = self.node(parent) if parent is not None else None
        if key is None:
            if parent_node is None:
                key = "0"
            else:
                depth = len(list(self.ancestors(parent_node.id))) + 1
                key = f"{depth}-{parent_node.added_children + 1}"
        _check_key(key)

        if parent_node is not None:
            siblings = {self._nodes[c].key for c in parent_node.children}
            if key in siblings:
                msg = f"Duplicate key {key!r} under node {parent_node.id}"
                raise ValueError(msg)
            parent_node.added_children += 1

        node_id = self._next_id
        self._next_id += 1
        self._nodes[node_id] = Node(
            id=node_id,
            key=key,
            parent_id=parent,
            state=dict(state or {}),
            props=dict(props or {}),
            computed=dict(computed or {}),
        )
        if parent_node is not None:
            parent_node.children.append(node_id)
        return node_id

    def node(self, node_id: int) -> Node:
        """Return the node with this id, raising KeyError if unknown."""
        try:
            return self._nodes[node_id]
        except KeyError:
            msg = f"Unknown node id: {node_id!r}"
            raise KeyError(msg) from None

    @property
    def root(self) -> int:
        """Id of the first node that has no parent."""
        for node in self._nodes.values():
            if node.parent_id is None:
                return node.id
        msg = "Tree is empty"
        raise KeyError(msg)

    def parent(self, node_id: int) -> Node | None:
        parent_id = self.node(node_id).parent_id
        return None if parent_id is None else self._nodes[parent_id]

    def ancestors(self, node_id: int) -> Iterator[Node]:
        """Yield ancestors from the immediate parent up to the root."""
        current = self.parent(node_id)
        while current is not None:
            yield current
            current = self.parent(current.id)

    def children(self, node_id: int) -> list[Node]:
        """Live children in insertion order."""
        return [
            self._nodes[c] for c in self.node(node_id).children if not self._nodes[c].destroyed
        ]

    def set_state(self, node_id: int, **fields: Any) -> None:
        self.node(node_id).state.update(fields)

    def set_props(self, node_id: int, **fields: Any) -> None:
        self.node(node_id).props.update(fields)

    def destroy(self, node_id: int) -> None:
        """Mark a node and its whole subtree destroyed. Never undone."""
        todo = [node_id]
        while todo:
            node = self.node(todo.pop())
            node.destroyed = True
            todo.extend(node.children)

    def view(self, node_id: int) -> Mapping[str, Any]:
        """Read-only view of state and props, as passed to computed fields."""
        node = self.node(node_id)
        return MappingProxyType({**node.state, **node.props})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ComponentTree":
        """Build a tree from nested dicts with key/state/props/children."""
        tree = cls()
        todo: list[tuple[Mapping[str, Any], int | None]] = [(data, None)]
        while todo:
            raw, parent = todo.pop(0)
            node_id = tree.add(
                raw.get("key"),
                parent=parent,
                state=raw.get("state"),
                props=raw.get("props"),
            )
            todo.extend((child, node_id) for child in raw.get("children", ()))
        return tree
