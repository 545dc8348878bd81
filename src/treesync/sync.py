"""Synchronize component tree state to a rendering host.

``init_sync`` pushes the whole flattened tree at once, bypassing the
throttle so the host never shows a partial view. ``update_sync`` pushes
one node's record through the shared throttled dispatcher.
"""

import copy
from collections.abc import Callable, Mapping
from typing import Any

from loguru import logger

from treesync.config import ROOT_NAMESPACE, THROTTLE_WINDOW, check_namespace
from treesync.core.diff import diff
from treesync.core.flatten import flatten, format_node
from treesync.core.throttle import ThrottledDispatcher
from treesync.models.node import ComponentTree
from treesync.protocols import HostProtocol

HostSource = HostProtocol | Callable[[], HostProtocol | None] | None


def clone(value: Any) -> Any:
    """Deep copy, so the diff never reads state that is still being mutated."""
    return copy.deepcopy(value)


def is_empty(patch: Mapping[str, Any]) -> bool:
    return not patch


def is_host_ready(host: Any) -> bool:
    """A host is ready when it exists and exposes a callable apply."""
    return host is not None and callable(getattr(host, "apply", None))


class Synchronizer:
    """Keep a host in sync with a component tree."""

    def __init__(
        self,
        tree: ComponentTree,
        host: HostSource,
        *,
        dispatcher: ThrottledDispatcher | None = None,
        window: float = THROTTLE_WINDOW,
        namespace: str = ROOT_NAMESPACE,
    ) -> None:
        """Create a synchronizer.

        Args:
            tree: Component tree to read state from.
            host: Host instance, or a zero-argument callable returning the
                current host (or None while there is none).
            dispatcher: Throttled channel for incremental updates. Built from
                window when omitted, delivering to the current host.
            window: Minimum seconds between incremental deliveries.
            namespace: Top-level host field holding the records.
        """
        self.tree = tree
        self._host = host
        self.namespace = check_namespace(namespace)
        self.dispatcher = dispatcher or ThrottledDispatcher(self._deliver, window)

    def host(self) -> HostProtocol | None:
        """Resolve the current host."""
        if self._host is not None and not is_host_ready(self._host) and callable(self._host):
            return self._host()  # type: ignore[call-arg]
        return self._host  # type: ignore[return-value]

    def _ready_host(self, node_id: int) -> HostProtocol | None:
        if self.tree.node(node_id).destroyed:
            logger.debug("Node {} is destroyed, skipping sync", node_id)
            return None
        host = self.host()
        if not is_host_ready(host):
            logger.debug("Host not ready, skipping sync for node {}", node_id)
            return None
        return host

    def _deliver(self, patch: dict[str, Any]) -> None:
        host = self.host()
        if not is_host_ready(host):
            # Host went away while a delivery was pending.
            logger.debug("Host gone, dropping patch with {} field(s)", len(patch))
            return
        host.apply(patch)  # type: ignore[union-attr]

    def init_sync(self, node_id: int | None = None) -> dict[str, Any]:
        """Push the full tree to the host immediately.

        Args:
            node_id: Node that triggered the sync. Defaults to the root.

        Returns:
            The patch applied, empty when the host was already in sync or
            the sync was skipped.
        """
        root = self.tree.root
        host = self._ready_host(root if node_id is None else node_id)
        if host is None:
            return {}

        snapshot = clone(flatten(self.tree, root, namespace=self.namespace))
        patch = diff(snapshot, host.data)
        if is_empty(patch):
            return {}
        logger.debug("Initial sync: {} field(s)", len(patch))
        host.apply(patch)
        return patch

    def update_sync(self, node_id: int) -> dict[str, Any]:
        """Submit one node's changed fields through the throttled channel.

        Returns:
            The patch submitted, empty when nothing changed or the sync was
            skipped.
        """
        host = self._ready_host(node_id)
        if host is None:
            return {}

        record = clone(format_node(self.tree, node_id, namespace=self.namespace))
        patch = diff(record, host.data)
        if is_empty(patch):
            return {}
        self.dispatcher.submit(patch)
        return patch
