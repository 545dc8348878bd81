"""Flatten component trees, diff their state and sync it to a rendering host."""

from treesync.core.diff import MISSING, Kind, diff
from treesync.core.flatten import flatten, format_node
from treesync.core.keypath import encode_key, parent_key
from treesync.core.throttle import LoopScheduler, ThrottledDispatcher
from treesync.hosts import HttpHost, MemoryHost
from treesync.models.node import ComponentTree, Node
from treesync.protocols import HostProtocol, SchedulerProtocol
from treesync.sync import Synchronizer, is_host_ready

__all__ = [
    "MISSING",
    "ComponentTree",
    "HostProtocol",
    "HttpHost",
    "Kind",
    "LoopScheduler",
    "MemoryHost",
    "Node",
    "SchedulerProtocol",
    "Synchronizer",
    "ThrottledDispatcher",
    "diff",
    "encode_key",
    "flatten",
    "format_node",
    "is_host_ready",
    "parent_key",
]
