"""Configuration constants for treesync."""

import os

# Minimum interval between two deliveries to the same host, in seconds.
THROTTLE_WINDOW: float = int(os.environ.get("TREESYNC_THROTTLE_MS", "50")) / 1000

# Joins ancestor keys into a path key. Must never appear inside a node key.
KEY_SEPARATOR: str = ","

# Separates the namespace from the path key, and field names in patch paths.
PATH_SEPARATOR: str = "."

# Characters with a meaning in patch paths; never allowed in node keys or the namespace.
RESERVED_PATH_CHARS: tuple[str, ...] = (PATH_SEPARATOR, "[", "]")

# Names of the addressing fields added to every record.
OWN_KEY_FIELD: str = "$k"
PREFIX_KEY_FIELD: str = "$kk"
PARENT_KEY_FIELD: str = "$p"


def check_namespace(namespace: str) -> str:
    """Return namespace unchanged, raising ValueError if it cannot head a patch path."""
    if not namespace:
        msg = "Root namespace must be a non-empty string"
        raise ValueError(msg)
    for char in RESERVED_PATH_CHARS:
        if char in namespace:
            msg = f"Root namespace {namespace!r} must not contain {char!r}"
            raise ValueError(msg)
    return namespace


# Top-level field of the host state that holds every flattened record.
ROOT_NAMESPACE: str = check_namespace(os.environ.get("TREESYNC_ROOT_NAMESPACE", "$root"))
