"""Rendering hosts: an in-process one and a remote one reached over HTTP."""

import copy
from collections.abc import Mapping
from typing import Any

import requests
from loguru import logger

from treesync.core.patch import apply_patch


class MemoryHost:
    """Host that keeps its state in a dict and records every apply call."""

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(data or {}))
        self.calls: list[dict[str, Any]] = []

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    def apply(self, patch: dict[str, Any]) -> None:
        """Apply a patch; values are copied so the host never aliases the caller."""
        patch = copy.deepcopy(patch)
        self.calls.append(patch)
        apply_patch(self._data, patch)


class HttpHost:
    """Host living behind an HTTP endpoint.

    ``GET {base_url}/state`` returns the applied state as JSON and
    ``POST {base_url}/patch`` applies a patch sent as the JSON body.
    """

    def __init__(
        self,
        base_url: str,
        *,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.sess = session or requests.Session()
        self.timeout = timeout
        logger.debug("HTTP host ready: {!r}", self.base_url)

    @property
    def data(self) -> dict[str, Any]:
        r = self.sess.get(f"{self.base_url}/state", timeout=self.timeout)
        r.raise_for_status()
        rv: dict[str, Any] = r.json() or {}
        return rv

    def apply(self, patch: dict[str, Any]) -> None:
        logger.debug("Posting patch: {} field(s) to {!r}", len(patch), self.base_url)
        r = self.sess.post(f"{self.base_url}/patch", json=patch, timeout=self.timeout)
        r.raise_for_status()
