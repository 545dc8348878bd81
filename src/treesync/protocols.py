"""Protocols for dependency injection in the synchronization layer."""

from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HostProtocol(Protocol):
    """Protocol for rendering hosts that receive patches."""

    @property
    def data(self) -> Mapping[str, Any]:
        """Return the last-applied host state."""
        ...

    def apply(self, patch: dict[str, Any]) -> None:
        """Apply a patch (field path -> replacement value)."""
        ...


@runtime_checkable
class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled."""

    def cancel(self) -> None:
        """Prevent the callback from running."""
        ...


@runtime_checkable
class SchedulerProtocol(Protocol):
    """Protocol for deferred callbacks; asyncio event loops satisfy it."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        """Run callback once after delay seconds."""
        ...
