"""Rate-limited delivery that merges payloads submitted within one window."""

import asyncio
import functools
import threading
import time
from collections.abc import Callable
from typing import Any

from loguru import logger

from treesync.config import THROTTLE_WINDOW
from treesync.core.patch import merge_patch
from treesync.protocols import SchedulerProtocol, TimerHandle


class LoopScheduler:
    """Schedule callbacks on an asyncio loop.

    Uses the given loop, else the running one. Outside any running loop the
    callback goes to a daemon ``threading.Timer`` so synchronous callers work
    too.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                timer = threading.Timer(delay, callback)
                timer.daemon = True
                timer.start()
                return timer
        return loop.call_later(delay, callback)


class ThrottledDispatcher:
    """Deliver payloads at most once per window, merging what arrives in between.

    A submission arriving a full window after the last delivery goes out
    immediately (leading edge). Anything submitted sooner is merged into a
    pending buffer with ``merge_patch``, so the buffer applies like the
    submissions would have in order, and a single timer is armed to deliver
    the buffer when the window closes (trailing edge).

    Deliveries happen in submission order and never overlap: either inline in
    ``submit`` or from the one armed timer.
    """

    def __init__(
        self,
        deliver: Callable[[dict[str, Any]], Any],
        window: float = THROTTLE_WINDOW,
        *,
        leading: bool = True,
        trailing: bool = True,
        clock: Callable[[], float] = time.monotonic,
        scheduler: SchedulerProtocol | None = None,
    ) -> None:
        self._deliver = deliver
        self.window = window
        self.leading = leading
        self.trailing = trailing
        self._clock = clock
        self._scheduler: SchedulerProtocol = scheduler or LoopScheduler()

        # None means no delivery has happened yet in this baseline.
        self._last_delivery: float | None = None
        self._pending: dict[str, Any] | None = None
        self._timer: TimerHandle | None = None
        # Bumped on every arm; a timer callback for an older arm is stale.
        self._generation = 0
        # Threaded timers call back from another thread.
        self._lock = threading.RLock()

    @property
    def armed(self) -> bool:
        """Whether a trailing-edge delivery is scheduled."""
        return self._timer is not None

    @property
    def pending(self) -> dict[str, Any]:
        """Copy of the merged payload not yet delivered."""
        return dict(self._pending or {})

    def __call__(self, payload: dict[str, Any]) -> None:
        self.submit(payload)

    def submit(self, payload: dict[str, Any]) -> None:
        """Merge payload into the buffer and deliver now or on the next allowed tick."""
        with self._lock:
            now = self._clock()
            if self._last_delivery is None and not self.leading:
                self._last_delivery = now
            if self._last_delivery is None:
                elapsed = self.window
            else:
                elapsed = now - self._last_delivery

            self._pending = merge_patch(self._pending or {}, payload)

            # Negative elapsed time means the clock went backwards.
            if elapsed >= self.window or elapsed < 0:
                self._cancel_timer()
                self._last_delivery = now
                self._send()
            elif self._timer is None and self.trailing:
                remaining = self.window - elapsed
                logger.debug("Arming trailing delivery in {:.3f}s", remaining)
                self._generation += 1
                callback = functools.partial(self._on_timer, self._generation)
                self._timer = self._scheduler.call_later(remaining, callback)

    def flush(self) -> None:
        """Deliver the pending buffer right away, if there is one."""
        with self._lock:
            self._cancel_timer()
            if self._pending:
                self._last_delivery = self._clock()
                self._send()

    def cancel(self) -> None:
        """Drop the pending buffer and disarm the timer without delivering."""
        with self._lock:
            self._cancel_timer()
            self._pending = None

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if self._timer is None or generation != self._generation:
                return
            self._timer = None
            self._last_delivery = self._clock() if self.leading else None
            self._send()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _send(self) -> None:
        payload, self._pending = self._pending, None
        if not payload:
            return
        logger.debug("Delivering patch with {} field(s)", len(payload))
        self._deliver(payload)
