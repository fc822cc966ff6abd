"""Event dispatch via pluggy, synchronous or on a ThreadPoolExecutor.

Dispatch is synchronous unless the bus is built with ``sync=False``.
Every dispatched event is recorded in an in-memory log with its outcome
(``pending`` -> ``completed`` or ``failed``). ``drain()`` waits for
in-flight async events and returns the log.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from boardctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


@dataclass
class DispatchedEvent:
    """One hook dispatch and its outcome."""

    id: int
    hook_name: str
    payload: dict[str, Any] = field(default_factory=dict)
    status: str = "pending"
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "hook_name": self.hook_name,
            "payload": self.payload,
            "status": self.status,
            "error": self.error,
        }


class EventBus:
    """Dispatch hooks through a :class:`PluginManager`.

    Parameters:
        plugin_manager: Loaded PluginManager for hook dispatch.
        sync: Dispatch on the calling thread. ``False`` hands events to a
            worker pool unless they are dispatched with ``inline=True``.
        max_workers: ThreadPoolExecutor worker count for async dispatch.
        max_log: Number of recent events kept in the log.
    """

    def __init__(
        self,
        plugin_manager: PluginManager,
        *,
        sync: bool = True,
        max_workers: int = 2,
        max_log: int = 500,
    ) -> None:
        self._pm = plugin_manager
        self._sync = sync
        self._executor: ThreadPoolExecutor | None = (
            None if sync else ThreadPoolExecutor(max_workers=max_workers)
        )
        self._futures: list[Future[None]] = []
        self._ids = itertools.count(1)
        self._log: list[DispatchedEvent] = []
        self._max_log = max_log
        self._lock = threading.Lock()

    @property
    def plugin_manager(self) -> PluginManager:
        return self._pm

    @property
    def is_sync(self) -> bool:
        return self._sync

    @property
    def pending(self) -> int:
        """Async events submitted but not yet finished."""
        with self._lock:
            return sum(1 for f in self._futures if not f.done())

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def dispatch(
        self, hook_name: str, payload: dict[str, Any], *, inline: bool = False
    ) -> DispatchedEvent:
        """Record an event, then dispatch it.

        Sync buses and ``inline=True`` run the hook on the calling thread, so
        the returned event already carries its final status.
        """
        event = DispatchedEvent(id=next(self._ids), hook_name=hook_name, payload=payload)
        with self._lock:
            self._log.append(event)
            del self._log[: -self._max_log]

        if self._sync or inline or self._executor is None:
            self._execute_hook(event)
            return event

        future = self._executor.submit(self._execute_hook, event)
        with self._lock:
            self._futures = [f for f in self._futures if not f.done()]
            self._futures.append(future)
        return event

    def drain(self) -> list[DispatchedEvent]:
        """Wait for in-flight async events and return the event log."""
        self._wait_futures()
        with self._lock:
            return list(self._log)

    def failed(self) -> list[DispatchedEvent]:
        return [e for e in self.drain() if e.status == "failed"]

    def shutdown(self) -> None:
        """Shutdown the ThreadPoolExecutor, waiting for pending tasks."""
        self._wait_futures()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _execute_hook(self, event: DispatchedEvent) -> None:
        hook_fn = getattr(self._pm.hook, event.hook_name, None)
        if hook_fn is None:
            event.status = "completed"
            return

        try:
            hook_fn(**event.payload)
        except Exception as exc:
            logger.warning("Hook %s failed: %s", event.hook_name, exc)
            event.status = "failed"
            event.error = str(exc)
        else:
            event.status = "completed"

    def _wait_futures(self) -> None:
        with self._lock:
            futures, self._futures = self._futures, []
        for future in futures:
            # _execute_hook records its own failures; result() only waits.
            future.result(timeout=30)
