"""Workspace: the single dependency injected into every service.

The Workspace owns the snapshot store, the writer lock, and the event bus.
:meth:`Workspace.transaction` runs one full Load -> Mutate -> Persist cycle
under the lock:

- **Lock**: a process-wide ``threading.RLock`` per store path plus a
  cross-process ``filelock.FileLock`` next to the store file. Two mutations
  can never interleave, so the engine cannot lose updates.
- **Commit**: explicit. Nothing is written unless the service calls
  :meth:`WorkspaceTransaction.commit`; returning early (not-found,
  validation failure) or raising discards the in-memory changes.
- **Optimistic check**: the commit passes the loaded revision to the store,
  which refuses the write if another writer bypassed the lock.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from filelock import FileLock, Timeout

from boardctl.infrastructure.store import JsonSnapshotStore, StoreLockTimeout

if TYPE_CHECKING:
    from collections.abc import Iterator

    from boardctl.config.settings import BoardctlSettings
    from boardctl.domain.models import Snapshot
    from boardctl.domain.validation import FieldRules
    from boardctl.plugins.builtins.cache import CachedBoardReader
    from boardctl.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)

_PATH_LOCKS: dict[Path, threading.RLock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _thread_lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _PATH_LOCKS_GUARD:
        lock = _PATH_LOCKS.get(key)
        if lock is None:
            lock = _PATH_LOCKS[key] = threading.RLock()
        return lock


# ---------------------------------------------------------------------------
# WorkspaceTransaction: yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class WorkspaceTransaction:
    """Active transaction holding the loaded snapshot.

    Services mutate :attr:`snapshot` in place, then call :meth:`commit`.
    """

    snapshot: Snapshot
    _workspace: Workspace = field(repr=False)
    base_revision: int = 0
    committed: bool = False

    def commit(self) -> Snapshot:
        """Persist the full snapshot. Raises :class:`StoreError` on failure."""
        if self.committed:
            msg = "Transaction already committed"
            raise RuntimeError(msg)
        saved = self._workspace.store.save(self.snapshot, expected_revision=self.base_revision)
        self.snapshot = saved
        self.committed = True
        return saved


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------


class Workspace:
    """Store, lock, validation rules, and event bus for one board collection."""

    def __init__(self, settings: BoardctlSettings) -> None:
        self.settings = settings
        store_cfg = settings.store
        self.store = JsonSnapshotStore(
            settings.store_path,
            indent=store_cfg.indent,
            recover_corrupt=store_cfg.recover_corrupt,
        )
        self.rules: FieldRules = settings.validation.to_rules()
        self._thread_lock = _thread_lock_for(self.store.path)
        self._file_lock = FileLock(
            str(self.store.path.with_name(f"{self.store.path.name}.lock")),
            timeout=store_cfg.lock_timeout,
        )
        self._event_bus: EventBus | None = None

    @property
    def root(self) -> Path:
        return self.settings.root

    @property
    def event_bus(self) -> EventBus | None:
        """The event bus, or None if :meth:`init_event_bus` was not called."""
        return self._event_bus

    @property
    def reader(self) -> CachedBoardReader | None:
        """The registered caching reader plugin, if any."""
        if self._event_bus is None:
            return None
        return self._event_bus.plugin_manager.get_plugin("board-cache")  # type: ignore[return-value]

    def init_event_bus(self, *, sync: bool = True) -> EventBus:
        """Load plugins and create the event bus.

        Registers the built-in caching reader when ``[plugins] cache`` is on.
        """
        from boardctl.plugins.builtins.cache import CachedBoardReader
        from boardctl.plugins.event_bus import EventBus
        from boardctl.plugins.manager import PluginManager

        pm = PluginManager()
        if self.settings.plugins.cache:
            pm.register_plugin(CachedBoardReader(self), name="board-cache")
        pm.discover_and_load(local_dir=self.settings.local_plugin_dir)
        self._event_bus = EventBus(pm, sync=sync)
        return self._event_bus

    # ------------------------------------------------------------------
    # Snapshot access
    # ------------------------------------------------------------------

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._thread_lock:
            self.store.path.parent.mkdir(parents=True, exist_ok=True)
            try:
                self._file_lock.acquire()
            except Timeout as exc:
                msg = f"Timed out waiting for store lock on {self.store.path}"
                raise StoreLockTimeout(msg) from exc
            try:
                yield
            finally:
                self._file_lock.release()

    def load(self) -> Snapshot:
        """Load the current snapshot for reading."""
        with self._locked():
            return self.store.load()

    @contextmanager
    def transaction(self) -> Iterator[WorkspaceTransaction]:
        """Hold the writer lock across one Load -> Mutate -> Persist cycle.

        Usage::

            with workspace.transaction() as txn:
                board = txn.snapshot.find_board(board_id)
                ...
                txn.commit()
        """
        with self._locked():
            snapshot = self.store.load()
            txn = WorkspaceTransaction(
                snapshot=snapshot,
                _workspace=self,
                base_revision=snapshot.revision,
            )
            yield txn
            if not txn.committed:
                logger.debug("Transaction closed without commit; changes discarded")

    def close(self) -> None:
        """Shut down the event bus (if any)."""
        if self._event_bus is not None:
            self._event_bus.shutdown()
            self._event_bus = None
