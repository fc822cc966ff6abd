"""Built-in caching reader driven by invalidation hooks.

Caches the results of ``list_boards`` and ``get_board`` and drops the
affected entries when the engine reports them stale. The reader never
receives data from the engine; it re-reads through BoardService on the
next request after an invalidation.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

import pluggy

from boardctl.services.board import BoardService

if TYPE_CHECKING:
    from boardctl.infrastructure.workspace import Workspace
    from boardctl.services.result import ServiceResult

hookimpl = pluggy.HookimplMarker("boardctl")

logger = logging.getLogger(__name__)


class CachedBoardReader:
    """Read-through cache over :class:`BoardService` reads.

    Only successful results are cached, so a NOT_FOUND board is looked up
    again on the next call. Every invalidation bumps a generation counter;
    a read that overlapped an invalidation is returned but not cached.
    """

    def __init__(self, workspace: Workspace) -> None:
        self._service = BoardService(workspace)
        self._boards: ServiceResult | None = None
        self._by_id: dict[str, ServiceResult] = {}
        self._generation = 0
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def list_boards(self) -> ServiceResult:
        with self._lock:
            cached = self._boards
            generation = self._generation
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        result = self._service.list_boards()
        if result.ok:
            with self._lock:
                if self._generation == generation:
                    self._boards = result
        return result

    def get_board(self, board_id: str) -> ServiceResult:
        with self._lock:
            cached = self._by_id.get(board_id)
            generation = self._generation
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        result = self._service.get_board(board_id)
        if result.ok:
            with self._lock:
                if self._generation == generation:
                    self._by_id[board_id] = result
        return result

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._boards = None
            self._by_id.clear()

    @hookimpl
    def invalidate_boards(self) -> None:
        with self._lock:
            self._generation += 1
            self._boards = None
        logger.debug("Boards list cache invalidated")

    @hookimpl
    def invalidate_board(self, board_id: str) -> None:
        with self._lock:
            self._generation += 1
            self._by_id.pop(board_id, None)
            # The list embeds full board structure, so it is stale too.
            self._boards = None
        logger.debug("Board cache invalidated: %s", board_id)
