"""BaseService: foundation for the board, column, and card services.

Every service receives a :class:`Workspace` at construction time and owns
its transaction boundary via ``self._workspace.transaction()``. After a
successful commit the service emits invalidation events so caching readers
can refresh; rejected or failed operations emit nothing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from boardctl.services.telemetry import trace_span

if TYPE_CHECKING:
    from boardctl.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class BoardService(BaseService):
            def create_board(self, title: str) -> ServiceResult:
                with self._workspace.transaction() as txn:
                    ...
                    txn.commit()
                self._notify(...)
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
        *,
        inline: bool = False,
    ) -> None:
        """Dispatch a hook. No-op if the event bus is not initialized.

        INVARIANT: Plugin failures are warnings, never errors. Failures of
        hooks handed to a worker pool only reach the bus's event log.
        """
        bus = self._workspace.event_bus
        if bus is None:
            return
        try:
            event = bus.dispatch(hook_name, payload, inline=inline)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
            return
        if event.status == "failed":
            warnings.append(f"Plugin hook {hook_name} failed: {event.error}")

    def _notify(
        self,
        op: str,
        *,
        board_id: str,
        entity: str,
        entity_id: str,
        warnings: list[str],
        boards_list: bool = False,
        board_scope: bool = True,
    ) -> None:
        """Emit invalidation and lifecycle events for a committed mutation.

        Invalidation always runs before the mutation returns, so a caching
        reader never serves the pre-mutation state afterwards.
        """
        with trace_span("notify"):
            if boards_list:
                self._dispatch_event("invalidate_boards", {}, warnings, inline=True)
            if board_scope:
                self._dispatch_event(
                    "invalidate_board", {"board_id": board_id}, warnings, inline=True
                )
            self._dispatch_event(
                "post_mutation",
                {"op": op, "board_id": board_id, "entity": entity, "entity_id": entity_id},
                warnings,
            )
