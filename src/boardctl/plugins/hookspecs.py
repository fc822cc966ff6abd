"""Pluggy hook specifications for boardctl invalidation and lifecycle events.

Dependents that cache reads subscribe to the two invalidation hooks and
refresh independently; the engine never pushes data to them.

- ``invalidate_boards``: the boards list is stale (board create/rename/delete).
- ``invalidate_board``: one board's structure is stale (any scoped mutation).
- ``post_mutation``: lifecycle notification after every committed mutation.

Hooks fire only after the snapshot has been persisted.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("boardctl")


class BoardctlHookSpec:
    """Hook specifications for the boardctl plugin system."""

    @hookspec
    def invalidate_boards(self) -> None:
        """Called when the list of boards may have changed."""

    @hookspec
    def invalidate_board(self, board_id: str) -> None:
        """Called when the board *board_id* may have changed."""

    @hookspec
    def post_mutation(
        self,
        op: str,
        board_id: str,
        entity: str,
        entity_id: str,
    ) -> None:
        """Called after a committed mutation on *entity* (board, column, card)."""
