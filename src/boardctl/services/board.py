"""BoardService: board reads and board-level mutations.

Pipeline for every mutation: LOAD -> LOCATE -> VALIDATE -> MUTATE -> PERSIST -> NOTIFY

Board-level mutations invalidate the boards list; rename and delete also
invalidate the board itself.
"""

from __future__ import annotations

import logging

from boardctl.domain.ids import generate_id
from boardctl.domain.models import Board
from boardctl.domain.validation import validate_board_title
from boardctl.services._helpers import invalid, not_found
from boardctl.services.base import BaseService
from boardctl.services.result import ServiceResult
from boardctl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class BoardService(BaseService):
    """Lists, reads, creates, renames, and deletes boards."""

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @traced
    def list_boards(self) -> ServiceResult:
        """Return every board with its full column/card structure, in order."""
        snapshot = self._workspace.load()
        return ServiceResult(
            ok=True,
            op="list_boards",
            data={
                "boards": [b.model_dump() for b in snapshot.boards],
                "count": len(snapshot.boards),
            },
            meta={"revision": snapshot.revision},
        )

    @traced
    def get_board(self, board_id: str) -> ServiceResult:
        """Return one board, or a NOT_FOUND result. Never raises for absence."""
        op = "get_board"
        snapshot = self._workspace.load()
        board = snapshot.find_board(board_id)
        if board is None:
            return not_found(op, "board", board_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"board": board.model_dump()},
            meta={"revision": snapshot.revision},
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @traced
    def create_board(self, title: str) -> ServiceResult:
        """Append a new, empty board. Titles are unique case-insensitively."""
        op = "create_board"
        warnings: list[str] = []

        with self._workspace.transaction() as txn:
            boards = txn.snapshot.boards
            with trace_span("validate"):
                vr = validate_board_title(title, boards, rules=self._workspace.rules)
                if not vr.valid:
                    return invalid(op, vr)

            board = Board(id=generate_id(txn.snapshot.board_ids()), title=title)
            boards.append(board)

            with trace_span("persist"):
                saved = txn.commit()

        logger.debug("Created board %s (%r)", board.id, title)
        self._notify(
            op,
            board_id=board.id,
            entity="board",
            entity_id=board.id,
            warnings=warnings,
            boards_list=True,
            board_scope=False,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"board": board.model_dump()},
            warnings=warnings,
            meta={"revision": saved.revision},
        )

    @traced
    def rename_board(self, board_id: str, title: str) -> ServiceResult:
        """Replace a board's title in place.

        Uniqueness is checked against the other boards only, so changing
        the case of the current title is allowed.
        """
        op = "rename_board"
        warnings: list[str] = []

        with self._workspace.transaction() as txn:
            board = txn.snapshot.find_board(board_id)
            if board is None:
                return not_found(op, "board", board_id)

            with trace_span("validate"):
                vr = validate_board_title(
                    title,
                    txn.snapshot.boards,
                    rules=self._workspace.rules,
                    exclude_id=board_id,
                )
                if not vr.valid:
                    return invalid(op, vr)

            previous = board.title
            board.title = title

            with trace_span("persist"):
                saved = txn.commit()

        self._notify(
            op,
            board_id=board_id,
            entity="board",
            entity_id=board_id,
            warnings=warnings,
            boards_list=True,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"board": board.model_dump(exclude={"columns"}), "previous_title": previous},
            warnings=warnings,
            meta={"revision": saved.revision},
        )

    @traced
    def delete_board(self, board_id: str) -> ServiceResult:
        """Remove a board together with all of its columns and cards."""
        op = "delete_board"
        warnings: list[str] = []

        with self._workspace.transaction() as txn:
            board = txn.snapshot.find_board(board_id)
            if board is None:
                return not_found(op, "board", board_id)

            txn.snapshot.boards = [b for b in txn.snapshot.boards if b.id != board_id]

            with trace_span("persist"):
                saved = txn.commit()

        logger.debug("Deleted board %s with %d column(s)", board_id, len(board.columns))
        self._notify(
            op,
            board_id=board_id,
            entity="board",
            entity_id=board_id,
            warnings=warnings,
            boards_list=True,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": board_id,
                "title": board.title,
                "columns_removed": len(board.columns),
                "cards_removed": board.card_count(),
            },
            warnings=warnings,
            meta={"revision": saved.revision},
        )
