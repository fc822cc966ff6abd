"""ColumnService: column mutations scoped to one board.

Every committed column mutation invalidates the owning board.
"""

from __future__ import annotations

from collections.abc import Sequence

from boardctl.domain.ids import generate_id
from boardctl.domain.models import Column
from boardctl.domain.ordering import reorder
from boardctl.domain.validation import validate_column_title
from boardctl.services._helpers import invalid, not_found
from boardctl.services.base import BaseService
from boardctl.services.result import ServiceResult
from boardctl.services.telemetry import trace_span, traced


class ColumnService(BaseService):
    """Creates, renames, deletes, and reorders columns."""

    @traced
    def create_column(self, board_id: str, title: str) -> ServiceResult:
        """Append a new, empty column to the end of the board."""
        op = "create_column"
        warnings: list[str] = []

        with self._workspace.transaction() as txn:
            board = txn.snapshot.find_board(board_id)
            if board is None:
                return not_found(op, "board", board_id)

            with trace_span("validate"):
                vr = validate_column_title(title, board, rules=self._workspace.rules)
                if not vr.valid:
                    return invalid(op, vr)

            column = Column(id=generate_id(txn.snapshot.column_ids()), title=title)
            board.columns.append(column)

            with trace_span("persist"):
                saved = txn.commit()

        self._notify(op, board_id=board_id, entity="column", entity_id=column.id, warnings=warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"board_id": board_id, "column": column.model_dump()},
            warnings=warnings,
            meta={"revision": saved.revision},
        )

    @traced
    def rename_column(self, board_id: str, column_id: str, title: str) -> ServiceResult:
        """Replace a column's title; unique among the board's other columns."""
        op = "rename_column"
        warnings: list[str] = []

        with self._workspace.transaction() as txn:
            board = txn.snapshot.find_board(board_id)
            if board is None:
                return not_found(op, "board", board_id)
            column = board.find_column(column_id)
            if column is None:
                return not_found(op, "column", column_id)

            with trace_span("validate"):
                vr = validate_column_title(
                    title,
                    board,
                    rules=self._workspace.rules,
                    exclude_id=column_id,
                )
                if not vr.valid:
                    return invalid(op, vr)

            previous = column.title
            column.title = title

            with trace_span("persist"):
                saved = txn.commit()

        self._notify(op, board_id=board_id, entity="column", entity_id=column_id, warnings=warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "board_id": board_id,
                "column": column.model_dump(exclude={"cards"}),
                "previous_title": previous,
            },
            warnings=warnings,
            meta={"revision": saved.revision},
        )

    @traced
    def delete_column(self, board_id: str, column_id: str) -> ServiceResult:
        """Remove a column and every card in it."""
        op = "delete_column"
        warnings: list[str] = []

        with self._workspace.transaction() as txn:
            board = txn.snapshot.find_board(board_id)
            if board is None:
                return not_found(op, "board", board_id)
            column = board.find_column(column_id)
            if column is None:
                return not_found(op, "column", column_id)

            board.columns = [c for c in board.columns if c.id != column_id]

            with trace_span("persist"):
                saved = txn.commit()

        self._notify(op, board_id=board_id, entity="column", entity_id=column_id, warnings=warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "board_id": board_id,
                "id": column_id,
                "title": column.title,
                "cards_removed": len(column.cards),
            },
            warnings=warnings,
            meta={"revision": saved.revision},
        )

    @traced
    def reorder_columns(self, board_id: str, new_order: Sequence[str]) -> ServiceResult:
        """Rebuild the board's column sequence from *new_order*.

        Same rules as card reordering: unknown ids are skipped and columns
        the list does not name are dropped, together with their cards.
        """
        op = "reorder_columns"
        warnings: list[str] = []

        with self._workspace.transaction() as txn:
            board = txn.snapshot.find_board(board_id)
            if board is None:
                return not_found(op, "board", board_id)

            board.columns, dropped = reorder(board.columns, new_order)
            if dropped:
                warnings.append(f"{len(dropped)} column(s) not in the new order were removed")

            with trace_span("persist"):
                saved = txn.commit()

        self._notify(op, board_id=board_id, entity="board", entity_id=board_id, warnings=warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "board_id": board_id,
                "order": [c.id for c in board.columns],
                "dropped": dropped,
            },
            warnings=warnings,
            meta={"revision": saved.revision},
        )
