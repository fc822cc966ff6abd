"""CardService: card mutations, reordering, and cross-column moves.

Lookups walk board -> column -> card and stop at the first level that does
not resolve. Every committed card mutation invalidates the owning board.

INVARIANT: A move removes the card from exactly one column and inserts it
into exactly one column; the board's total card count is unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from boardctl.domain.ids import generate_id
from boardctl.domain.models import Card
from boardctl.domain.ordering import detach_card, place_card, reorder
from boardctl.domain.validation import validate_card_content
from boardctl.services._helpers import invalid, not_found
from boardctl.services.base import BaseService
from boardctl.services.result import ServiceResult
from boardctl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class CardService(BaseService):
    """Creates, updates, deletes, reorders, and moves cards."""

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    @traced
    def create_card(self, board_id: str, column_id: str, content: str) -> ServiceResult:
        """Append a new card to the end of the column."""
        op = "create_card"
        warnings: list[str] = []

        with self._workspace.transaction() as txn:
            board = txn.snapshot.find_board(board_id)
            if board is None:
                return not_found(op, "board", board_id)
            column = board.find_column(column_id)
            if column is None:
                return not_found(op, "column", column_id)

            with trace_span("validate"):
                vr = validate_card_content(content, rules=self._workspace.rules)
                if not vr.valid:
                    return invalid(op, vr)

            card = Card(id=generate_id(txn.snapshot.card_ids()), content=content)
            column.cards.append(card)

            with trace_span("persist"):
                saved = txn.commit()

        self._notify(op, board_id=board_id, entity="card", entity_id=card.id, warnings=warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"board_id": board_id, "column_id": column_id, "card": card.model_dump()},
            warnings=warnings,
            meta={"revision": saved.revision},
        )

    @traced
    def update_card(
        self,
        board_id: str,
        column_id: str,
        card_id: str,
        content: str,
    ) -> ServiceResult:
        """Replace a card's content."""
        op = "update_card"
        warnings: list[str] = []

        with self._workspace.transaction() as txn:
            board = txn.snapshot.find_board(board_id)
            if board is None:
                return not_found(op, "board", board_id)
            column = board.find_column(column_id)
            if column is None:
                return not_found(op, "column", column_id)
            card = column.find_card(card_id)
            if card is None:
                return not_found(op, "card", card_id)

            with trace_span("validate"):
                vr = validate_card_content(content, rules=self._workspace.rules)
                if not vr.valid:
                    return invalid(op, vr)

            card.content = content

            with trace_span("persist"):
                saved = txn.commit()

        self._notify(op, board_id=board_id, entity="card", entity_id=card_id, warnings=warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"board_id": board_id, "column_id": column_id, "card": card.model_dump()},
            warnings=warnings,
            meta={"revision": saved.revision},
        )

    @traced
    def delete_card(self, board_id: str, column_id: str, card_id: str) -> ServiceResult:
        """Remove a card by identity (not by position)."""
        op = "delete_card"
        warnings: list[str] = []

        with self._workspace.transaction() as txn:
            board = txn.snapshot.find_board(board_id)
            if board is None:
                return not_found(op, "board", board_id)
            column = board.find_column(column_id)
            if column is None:
                return not_found(op, "column", column_id)
            if column.find_card(card_id) is None:
                return not_found(op, "card", card_id)

            column.cards = [c for c in column.cards if c.id != card_id]

            with trace_span("persist"):
                saved = txn.commit()

        self._notify(op, board_id=board_id, entity="card", entity_id=card_id, warnings=warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"board_id": board_id, "column_id": column_id, "id": card_id},
            warnings=warnings,
            meta={"revision": saved.revision},
        )

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    @traced
    def reorder_cards(
        self,
        board_id: str,
        column_id: str,
        new_order: Sequence[str],
    ) -> ServiceResult:
        """Rebuild a column's cards following *new_order*.

        Ids that match no current card are skipped. Cards the list does not
        name are removed from the column. Applying the same list again is a
        no-op.
        """
        op = "reorder_cards"
        warnings: list[str] = []

        with self._workspace.transaction() as txn:
            board = txn.snapshot.find_board(board_id)
            if board is None:
                return not_found(op, "board", board_id)
            column = board.find_column(column_id)
            if column is None:
                return not_found(op, "column", column_id)

            column.cards, dropped = reorder(column.cards, new_order)
            if dropped:
                warnings.append(f"{len(dropped)} card(s) not in the new order were removed")

            with trace_span("persist"):
                saved = txn.commit()

        self._notify(op, board_id=board_id, entity="column", entity_id=column_id, warnings=warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "board_id": board_id,
                "column_id": column_id,
                "cards": [c.model_dump() for c in column.cards],
                "dropped": dropped,
            },
            warnings=warnings,
            meta={"revision": saved.revision},
        )

    @traced
    def move_card(
        self,
        board_id: str,
        card_id: str,
        to_column_id: str,
        new_order: Sequence[str],
    ) -> ServiceResult:
        """Move a card into *to_column_id* at the position given by *new_order*.

        The card is found by scanning the board's columns, removed from its
        origin, and placed into the destination's rebuilt sequence. When the
        origin is the destination this behaves like a reorder. A card that
        *new_order* forgets to name is appended rather than lost.
        """
        op = "move_card"
        warnings: list[str] = []

        with self._workspace.transaction() as txn:
            board = txn.snapshot.find_board(board_id)
            if board is None:
                return not_found(op, "board", board_id)

            detached = detach_card(board, card_id)
            if detached is None:
                return not_found(op, "card", card_id)
            source, card = detached

            target = board.find_column(to_column_id)
            if target is None:
                return not_found(op, "column", to_column_id)

            if card_id not in new_order:
                warnings.append(f"Card {card_id} missing from new order; appended to the end")
            target.cards, dropped = place_card(target.cards, card, new_order)
            if dropped:
                warnings.append(f"{len(dropped)} card(s) not in the new order were removed")

            with trace_span("persist"):
                saved = txn.commit()

        logger.debug("Moved card %s from %s to %s", card_id, source.id, target.id)
        self._notify(op, board_id=board_id, entity="card", entity_id=card_id, warnings=warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "board_id": board_id,
                "card_id": card_id,
                "from_column_id": source.id,
                "to_column_id": target.id,
                "cards": [c.model_dump() for c in target.cards],
                "dropped": dropped,
            },
            warnings=warnings,
            meta={"revision": saved.revision},
        )
