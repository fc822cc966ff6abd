"""Pure ordering algorithms for reorder and move operations.

Both operations rebuild a sequence from a caller-supplied list of ids:

- An id that matches a current item contributes that item, in input order.
- An id that matches nothing is skipped (not an error).
- An item whose id is absent from the input is dropped from the sequence.
- A repeated id contributes its item only once (first occurrence).

Applying the same id list twice yields the same sequence both times.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from boardctl.domain.models import Board, Card, Column


class _HasId(Protocol):
    id: str


T = TypeVar("T", bound=_HasId)


def reorder(items: Sequence[T], new_order: Sequence[str]) -> tuple[list[T], list[str]]:
    """Rebuild *items* following *new_order*.

    Returns ``(reordered, dropped_ids)`` where *dropped_ids* lists the ids of
    current items that the input did not name, in their original order.
    """
    by_id = {item.id: item for item in items}
    reordered: list[T] = []
    seen: set[str] = set()
    for item_id in new_order:
        if item_id in seen:
            continue
        item = by_id.get(item_id)
        if item is not None:
            reordered.append(item)
            seen.add(item_id)
    dropped = [item.id for item in items if item.id not in seen]
    return reordered, dropped


def detach_card(board: Board, card_id: str) -> tuple[Column, Card] | None:
    """Remove *card_id* from the first column holding it.

    Scans columns in board order and stops at the first match, so exactly
    one removal happens. Returns ``(source_column, card)`` or None.
    """
    for column in board.columns:
        for idx, card in enumerate(column.cards):
            if card.id == card_id:
                del column.cards[idx]
                return column, card
    return None


def place_card(
    remaining: Sequence[Card],
    card: Card,
    new_order: Sequence[str],
) -> tuple[list[Card], list[str]]:
    """Insert the moved *card* among *remaining* destination cards.

    *remaining* must not contain *card*. The moved card takes the position
    of its id in *new_order*; if *new_order* never names it, it is appended
    so that a move can never lose a card. Returns ``(cards, dropped_ids)``.
    """
    rebuilt, dropped = reorder([*remaining, card], new_order)
    if card.id in dropped:
        dropped.remove(card.id)
        rebuilt.append(card)
    return rebuilt, dropped
