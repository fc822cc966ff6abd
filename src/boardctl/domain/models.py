"""Entity models: Board, Column, Card, and the persisted Snapshot.

Cards are embedded in columns and columns in boards, so deleting a parent
drops its descendants by omission. Sequence order of ``columns`` and
``cards`` is significant and survives serialization unchanged.

INVARIANT: A card id resolves to exactly one (board, column) pair.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

SCHEMA_VERSION = 1


class Card(BaseModel):
    """A single card inside a column."""

    id: str
    content: str


class Column(BaseModel):
    """An ordered list of cards, owned by one board."""

    id: str
    title: str
    cards: list[Card] = Field(default_factory=list)

    def find_card(self, card_id: str) -> Card | None:
        return next((c for c in self.cards if c.id == card_id), None)


class Board(BaseModel):
    """A titled board holding an ordered list of columns."""

    id: str
    title: str
    columns: list[Column] = Field(default_factory=list)

    def find_column(self, column_id: str) -> Column | None:
        return next((c for c in self.columns if c.id == column_id), None)

    def card_count(self) -> int:
        return sum(len(col.cards) for col in self.columns)


class Snapshot(BaseModel):
    """The whole persisted document.

    Attributes:
        version: Schema version of the document layout.
        revision: Incremented by the store on every successful save.
        boards: All boards, in creation order.
    """

    version: int = SCHEMA_VERSION
    revision: int = 0
    boards: list[Board] = Field(default_factory=list)

    def find_board(self, board_id: str) -> Board | None:
        return next((b for b in self.boards if b.id == board_id), None)

    def board_ids(self) -> set[str]:
        return {b.id for b in self.boards}

    def column_ids(self) -> set[str]:
        return {c.id for b in self.boards for c in b.columns}

    def card_ids(self) -> set[str]:
        return {card.id for b in self.boards for c in b.columns for card in c.cards}
