"""Command group: card mutations, reordering, and moves."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from boardctl.commands._base import BoardctlGroup
from boardctl.services.card import CardService

if TYPE_CHECKING:
    from boardctl.commands._context import AppContext

_CARD_EXAMPLES = """\
  boardctl card create BOARD_ID COLUMN_ID "Write the release notes"
  boardctl card update BOARD_ID COLUMN_ID CARD_ID "Publish the release notes"
  boardctl card delete BOARD_ID COLUMN_ID CARD_ID
  boardctl card reorder BOARD_ID COLUMN_ID CARD_C CARD_A
  boardctl card move BOARD_ID CARD_ID TO_COLUMN_ID CARD_X CARD_ID CARD_Y"""


@click.group(cls=BoardctlGroup, examples=_CARD_EXAMPLES)
def card() -> None:
    """Create, update, delete, reorder, and move cards."""


@card.command(
    examples="""\
  boardctl card create BOARD_ID COLUMN_ID "Write the release notes"
  boardctl -q card create BOARD_ID COLUMN_ID "Fix login bug\"""",
)
@click.argument("board_id")
@click.argument("column_id")
@click.argument("content")
@click.pass_obj
def create(app: AppContext, board_id: str, column_id: str, content: str) -> None:
    """Append a card to a column."""
    app.emit(CardService(app.workspace).create_card(board_id, column_id, content))


@card.command(
    examples="""\
  boardctl card update BOARD_ID COLUMN_ID CARD_ID "New content\"""",
)
@click.argument("board_id")
@click.argument("column_id")
@click.argument("card_id")
@click.argument("content")
@click.pass_obj
def update(app: AppContext, board_id: str, column_id: str, card_id: str, content: str) -> None:
    """Replace a card's content."""
    app.emit(CardService(app.workspace).update_card(board_id, column_id, card_id, content))


@card.command(
    examples="""\
  boardctl card delete BOARD_ID COLUMN_ID CARD_ID""",
)
@click.argument("board_id")
@click.argument("column_id")
@click.argument("card_id")
@click.pass_obj
def delete(app: AppContext, board_id: str, column_id: str, card_id: str) -> None:
    """Delete a card."""
    app.emit(CardService(app.workspace).delete_card(board_id, column_id, card_id))


@card.command(
    examples="""\
  boardctl card reorder BOARD_ID COLUMN_ID CARD_C CARD_A CARD_B""",
)
@click.argument("board_id")
@click.argument("column_id")
@click.argument("card_ids", nargs=-1)
@click.pass_obj
def reorder(app: AppContext, board_id: str, column_id: str, card_ids: tuple[str, ...]) -> None:
    """Rebuild a column's card order.

    Cards not listed are removed from the column.
    """
    app.emit(CardService(app.workspace).reorder_cards(board_id, column_id, list(card_ids)))


@card.command(
    examples="""\
  boardctl card move BOARD_ID CARD_ID DONE_ID CARD_X CARD_ID
  boardctl card move BOARD_ID CARD_ID DONE_ID""",
)
@click.argument("board_id")
@click.argument("card_id")
@click.argument("to_column_id")
@click.argument("order", nargs=-1)
@click.pass_obj
def move(
    app: AppContext,
    board_id: str,
    card_id: str,
    to_column_id: str,
    order: tuple[str, ...],
) -> None:
    """Move a card into a column at the position given by ORDER.

    ORDER is the destination's full card sequence including the moved card.
    If the moved card is left out it is appended to the end.
    """
    app.emit(CardService(app.workspace).move_card(board_id, card_id, to_column_id, list(order)))
