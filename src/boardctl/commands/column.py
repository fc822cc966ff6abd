"""Command group: column mutations within a board."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from boardctl.commands._base import BoardctlGroup
from boardctl.services.column import ColumnService

if TYPE_CHECKING:
    from boardctl.commands._context import AppContext

_COLUMN_EXAMPLES = """\
  boardctl column create BOARD_ID "To Do"
  boardctl column rename BOARD_ID COLUMN_ID "Backlog"
  boardctl column delete BOARD_ID COLUMN_ID
  boardctl column reorder BOARD_ID COL_C COL_A COL_B"""


@click.group(cls=BoardctlGroup, examples=_COLUMN_EXAMPLES)
def column() -> None:
    """Create, rename, delete, and reorder columns."""


@column.command(
    examples="""\
  boardctl column create BOARD_ID "To Do"
  boardctl -q column create BOARD_ID Done""",
)
@click.argument("board_id")
@click.argument("title")
@click.pass_obj
def create(app: AppContext, board_id: str, title: str) -> None:
    """Append a column to a board."""
    app.emit(ColumnService(app.workspace).create_column(board_id, title))


@column.command(
    examples="""\
  boardctl column rename BOARD_ID COLUMN_ID "In Review\"""",
)
@click.argument("board_id")
@click.argument("column_id")
@click.argument("title")
@click.pass_obj
def rename(app: AppContext, board_id: str, column_id: str, title: str) -> None:
    """Rename a column."""
    app.emit(ColumnService(app.workspace).rename_column(board_id, column_id, title))


@column.command(
    examples="""\
  boardctl column delete BOARD_ID COLUMN_ID""",
)
@click.argument("board_id")
@click.argument("column_id")
@click.pass_obj
def delete(app: AppContext, board_id: str, column_id: str) -> None:
    """Delete a column and every card in it."""
    app.emit(ColumnService(app.workspace).delete_column(board_id, column_id))


@column.command(
    examples="""\
  boardctl column reorder BOARD_ID COL_C COL_A COL_B""",
)
@click.argument("board_id")
@click.argument("column_ids", nargs=-1)
@click.pass_obj
def reorder(app: AppContext, board_id: str, column_ids: tuple[str, ...]) -> None:
    """Rebuild a board's column order.

    Columns not listed are removed together with their cards.
    """
    app.emit(ColumnService(app.workspace).reorder_columns(board_id, list(column_ids)))
