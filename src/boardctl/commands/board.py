"""Command group: board reads and board-level mutations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from boardctl.commands._base import BoardctlGroup
from boardctl.services.board import BoardService

if TYPE_CHECKING:
    from boardctl.commands._context import AppContext

_BOARD_EXAMPLES = """\
  boardctl board list
  boardctl board show V1StGXR8_Z5jdHi6B-myT
  boardctl board create "Sprint 1"
  boardctl board rename V1StGXR8_Z5jdHi6B-myT "Sprint 2"
  boardctl board delete V1StGXR8_Z5jdHi6B-myT"""


@click.group(cls=BoardctlGroup, examples=_BOARD_EXAMPLES)
def board() -> None:
    """List, inspect, and manage boards."""


@board.command(
    name="list",
    examples="""\
  boardctl board list
  boardctl --json board list
  boardctl -q board list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List every board with its column and card counts."""
    reader = app.workspace.reader
    if reader is not None:
        app.emit(reader.list_boards())
    else:
        app.emit(BoardService(app.workspace).list_boards())


@board.command(
    examples="""\
  boardctl board show V1StGXR8_Z5jdHi6B-myT
  boardctl --json board show V1StGXR8_Z5jdHi6B-myT""",
)
@click.argument("board_id")
@click.pass_obj
def show(app: AppContext, board_id: str) -> None:
    """Show a board as a tree of columns and cards."""
    reader = app.workspace.reader
    if reader is not None:
        app.emit(reader.get_board(board_id))
    else:
        app.emit(BoardService(app.workspace).get_board(board_id))


@board.command(
    examples="""\
  boardctl board create "Sprint 1"
  boardctl -q board create Roadmap""",
)
@click.argument("title")
@click.pass_obj
def create(app: AppContext, title: str) -> None:
    """Create an empty board."""
    app.emit(BoardService(app.workspace).create_board(title))


@board.command(
    examples="""\
  boardctl board rename V1StGXR8_Z5jdHi6B-myT "Sprint 2\"""",
)
@click.argument("board_id")
@click.argument("title")
@click.pass_obj
def rename(app: AppContext, board_id: str, title: str) -> None:
    """Rename a board."""
    app.emit(BoardService(app.workspace).rename_board(board_id, title))


@board.command(
    examples="""\
  boardctl board delete V1StGXR8_Z5jdHi6B-myT""",
)
@click.argument("board_id")
@click.pass_obj
def delete(app: AppContext, board_id: str) -> None:
    """Delete a board with all its columns and cards."""
    app.emit(BoardService(app.workspace).delete_board(board_id))
