"""Subcommand modules for boardctl.

Provides register_commands() which uses deferred imports to keep
``boardctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the board, column, and card groups on the root CLI group."""
    from boardctl.commands.board import board
    from boardctl.commands.card import card
    from boardctl.commands.column import column

    cli.add_command(board)
    cli.add_command(column)
    cli.add_command(card)
