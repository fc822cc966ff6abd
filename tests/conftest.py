"""Shared pytest fixtures and test helpers for boardctl tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from boardctl.config.settings import BoardctlSettings
from boardctl.infrastructure.workspace import Workspace


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's BOARDCTL_* environment out of the tests."""
    monkeypatch.delenv("BOARDCTL_CONFIG", raising=False)
    monkeypatch.delenv("BOARDCTL_STORE_OVERRIDE", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Temporary directory the store file lives in."""
    return tmp_path


@pytest.fixture
def settings(workspace_root: Path) -> BoardctlSettings:
    return BoardctlSettings.from_cli(root=workspace_root)


@pytest.fixture
def workspace(settings: BoardctlSettings) -> Iterator[Workspace]:
    """Workspace on a temp directory with the default (synchronous) event bus.

    The store file is created on first access.
    """
    ws = Workspace(settings)
    ws.init_event_bus()
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def _isolated_workspace(workspace_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI uses an isolated store.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes.
    """
    monkeypatch.chdir(workspace_root)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def create_board(workspace: Workspace, title: str) -> dict[str, Any]:
    """Create a board via BoardService, asserting success."""
    from boardctl.services.board import BoardService

    result = BoardService(workspace).create_board(title)
    assert result.ok, result.error
    return result.data["board"]


def create_column(workspace: Workspace, board_id: str, title: str) -> dict[str, Any]:
    """Create a column via ColumnService, asserting success."""
    from boardctl.services.column import ColumnService

    result = ColumnService(workspace).create_column(board_id, title)
    assert result.ok, result.error
    return result.data["column"]


def create_card(workspace: Workspace, board_id: str, column_id: str, content: str) -> dict[str, Any]:
    """Create a card via CardService, asserting success."""
    from boardctl.services.card import CardService

    result = CardService(workspace).create_card(board_id, column_id, content)
    assert result.ok, result.error
    return result.data["card"]


def card_contents(workspace: Workspace, board_id: str, column_id: str) -> list[str]:
    """Contents of a column's cards in stored order, read back from disk."""
    board = workspace.load().find_board(board_id)
    assert board is not None
    column = board.find_column(column_id)
    assert column is not None
    return [c.content for c in column.cards]


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Iterator[None]:
    """``--verbose`` CLI runs enable telemetry on the test thread; undo it."""
    from boardctl.services.telemetry import disable_telemetry

    yield
    disable_telemetry()


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Each CLI invocation reconfigures root logging; restore it afterwards."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    board = logging.getLogger("boardctl")
    board_level = board.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    board.setLevel(board_level)
