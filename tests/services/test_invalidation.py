"""Tests for invalidation events emitted after committed mutations."""

from __future__ import annotations

import time
from typing import Any

import pluggy
import pytest

from boardctl.infrastructure.workspace import Workspace
from boardctl.services.board import BoardService
from boardctl.services.card import CardService
from boardctl.services.column import ColumnService
from tests.conftest import create_board, create_card, create_column

hookimpl = pluggy.HookimplMarker("boardctl")


class RecordingPlugin:
    """Plugin that records every hook call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    @hookimpl
    def invalidate_boards(self) -> None:
        self.calls.append(("invalidate_boards", {}))

    @hookimpl
    def invalidate_board(self, board_id: str) -> None:
        self.calls.append(("invalidate_board", {"board_id": board_id}))

    @hookimpl
    def post_mutation(self, op: str, board_id: str, entity: str, entity_id: str) -> None:
        self.calls.append(
            ("post_mutation", {"op": op, "board_id": board_id, "entity": entity, "entity_id": entity_id})
        )

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FailingPlugin:
    @hookimpl
    def invalidate_board(self, board_id: str) -> None:
        msg = "cache unreachable"
        raise RuntimeError(msg)


@pytest.fixture
def recorder(workspace: Workspace) -> RecordingPlugin:
    plugin = RecordingPlugin()
    assert workspace.event_bus is not None
    workspace.event_bus.plugin_manager.register_plugin(plugin, name="recorder")
    return plugin


class TestBoardScope:
    def test_create_board_invalidates_list_only(
        self, workspace: Workspace, recorder: RecordingPlugin
    ) -> None:
        board = create_board(workspace, "Sprint 1")
        assert recorder.names() == ["invalidate_boards", "post_mutation"]
        assert recorder.calls[1][1] == {
            "op": "create_board",
            "board_id": board["id"],
            "entity": "board",
            "entity_id": board["id"],
        }

    def test_rename_board_invalidates_both(
        self, workspace: Workspace, recorder: RecordingPlugin
    ) -> None:
        board = create_board(workspace, "Sprint 1")
        recorder.calls.clear()
        BoardService(workspace).rename_board(board["id"], "Sprint 2")
        assert recorder.names() == ["invalidate_boards", "invalidate_board", "post_mutation"]
        assert recorder.calls[1][1] == {"board_id": board["id"]}

    def test_delete_board_invalidates_both(
        self, workspace: Workspace, recorder: RecordingPlugin
    ) -> None:
        board = create_board(workspace, "Sprint 1")
        recorder.calls.clear()
        BoardService(workspace).delete_board(board["id"])
        assert recorder.names() == ["invalidate_boards", "invalidate_board", "post_mutation"]


class TestNestedScope:
    def test_column_and_card_mutations_invalidate_board(
        self, workspace: Workspace, recorder: RecordingPlugin
    ) -> None:
        board = create_board(workspace, "Sprint 1")
        column = create_column(workspace, board["id"], "Todo")
        card = create_card(workspace, board["id"], column["id"], "Card one")
        recorder.calls.clear()

        ColumnService(workspace).rename_column(board["id"], column["id"], "Backlog")
        CardService(workspace).update_card(board["id"], column["id"], card["id"], "Card two")
        CardService(workspace).move_card(board["id"], card["id"], column["id"], [card["id"]])

        assert "invalidate_boards" not in recorder.names()
        scoped = [p for name, p in recorder.calls if name == "invalidate_board"]
        assert scoped == [{"board_id": board["id"]}] * 3


class TestRejectedMutations:
    def test_no_events_on_validation_failure(
        self, workspace: Workspace, recorder: RecordingPlugin
    ) -> None:
        create_board(workspace, "Sprint 1")
        recorder.calls.clear()
        result = BoardService(workspace).create_board("sprint 1")
        assert not result.ok
        assert recorder.calls == []

    def test_no_events_on_not_found(self, workspace: Workspace, recorder: RecordingPlugin) -> None:
        ColumnService(workspace).delete_column("missing", "missing")
        assert recorder.calls == []


class TestPluginFailure:
    def test_failure_becomes_warning(self, workspace: Workspace) -> None:
        assert workspace.event_bus is not None
        workspace.event_bus.plugin_manager.register_plugin(FailingPlugin(), name="failer")
        board = create_board(workspace, "Sprint 1")

        result = ColumnService(workspace).create_column(board["id"], "Todo")
        assert result.ok
        assert any("invalidate_board failed" in w for w in result.warnings)
        assert len(workspace.load().boards[0].columns) == 1

    def test_no_event_bus(self, settings: Any) -> None:
        ws = Workspace(settings)
        result = BoardService(ws).create_board("Sprint 1")
        assert result.ok
        assert result.warnings == []


class SlowInvalidationPlugin:
    """Invalidation hook that takes a while; lifecycle hook that raises."""

    def __init__(self) -> None:
        self.invalidated: list[str] = []

    @hookimpl
    def invalidate_board(self, board_id: str) -> None:
        time.sleep(0.05)
        self.invalidated.append(board_id)

    @hookimpl
    def post_mutation(self, op: str, board_id: str, entity: str, entity_id: str) -> None:
        msg = "boom"
        raise RuntimeError(msg)


class TestDispatchModes:
    def _open(self, settings: Any, **kwargs: Any) -> tuple[Workspace, SlowInvalidationPlugin]:
        ws = Workspace(settings)
        bus = ws.init_event_bus(**kwargs)
        plugin = SlowInvalidationPlugin()
        bus.plugin_manager.register_plugin(plugin, name="slow")
        return ws, plugin

    def test_default_bus_refreshes_reader_and_reports_failures(self, settings: Any) -> None:
        ws, plugin = self._open(settings)
        try:
            assert ws.event_bus is not None
            assert ws.event_bus.is_sync
            reader = ws.reader
            assert reader is not None
            board = BoardService(ws).create_board("Sprint 1").data["board"]
            assert reader.get_board(board["id"]).data["board"]["title"] == "Sprint 1"

            result = BoardService(ws).rename_board(board["id"], "Sprint 2")
            assert result.ok
            assert plugin.invalidated == [board["id"]]
            assert any("post_mutation failed: boom" in w for w in result.warnings)
            assert reader.get_board(board["id"]).data["board"]["title"] == "Sprint 2"
        finally:
            ws.close()

    def test_async_bus_still_invalidates_before_returning(self, settings: Any) -> None:
        ws, plugin = self._open(settings, sync=False)
        try:
            assert ws.event_bus is not None
            assert not ws.event_bus.is_sync
            reader = ws.reader
            assert reader is not None
            board = BoardService(ws).create_board("Sprint 1").data["board"]
            reader.get_board(board["id"])

            result = BoardService(ws).rename_board(board["id"], "Sprint 2")
            assert result.ok
            assert plugin.invalidated == [board["id"]]
            assert reader.get_board(board["id"]).data["board"]["title"] == "Sprint 2"
            # Worker-pool failures land in the event log, not the result.
            failed = ws.event_bus.failed()
            assert [e.hook_name for e in failed] == ["post_mutation", "post_mutation"]
        finally:
            ws.close()
