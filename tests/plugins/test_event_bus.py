"""Tests for EventBus: sync and threaded hook dispatch."""

from __future__ import annotations

from typing import Any

import pluggy
import pytest

from boardctl.plugins.event_bus import EventBus
from boardctl.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("boardctl")


class RecordingPlugin:
    """Plugin that records all hook calls."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    @hookimpl
    def invalidate_boards(self) -> None:
        self.calls.append(("invalidate_boards", {}))

    @hookimpl
    def invalidate_board(self, board_id: str) -> None:
        self.calls.append(("invalidate_board", {"board_id": board_id}))


class FailingPlugin:
    """Plugin that always raises on invalidate_board."""

    @hookimpl
    def invalidate_board(self, board_id: str) -> None:
        msg = "Plugin exploded!"
        raise RuntimeError(msg)


@pytest.fixture
def pm_with_recorder() -> tuple[PluginManager, RecordingPlugin]:
    pm = PluginManager()
    recorder = RecordingPlugin()
    pm.register_plugin(recorder, name="recorder")
    return pm, recorder


class TestSyncDispatch:
    def test_sync_is_default(self) -> None:
        assert EventBus(PluginManager()).is_sync

    def test_dispatch_calls_hook(self, pm_with_recorder: tuple[PluginManager, RecordingPlugin]) -> None:
        pm, recorder = pm_with_recorder
        bus = EventBus(pm, sync=True)
        event = bus.dispatch("invalidate_board", {"board_id": "b1"})
        assert event.status == "completed"
        assert recorder.calls == [("invalidate_board", {"board_id": "b1"})]

    def test_failure_recorded_not_raised(self) -> None:
        pm = PluginManager()
        pm.register_plugin(FailingPlugin(), name="failer")
        bus = EventBus(pm, sync=True)
        event = bus.dispatch("invalidate_board", {"board_id": "b1"})
        assert event.status == "failed"
        assert event.error == "Plugin exploded!"
        assert bus.failed() == [event]

    def test_unknown_hook_completes(self) -> None:
        bus = EventBus(PluginManager(), sync=True)
        assert bus.dispatch("no_such_hook", {}).status == "completed"

    def test_log_is_bounded(self) -> None:
        bus = EventBus(PluginManager(), sync=True, max_log=3)
        for _ in range(5):
            bus.dispatch("invalidate_boards", {})
        log = bus.drain()
        assert [e.id for e in log] == [3, 4, 5]

    def test_to_dict(self) -> None:
        bus = EventBus(PluginManager(), sync=True)
        d = bus.dispatch("invalidate_boards", {}).to_dict()
        assert d == {
            "id": 1,
            "hook_name": "invalidate_boards",
            "payload": {},
            "status": "completed",
            "error": None,
        }


class TestAsyncDispatch:
    def test_drain_waits_for_completion(
        self, pm_with_recorder: tuple[PluginManager, RecordingPlugin]
    ) -> None:
        pm, recorder = pm_with_recorder
        bus = EventBus(pm, sync=False)
        assert not bus.is_sync
        for n in range(5):
            bus.dispatch("invalidate_board", {"board_id": f"b{n}"})
        log = bus.drain()
        assert all(e.status == "completed" for e in log)
        assert len(recorder.calls) == 5
        assert bus.pending == 0
        bus.shutdown()

    def test_inline_runs_on_calling_thread(self) -> None:
        pm = PluginManager()
        pm.register_plugin(FailingPlugin(), name="failer")
        bus = EventBus(pm, sync=False)
        try:
            event = bus.dispatch("invalidate_board", {"board_id": "b1"}, inline=True)
            assert event.status == "failed"
            assert bus.pending == 0
        finally:
            bus.shutdown()

    def test_finished_futures_are_pruned(self) -> None:
        bus = EventBus(PluginManager(), sync=False)
        try:
            bus.dispatch("invalidate_boards", {})
            bus._futures[0].result(timeout=5)
            bus.dispatch("invalidate_boards", {})
            assert len(bus._futures) == 1
        finally:
            bus.shutdown()

    def test_shutdown_is_idempotent(self) -> None:
        bus = EventBus(PluginManager(), sync=False)
        bus.shutdown()
        bus.shutdown()

    def test_dispatch_after_shutdown_runs_inline(
        self, pm_with_recorder: tuple[PluginManager, RecordingPlugin]
    ) -> None:
        pm, recorder = pm_with_recorder
        bus = EventBus(pm, sync=False)
        bus.shutdown()
        assert bus.dispatch("invalidate_boards", {}).status == "completed"
        assert recorder.calls == [("invalidate_boards", {})]
