"""Tests for the entity models and snapshot helpers."""

from __future__ import annotations

from boardctl.domain.models import SCHEMA_VERSION, Board, Card, Column, Snapshot


def _snapshot() -> Snapshot:
    return Snapshot(
        boards=[
            Board(
                id="b1",
                title="Sprint 1",
                columns=[
                    Column(id="c1", title="To Do", cards=[Card(id="k1", content="Write docs")]),
                    Column(id="c2", title="Done"),
                ],
            ),
            Board(id="b2", title="Roadmap"),
        ]
    )


class TestSnapshot:
    def test_defaults(self) -> None:
        snap = Snapshot()
        assert snap.version == SCHEMA_VERSION
        assert snap.revision == 0
        assert snap.boards == []

    def test_find_board(self) -> None:
        snap = _snapshot()
        board = snap.find_board("b2")
        assert board is not None
        assert board.title == "Roadmap"
        assert snap.find_board("missing") is None

    def test_id_sets(self) -> None:
        snap = _snapshot()
        assert snap.board_ids() == {"b1", "b2"}
        assert snap.column_ids() == {"c1", "c2"}
        assert snap.card_ids() == {"k1"}

    def test_legacy_document_without_version(self) -> None:
        snap = Snapshot.model_validate({"boards": [{"id": "b1", "title": "Old"}]})
        assert snap.version == 1
        assert snap.revision == 0
        assert snap.boards[0].columns == []

    def test_order_survives_round_trip(self) -> None:
        snap = _snapshot()
        again = Snapshot.model_validate_json(snap.model_dump_json())
        assert [b.id for b in again.boards] == ["b1", "b2"]
        assert [c.id for c in again.boards[0].columns] == ["c1", "c2"]


class TestBoard:
    def test_find_column_and_card(self) -> None:
        board = _snapshot().boards[0]
        column = board.find_column("c1")
        assert column is not None
        assert column.find_card("k1") is not None
        assert column.find_card("k2") is None
        assert board.find_column("c9") is None

    def test_card_count(self) -> None:
        assert _snapshot().boards[0].card_count() == 1
