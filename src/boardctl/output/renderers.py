"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from boardctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from boardctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: ids only where possible."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"

    if "boards" in result.data:
        return "\n".join(b["id"] for b in result.data["boards"])
    for key in ("board", "column", "card"):
        entity = result.data.get(key)
        if isinstance(entity, dict) and "id" in entity:
            return str(entity["id"])
    if "cards" in result.data:
        return "\n".join(c["id"] for c in result.data["cards"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "board.ok"), (f"  {result.op}", "board.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="board.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="board.id")
    elif key == "title":
        v = Text(str(value), style="board.title")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(Text(f"    {k}: {v}"))


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    if span_data.get("annotations"):
        extras = [f"{ak}={av}" for ak, av in span_data["annotations"].items()]
        line += f"  ({', '.join(extras)})"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _board_tree(board: dict[str, Any]) -> Tree:
    """Build a board -> columns -> cards tree."""
    tree = Tree(Text.assemble((board["title"], "board.title"), "  ", (board["id"], "board.id")))
    for column in board.get("columns", []):
        cards = column.get("cards", [])
        branch = tree.add(
            Text.assemble(
                (column["title"], "board.column"),
                f"  ({len(cards)})  ",
                (column["id"], "board.id"),
            )
        )
        for card in cards:
            branch.add(Text.assemble((card["content"], "board.card"), "  ", (card["id"], "dim")))
    return tree


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text.assemble(("ERROR:", "board.error"), " ", (result.op, "board.op"), " - ", msg)
    )

    if err is None:
        return
    for field_name, messages in err.field_errors.items():
        for message in messages:
            console.print(Text.assemble((f"  {field_name}: ", "board.key"), message))
    if verbose and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Read renderers ────────────────────────────────────────────────────


def _render_board_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    boards: list[dict[str, Any]] = result.data.get("boards", [])
    if not boards:
        console.print(Text("No boards.", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="board.id", no_wrap=True)
    table.add_column("Title", style="board.title")
    table.add_column("Columns", justify="right")
    table.add_column("Cards", justify="right")
    for board in boards:
        columns = board.get("columns", [])
        table.add_row(
            board["id"],
            board["title"],
            str(len(columns)),
            str(sum(len(c.get("cards", [])) for c in columns)),
        )
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_board(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(_board_tree(result.data["board"]))
    if verbose:
        _render_meta(console, result)


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/rename/update/delete results."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, dict):
            for sub_key in ("id", "title", "content"):
                if sub_key in value:
                    _field(console, sub_key if sub_key != "id" else f"{key}_id", value[sub_key])
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_order(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render reorder/move results: the resulting sequence and dropped ids."""
    _status_line(console, result)
    for key in ("board_id", "column_id", "card_id", "from_column_id", "to_column_id"):
        if key in result.data:
            _field(console, key, result.data[key])
    if "cards" in result.data:
        for pos, card in enumerate(result.data["cards"], start=1):
            console.print(Text.assemble(f"  {pos:>3}. {card['content']}  ", (card["id"], "dim")))
    if "order" in result.data:
        _field(console, "order", result.data["order"])
    if result.data.get("dropped"):
        _field(console, "dropped", result.data["dropped"])
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Reads
    "list_boards": _render_board_list,
    "get_board": _render_board,
    # Mutations
    "create_board": _render_mutation,
    "rename_board": _render_mutation,
    "delete_board": _render_mutation,
    "create_column": _render_mutation,
    "rename_column": _render_mutation,
    "delete_column": _render_mutation,
    "create_card": _render_mutation,
    "update_card": _render_mutation,
    "delete_card": _render_mutation,
    # Ordering
    "reorder_columns": _render_order,
    "reorder_cards": _render_order,
    "move_card": _render_order,
}
