"""Root CLI group for boardctl with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from boardctl import __version__
from boardctl.commands import register_commands
from boardctl.commands._context import AppContext
from boardctl.config.settings import BoardctlSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="boardctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output (ids only).")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--store",
    "store_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path of the JSON store file.",
)
@click.option(
    "--async-events",
    is_flag=True,
    help="Run post-mutation plugin hooks on a worker thread.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    store_path: Path | None,
    async_events: bool,
) -> None:
    """boardctl: boards, columns, and cards in a JSON store."""
    flags: dict[str, object] = {
        "json_output": json_output,
        "quiet": quiet,
        "verbose": verbose,
        "log_json": log_json,
        "async_events": async_events,
    }
    if store_path is not None:
        flags["store_override"] = store_path.resolve()
    settings = BoardctlSettings.from_cli(config_path=config_path, **flags)
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
