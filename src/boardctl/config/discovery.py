"""Locate and parse ``boardctl.toml``.

``BOARDCTL_CONFIG`` names the file outright. Otherwise the nearest
``boardctl.toml`` in the start directory or one of its ancestors is used,
so commands run from a subdirectory share the board store above them.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path

from boardctl.config.models import BoardctlConfig

CONFIG_FILENAME = "boardctl.toml"
CONFIG_ENV_VAR = "BOARDCTL_CONFIG"


def _search_dirs(start: Path) -> Iterator[Path]:
    here = start.resolve()
    yield here
    yield from here.parents


def find_config(start: Path | None = None) -> Path | None:
    """Path of the config file that applies to *start* (default: cwd), if any.

    A ``BOARDCTL_CONFIG`` that points at no file disables discovery.
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        named = Path(explicit)
        return named if named.is_file() else None

    return next(
        (d / CONFIG_FILENAME for d in _search_dirs(start or Path.cwd()) if (d / CONFIG_FILENAME).is_file()),
        None,
    )


def load_config(path: Path | None = None, cwd: Path | None = None) -> BoardctlConfig:
    """Parse *path*, or the discovered file, into :class:`BoardctlConfig`.

    No file at all means every section keeps its defaults.
    """
    source = path if path is not None else find_config(cwd)
    if source is None:
        return BoardctlConfig()
    with source.open("rb") as fh:
        return BoardctlConfig.model_validate(tomllib.load(fh))
