"""Locating flightlog.toml and the data directory.

Both are found by walking up from a start directory, the way git finds
``.git/``. ``FLIGHTLOG_CONFIG`` pins the config file and disables the
walk for it.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "flightlog.toml"
CONFIG_ENV_VAR = "FLIGHTLOG_CONFIG"
DATA_DIRNAME = ".flightlog"


def _walk_up(start: Path | None) -> Iterator[Path]:
    here = (start or Path.cwd()).resolve()
    yield here
    yield from here.parents


def find_config(start: Path | None = None) -> Path | None:
    """Return the flightlog.toml in effect for *start* (default: cwd).

    ``FLIGHTLOG_CONFIG`` wins when set; a path that does not exist
    yields None rather than falling back to the walk.
    """
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None

    for directory in _walk_up(start):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def find_data_root(start: Path | None = None) -> Path | None:
    """Nearest directory at or above *start* that already holds ``.flightlog/``."""
    for directory in _walk_up(start):
        if (directory / DATA_DIRNAME).is_dir():
            return directory
    return None
