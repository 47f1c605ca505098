"""Collector helpers and package exports."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Mapping

from loguru import logger

ALIAS_FILE_RE = re.compile(r".*_aliases$")


def read_lines(path: Path) -> list[str] | None:
    try:
        return path.read_text(errors="replace").splitlines()
    except OSError as exc:
        logger.error("Unable to read alias file {}: {}", path, exc)
        return None


def find_files(environ: Mapping[str, str] | None = None) -> list[Path]:
    """Alias files to parse.

    ``$ALIASFILES`` (colon separated) wins; otherwise every ``*_aliases``
    entry directly under ``$HOME`` is used.
    """
    env = os.environ if environ is None else environ

    listed = env.get("ALIASFILES", "")
    if listed:
        return [Path(entry) for entry in listed.split(":") if entry]

    home = env.get("HOME", "")
    if not home:
        raise ValueError("$HOME not set and $ALIASFILES is empty")

    home_dir = Path(home)
    try:
        entries = sorted(home_dir.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise ValueError(f"unable to list {home_dir}: {exc}") from exc
    return [p for p in entries if ALIAS_FILE_RE.match(p.name) and p.is_file()]
