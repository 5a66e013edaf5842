"""Helpers for resolving definition file locations."""
from __future__ import annotations

import os
from pathlib import Path

DEFINITIONS_ENV_VAR = "GUILDHALL_DEFINITIONS"


def get_repo_root() -> Path:
    """Return the repository root (three levels above this package module)."""
    return Path(__file__).resolve().parents[3]


def get_definitions_path(base_path: Path | str | None = None) -> Path:
    """Return the directory holding classes/ranks/quests/items JSON files.

    An explicit ``base_path`` wins, then the ``GUILDHALL_DEFINITIONS``
    environment variable, then ``<repo>/data/definitions``.
    """
    if base_path is not None:
        return Path(base_path)
    override = os.environ.get(DEFINITIONS_ENV_VAR)
    if override:
        return Path(override)
    return get_repo_root() / "data" / "definitions"
