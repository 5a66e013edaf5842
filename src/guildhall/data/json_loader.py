"""Reading definition files from disk."""
from __future__ import annotations

import json
from pathlib import Path

from .errors import DataLoadError, DataValidationError


def load_json(path: Path) -> object:
    """Parse ``path``; any I/O or syntax problem surfaces as DataLoadError."""
    try:
        with path.open(encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise DataLoadError(f"Missing definitions file {path}.") from exc
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"{path.name} is not valid JSON (line {exc.lineno}).") from exc
    except OSError as exc:
        raise DataLoadError(f"Could not read {path}: {exc.strerror}.") from exc


def load_json_object(path: Path) -> dict[str, object]:
    """Load a file whose top level maps definition ids to payloads."""
    raw = load_json(path)
    if not isinstance(raw, dict):
        raise DataValidationError(f"{path.name} must hold an object keyed by id.")
    for key in raw:
        if not key:
            raise DataValidationError(f"{path.name} has an entry with an empty id.")
    return raw
