"""CLI configuration helpers for runner settings."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Union

ConfigValue = Union[str, float, int]

_DEFAULT_LOG_LEVEL = "WARNING"
_DEFAULT_TICK_SECONDS = 1.0
_DEFAULT_TICKS = 120
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "Guildhall"
        return Path.home() / "Guildhall"
    return Path.home() / ".config" / "guildhall"


def get_default_config_path() -> Path:
    return get_user_data_dir() / "config.json"


def default_config() -> Dict[str, ConfigValue]:
    return {
        "log_level": _DEFAULT_LOG_LEVEL,
        "tick_seconds": _DEFAULT_TICK_SECONDS,
        "ticks": _DEFAULT_TICKS,
    }


def _normalize_log_level(value: object) -> str:
    if isinstance(value, str) and value.upper() in _LOG_LEVELS:
        return value.upper()
    return _DEFAULT_LOG_LEVEL


def _normalize_tick_seconds(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return _DEFAULT_TICK_SECONDS
    return float(value)


def _normalize_ticks(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return _DEFAULT_TICKS
    return value


def normalize_config(raw: Dict[str, object]) -> Dict[str, ConfigValue]:
    return {
        "log_level": _normalize_log_level(raw.get("log_level")),
        "tick_seconds": _normalize_tick_seconds(raw.get("tick_seconds")),
        "ticks": _normalize_ticks(raw.get("ticks")),
    }


def load_config(path: Path | None = None) -> Dict[str, ConfigValue]:
    """Load config from disk, falling back to defaults for anything unusable."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default_config()
    except (OSError, json.JSONDecodeError) as exc:
        logging.getLogger(__name__).warning("Ignoring unreadable config %s: %s", config_path, exc)
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return normalize_config(raw)


def save_config(config: Dict[str, ConfigValue], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = normalize_config(dict(config))
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
