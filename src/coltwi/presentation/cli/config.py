"""CLI configuration helpers: user data directory, save location, options."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, Union

ConfigValue = Union[str, bool]

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_DEFAULT_LOG_LEVEL = "WARNING"
_DEFAULT_CONFIRM_ABORT = True


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "ColonialTwilight"
        return Path.home() / "ColonialTwilight"
    return Path.home() / ".config" / "coltwi"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_save_dir() -> Path:
    """Return the directory holding one subdirectory per saved game."""
    override = os.environ.get("COLTWI_SAVE_DIR")
    if override:
        return Path(override)
    return get_user_data_dir() / "games"


def debug_enabled() -> bool:
    """Return True only when COLTWI_DEBUG is explicitly set to '1'."""
    return os.getenv("COLTWI_DEBUG") == "1"


def _normalize_log_level(value: object) -> str:
    if isinstance(value, str) and value.strip().upper() in _LOG_LEVELS:
        return value.strip().upper()
    return _DEFAULT_LOG_LEVEL


def _normalize_confirm_abort(value: object) -> bool:
    return value if isinstance(value, bool) else _DEFAULT_CONFIRM_ABORT


def default_config() -> Dict[str, ConfigValue]:
    return {"log_level": _DEFAULT_LOG_LEVEL, "confirm_abort": _DEFAULT_CONFIRM_ABORT}


def load_config(path: Path | None = None) -> Dict[str, ConfigValue]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return {
        "log_level": _normalize_log_level(raw.get("log_level")),
        "confirm_abort": _normalize_confirm_abort(raw.get("confirm_abort")),
    }


def save_config(config: Dict[str, ConfigValue], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "log_level": _normalize_log_level(config.get("log_level")),
        "confirm_abort": _normalize_confirm_abort(config.get("confirm_abort")),
    }
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
