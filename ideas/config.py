# SPDX-License-Identifier: MIT
"""Settings reader for the ideas toolkit.

Settings live in a small JSON file and are addressed by dot-notation keys,
for example ``tui.tickMs``. A missing or malformed file simply yields the
defaults.
"""
import json
import os
from pathlib import Path
from typing import Any

# Known keys and their defaults
DEFAULT_TICK_MS = 100
DEFAULT_MESSAGE_SECONDS = 3
DEFAULT_RECENT_DAYS = 7


def get_settings_path() -> Path:
    """Get path to settings.json.

    Returns:
        Path to settings.json, respecting the IDEAS_SETTINGS env var.
    """
    custom = os.environ.get("IDEAS_SETTINGS")
    if custom:
        return Path(custom)
    return Path.home() / ".config" / "ideas" / "settings.json"


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value by dot-notation key.

    Args:
        key: Dot-notation key like "tui.tickMs"
        default: Default value if key not found

    Returns:
        Setting value or default
    """
    settings_path = get_settings_path()

    if not settings_path.exists():
        return default

    try:
        with open(settings_path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        return default

    current = data
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]

    return current


def get_bool_setting(key: str, default: bool = False) -> bool:
    """Get a boolean setting. Strings "true", "1" and "yes" count as True."""
    value = get_setting(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes")
    return bool(value)


def get_int_setting(key: str, default: int = 0) -> int:
    """Get an integer setting, falling back to default if conversion fails."""
    value = get_setting(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def get_float_setting(key: str, default: float = 0.0) -> float:
    value = get_setting(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def tick_seconds() -> float:
    """UI poll cadence in seconds."""
    ms = get_int_setting("tui.tickMs", DEFAULT_TICK_MS)
    return max(ms, 10) / 1000.0


def message_seconds() -> float:
    """How long a finished task's message stays on the status line."""
    return get_float_setting("tui.messageSeconds", DEFAULT_MESSAGE_SECONDS)


def recent_days() -> int:
    return get_int_setting("status.recentDays", DEFAULT_RECENT_DAYS)
