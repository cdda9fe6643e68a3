"""JSON-based configuration for the holiday calendar."""

import json
import os

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".holiday-calendar-settings.json")

_VIEWS = ("monthly", "quarterly")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_DEFAULTS = {
    "api_base_url": "https://date.nager.at/api/v3/",
    "request_timeout": 10.0,
    "default_country": "US",
    "default_view": "monthly",
    "week_colors": {"light": "#C8E6C9", "dense": "#43A047"},
    "log_level": "INFO",
}


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing or invalid keys."""
    settings = dict(_DEFAULTS)
    settings["week_colors"] = dict(_DEFAULTS["week_colors"])
    try:
        with open(path or _SETTINGS_PATH, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return settings
    if not isinstance(stored, dict):
        return settings

    for key in ("api_base_url", "default_country"):
        if isinstance(stored.get(key), str) and stored[key]:
            settings[key] = stored[key]
    timeout = stored.get("request_timeout")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0:
        settings["request_timeout"] = float(timeout)
    if stored.get("default_view") in _VIEWS:
        settings["default_view"] = stored["default_view"]
    level = stored.get("log_level")
    if isinstance(level, str) and level.upper() in _LOG_LEVELS:
        settings["log_level"] = level.upper()
    if isinstance(stored.get("week_colors"), dict):
        for klass in ("light", "dense"):
            color = stored["week_colors"].get(klass)
            if isinstance(color, str) and color.startswith("#"):
                settings["week_colors"][klass] = color
    return settings
