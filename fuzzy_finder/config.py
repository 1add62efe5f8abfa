"""Read-only JSON settings for the finder.

Holds tunables such as the default row count and the escape timeout.
All access is defensive: malformed or missing config falls back to defaults.
The file is never written by the finder.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .input.decoder import ESC_SEQUENCE_TIMEOUT_MS
from .input.reader import DEFAULT_POLL_INTERVAL_MS
from .terminal import DEFAULT_CURSOR_QUERY_TIMEOUT_MS

APP_NAME = "fuzzy_finder"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_ROWS = 7
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class FinderConfig:
    rows: int = DEFAULT_ROWS
    escape_timeout_ms: float = ESC_SEQUENCE_TIMEOUT_MS
    poll_interval_ms: float = DEFAULT_POLL_INTERVAL_MS
    cursor_query_timeout_ms: float = DEFAULT_CURSOR_QUERY_TIMEOUT_MS
    log_level: str = "WARNING"


def load_config() -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _positive_int(value: object, default: int) -> int:
    # Booleans are ints in Python but never a valid row count.
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _positive_number(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return default
    return float(value)


def _log_level(value: object, default: str) -> str:
    if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
        return default
    return value.upper()


def load_finder_config() -> FinderConfig:
    """Build a :class:`FinderConfig` from the config file, field by field."""
    data = load_config()
    defaults = FinderConfig()
    return FinderConfig(
        rows=_positive_int(data.get("rows"), defaults.rows),
        escape_timeout_ms=_positive_number(data.get("escape_timeout_ms"), defaults.escape_timeout_ms),
        poll_interval_ms=_positive_number(data.get("poll_interval_ms"), defaults.poll_interval_ms),
        cursor_query_timeout_ms=_positive_number(
            data.get("cursor_query_timeout_ms"), defaults.cursor_query_timeout_ms
        ),
        log_level=_log_level(data.get("log_level"), defaults.log_level),
    )
