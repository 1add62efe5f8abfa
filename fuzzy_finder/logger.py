"""Logging configuration using loguru.

The package logger is disabled on import so an embedding program never sees
output unless it opts in. The CLI enables it with a single file sink: the
terminal belongs to the finder while a session runs, so nothing may log to
stdout or stderr.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from platformdirs import user_log_dir

from .config import APP_NAME

LOG_FILENAME = "fuzzy_finder.log"
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def setup_logger(log_file: Path | None = None, log_level: str = "WARNING") -> Path:
    """Route package logs to ``log_file`` and return the path in use.

    Calling it again replaces the previous sink instead of adding another.
    """
    path = log_file if log_file is not None else DEFAULT_LOG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    # Drop loguru's default stderr handler along with any earlier sink.
    logger.remove()
    logger.add(
        path,
        level=log_level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        rotation="1 MB",
        retention=3,
        encoding="utf-8",
    )
    logger.enable(APP_NAME)
    return path
