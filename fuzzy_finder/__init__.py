"""Public package surface for fuzzy_finder.

Exports ``find`` for programmatic use and ``main`` for CLI invocation.
Logging is silent until a caller enables the ``fuzzy_finder`` namespace.
"""

from __future__ import annotations

from loguru import logger

from .errors import FinderConfigError, FinderError, TerminalSessionError
from .item import Item, MatchScore
from .session import find

logger.disable("fuzzy_finder")


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "FinderConfigError",
    "FinderError",
    "Item",
    "MatchScore",
    "TerminalSessionError",
    "find",
    "main",
]
