"""Exception types raised by the finder.

Configuration problems are rejected before the terminal is touched.
Terminal failures are raised only after cooked mode has been restored.
"""

from __future__ import annotations


class FinderError(Exception):
    """Base class for all finder errors."""


class FinderConfigError(FinderError, ValueError):
    """Invalid construction arguments such as a zero-row window."""


class TerminalSessionError(FinderError):
    """Raw mode could not be entered, or terminal I/O failed mid-session."""
