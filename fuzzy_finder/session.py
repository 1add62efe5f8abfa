"""Interactive session loop and the public ``find`` entry point.

Each iteration polls for one key token, runs it through the escape decoder,
applies the resulting event to the search model and list window, and repaints
before the next token is read. The loop ends on confirm or cancel.
"""

from __future__ import annotations

import copy
import sys
from collections.abc import Iterable
from enum import Enum, auto
from typing import Generic, Protocol

from loguru import logger

from .config import FinderConfig, load_finder_config
from .errors import FinderConfigError, TerminalSessionError
from .input.decoder import EscapeDecoder, EventKind, KeyEvent
from .input.reader import KeyReader
from .item import Item, T
from .list_window import Direction, ListWindow
from .search.fuzzy import Matcher, fuzzy_score
from .search.model import SearchModel
from .terminal import TerminalSession


class SessionState(Enum):
    RUNNING = auto()
    CONFIRMED = auto()
    CANCELLED = auto()


class TokenSource(Protocol):
    def poll(self) -> str | None: ...


class FinderSession(Generic[T]):
    """Search model, list window and decoder for one interactive run.

    Construction validates the configuration, so an invalid window size or a
    required-but-empty item collection fails before the terminal is touched.
    """

    def __init__(
        self,
        items: Iterable[Item[T]],
        capacity: int,
        *,
        matcher: Matcher = fuzzy_score,
        config: FinderConfig | None = None,
        decoder: EscapeDecoder | None = None,
        require_items: bool = False,
    ) -> None:
        self.config = config if config is not None else FinderConfig()
        self.window: ListWindow[T] = ListWindow(capacity)
        self.model: SearchModel[T] = SearchModel(items, matcher)
        if require_items and not self.model.all_items:
            raise FinderConfigError("no items to search")
        self.window.on_matches_changed(self.model.matches)
        self.decoder = decoder if decoder is not None else EscapeDecoder(self.config.escape_timeout_ms / 1000.0)
        # A lone Escape is only resolved between polls.
        self.poll_interval_ms = min(self.config.poll_interval_ms, self.config.escape_timeout_ms)
        self.state = SessionState.RUNNING
        self.result: T | None = None

    def apply(self, event: KeyEvent) -> bool:
        """Apply one decoded event; returns whether the screen needs a repaint."""
        kind = event.kind
        if kind is EventKind.INSERT:
            self.model.append(event.char)
            self.window.on_matches_changed(self.model.matches)
            return True
        if kind is EventKind.BACKSPACE:
            self.model.backspace()
            self.window.on_matches_changed(self.model.matches)
            return True
        if kind is EventKind.NAVIGATE_UP:
            self.window.move_selection(Direction.UP)
            return True
        if kind is EventKind.NAVIGATE_DOWN:
            self.window.move_selection(Direction.DOWN)
            return True
        if kind is EventKind.CONFIRM:
            selected = self.window.get_selected()
            if selected is not None:
                self.result = copy.copy(selected.payload)
                self.state = SessionState.CONFIRMED
                logger.info("Selected {!r}", selected.display_text)
            elif not self.model.all_items:
                # Nothing could ever match, so Enter just leaves.
                self.state = SessionState.CANCELLED
            return False
        self.state = SessionState.CANCELLED
        return False

    def run(self, terminal: TerminalSession, reader: TokenSource | None = None) -> T | None:
        """Drive the session on ``terminal`` until confirm or cancel.

        Cooked mode is restored before any terminal I/O failure is reported
        as :class:`TerminalSessionError`.
        """
        try:
            with terminal.raw_mode():
                layout = terminal.begin()
                if layout.capacity != self.window.capacity:
                    self.window.resize(layout.capacity)
                if reader is None:
                    reader = KeyReader(
                        terminal.stdin_fd,
                        self.poll_interval_ms,
                        typeahead=terminal.typeahead,
                    )
                terminal.repaint(self.model, self.window)
                while self.state is SessionState.RUNNING:
                    token = reader.poll()
                    if token is None:
                        event = self.decoder.check_timeout()
                    else:
                        event = self.decoder.feed(token)
                    if event is None:
                        continue
                    if self.apply(event):
                        terminal.repaint(self.model, self.window)
                terminal.end()
        except OSError as exc:
            logger.error("Terminal I/O failed: {}", exc)
            raise TerminalSessionError(f"terminal I/O failed: {exc}") from exc

        if self.state is SessionState.CONFIRMED:
            return self.result
        logger.info("Search cancelled")
        return None


def find(
    items: Iterable[tuple[str, T]],
    capacity: int,
    *,
    matcher: Matcher = fuzzy_score,
    config: FinderConfig | None = None,
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
    require_items: bool = False,
) -> T | None:
    """Run an interactive fuzzy search and return the chosen payload.

    ``items`` are ``(display_text, payload)`` pairs. Blocks until the user
    confirms a match (returns a copy of its payload) or cancels (returns
    ``None``). Raises :class:`FinderConfigError` for an invalid ``capacity``
    and :class:`TerminalSessionError` when the terminal cannot be driven.
    """
    if config is None:
        config = load_finder_config()
    entries = [Item(display_text, payload) for display_text, payload in items]
    session: FinderSession[T] = FinderSession(
        entries,
        capacity,
        matcher=matcher,
        config=config,
        require_items=require_items,
    )
    logger.info("Starting search over {} item(s) with {} row(s)", len(entries), capacity)
    terminal = TerminalSession(
        sys.stdin.fileno() if stdin_fd is None else stdin_fd,
        sys.stdout.fileno() if stdout_fd is None else stdout_fd,
        capacity,
        cursor_query_timeout_ms=config.cursor_query_timeout_ms,
    )
    return session.run(terminal)
