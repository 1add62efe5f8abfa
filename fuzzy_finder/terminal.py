"""Terminal control for one finder session.

Owns the raw-mode lifecycle, detects where the cursor sits when the session
starts, and works out how far the viewport must scroll so the list, guard
and prompt rows fit below it. All writes to the output descriptor go through
this object while a session is active.
"""

from __future__ import annotations

import contextlib
import os
import re
import select
import shutil
import termios
import time
import tty

from loguru import logger

from .errors import TerminalSessionError
from .list_window import ListWindow
from .render import ScreenLayout, render_clear, render_frame
from .search.model import SearchModel
from .ui_theme import DEFAULT_PALETTE, Palette

CURSOR_POSITION_QUERY = b"\x1b[6n"
CURSOR_REPORT_RE = re.compile(rb"\x1b\[(\d+);(\d+)R")
DEFAULT_CURSOR_QUERY_TIMEOUT_MS = 200


def compute_overflow_rows(cursor_start_row: int, capacity: int, terminal_height: int) -> int:
    """Rows the footprint starting at ``cursor_start_row`` would overrun the screen.

    The footprint is ``capacity`` list rows plus the guard and prompt rows;
    rows are 1-based like terminal coordinates.
    """
    last_row = cursor_start_row + capacity + 1
    return max(0, last_row - terminal_height)


class TerminalSession:
    """Raw-mode terminal handle plus the cursor-space bookkeeping of a session."""

    def __init__(
        self,
        stdin_fd: int,
        stdout_fd: int,
        capacity: int,
        cursor_query_timeout_ms: float = DEFAULT_CURSOR_QUERY_TIMEOUT_MS,
        palette: Palette = DEFAULT_PALETTE,
    ) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self.capacity = capacity
        self.cursor_query_timeout_ms = cursor_query_timeout_ms
        self.palette = palette
        try:
            self._saved_tty_state = termios.tcgetattr(stdin_fd)
        except termios.error as exc:
            raise TerminalSessionError(f"cannot read terminal attributes: {exc}") from exc
        self.raw_enabled = False
        self.is_first_paint = True
        self.cursor_start_row = 1
        self.overflow_rows = 0
        self.layout = ScreenLayout(anchor_row=1, capacity=capacity)
        # Keys typed before the cursor report arrived.
        self.typeahead = b""

    def enable_raw_mode(self) -> None:
        try:
            # TCSADRAIN keeps keys the user already typed.
            tty.setraw(self.stdin_fd, termios.TCSADRAIN)
        except termios.error as exc:
            raise TerminalSessionError(f"cannot enter raw mode: {exc}") from exc
        self.raw_enabled = True

    def restore_mode(self) -> None:
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        except termios.error as exc:
            raise TerminalSessionError(f"cannot restore terminal mode: {exc}") from exc
        self.raw_enabled = False

    @contextlib.contextmanager
    def raw_mode(self):
        """Bracket a session with raw-mode enter/restore, whatever happens inside."""
        try:
            self.enable_raw_mode()
            yield self
        finally:
            self.restore_mode()

    def write(self, text: str) -> None:
        data = text.encode("utf-8", errors="replace")
        while data:
            written = os.write(self.stdout_fd, data)
            data = data[written:]

    def terminal_size(self) -> os.terminal_size:
        try:
            return os.get_terminal_size(self.stdout_fd)
        except OSError:
            return shutil.get_terminal_size((80, 24))

    def query_cursor_row(self) -> int | None:
        """Ask the terminal for the cursor position and return its 1-based row.

        Bytes that arrive around the report are kept in ``typeahead``. Returns
        ``None`` if no report shows up within the query timeout.
        """
        os.write(self.stdout_fd, CURSOR_POSITION_QUERY)
        deadline = time.monotonic() + self.cursor_query_timeout_ms / 1000.0
        buffer = b""
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            ready, _, _ = select.select([self.stdin_fd], [], [], remaining)
            if not ready:
                break
            chunk = os.read(self.stdin_fd, 64)
            if not chunk:
                break
            buffer += chunk
            match = CURSOR_REPORT_RE.search(buffer)
            if match is not None:
                self.typeahead += buffer[: match.start()] + buffer[match.end() :]
                return int(match.group(1))
        self.typeahead += buffer
        return None

    def begin(self) -> ScreenLayout:
        """Measure the screen and fix the repaint anchor for this session."""
        size = self.terminal_size()
        row = self.query_cursor_row()
        if row is None:
            logger.warning("Cannot get cursor position; drawing from the top row")
            row = 1
        self.cursor_start_row = row
        # The list, guard and prompt rows must all fit on screen at once.
        max_rows = max(1, size.lines - 2)
        if self.capacity > max_rows:
            logger.warning(
                "{} row(s) do not fit a {}-line terminal; showing {}",
                self.capacity,
                size.lines,
                max_rows,
            )
            self.capacity = max_rows
        self.overflow_rows = compute_overflow_rows(row, self.capacity, size.lines)
        self.layout = ScreenLayout(
            anchor_row=max(1, row - self.overflow_rows),
            capacity=self.capacity,
            columns=max(1, size.columns),
        )
        logger.debug(
            "Cursor row {}, terminal {}x{}, overflow {}",
            row,
            size.columns,
            size.lines,
            self.overflow_rows,
        )
        return self.layout

    def repaint(self, model: SearchModel, window: ListWindow) -> None:
        out: list[str] = []
        if self.is_first_paint:
            # Push the invoking line up so the footprint fits on screen.
            out.append("\r\n" * (self.layout.footprint - 1))
            self.is_first_paint = False
        out.append(render_frame(model, window, self.layout, self.palette))
        self.write("".join(out))

    def end(self) -> None:
        """Erase the footprint and return the cursor to the anchor row."""
        if self.is_first_paint:
            return
        self.write(render_clear(self.layout))
