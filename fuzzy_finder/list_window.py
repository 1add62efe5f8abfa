"""Fixed-height scrolling window over the ranked match list.

The window always exposes exactly ``capacity`` rows so the on-screen
footprint, and therefore the prompt row, never moves. Rows past the end of
the match list are blank (``None``).
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Generic

from .errors import FinderConfigError
from .item import Item, T


class Direction(Enum):
    UP = -1
    DOWN = 1


def _checked_capacity(capacity: int) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
        raise FinderConfigError(f"list window needs at least one row, got {capacity!r}")
    return capacity


class ListWindow(Generic[T]):
    """Selection and scroll state for a window of ``capacity`` rows.

    ``selected`` is an absolute index into the match list (``None`` when there
    are no matches). ``scroll_offset`` is the match index shown on the first
    row. Whenever matches exist the selected match lies inside the window.
    """

    def __init__(self, capacity: int) -> None:
        self.capacity = _checked_capacity(capacity)
        self.matches: Sequence[Item[T]] = ()
        self.selected: int | None = None
        self.scroll_offset = 0

    def resize(self, capacity: int) -> None:
        """Change the row count, scrolling so the selection stays visible."""
        self.capacity = _checked_capacity(capacity)
        if self.selected is not None and self.selected >= self.scroll_offset + self.capacity:
            self.scroll_offset = self.selected - self.capacity + 1

    def on_matches_changed(self, new_matches: Sequence[Item[T]]) -> None:
        """Adopt a new match list, keeping the selected item when it survived."""
        previous = self.get_selected()
        self.matches = new_matches
        if not new_matches:
            self.selected = None
            self.scroll_offset = 0
            return

        tracked = None
        if previous is not None:
            for idx, item in enumerate(new_matches):
                if item is previous:
                    tracked = idx
                    break
        if tracked is None:
            self.selected = 0
            self.scroll_offset = 0
            return

        self.selected = tracked
        scroll = min(self.scroll_offset, max(0, len(new_matches) - self.capacity))
        if tracked < scroll:
            scroll = tracked
        elif tracked >= scroll + self.capacity:
            scroll = tracked - self.capacity + 1
        self.scroll_offset = scroll

    def move_selection(self, direction: Direction) -> bool:
        """Move the selection one row, scrolling by one when it leaves the window.

        Clamped at both ends; returns whether the selection changed.
        """
        if not self.matches or self.selected is None:
            return False
        target = max(0, min(len(self.matches) - 1, self.selected + direction.value))
        if target == self.selected:
            return False
        self.selected = target
        if target < self.scroll_offset:
            self.scroll_offset -= 1
        elif target >= self.scroll_offset + self.capacity:
            self.scroll_offset += 1
        return True

    def get_selected(self) -> Item[T] | None:
        if self.selected is None or not self.matches:
            return None
        return self.matches[self.selected]

    @property
    def selected_row(self) -> int | None:
        """Row of the selection within the window, or ``None`` with no matches."""
        if self.selected is None:
            return None
        return self.selected - self.scroll_offset

    @property
    def visible_rows(self) -> list[Item[T] | None]:
        rows: list[Item[T] | None] = []
        for row in range(self.capacity):
            idx = self.scroll_offset + row
            rows.append(self.matches[idx] if idx < len(self.matches) else None)
        return rows
