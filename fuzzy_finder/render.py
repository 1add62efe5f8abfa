"""Repaint pipeline: model state in, one escape-sequence string out.

``render_frame`` is a pure function of the search model, the list window and
the screen layout, so repainting unchanged state yields identical bytes. The
terminal session owns the actual write.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from itertools import groupby

from .list_window import ListWindow
from .search.model import SearchModel
from .text_width import TAB_WIDTH, clip_to_width, display_width, tail_to_width, utf8_char_offsets
from .ui_theme import DEFAULT_PALETTE, Palette

CLEAR_LINE = "\033[2K"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"

# Marker glyph plus a two-column spacer before every label.
GUTTER_WIDTH = 3


def cursor_to(row: int, col: int = 1) -> str:
    return f"\033[{max(1, row)};{max(1, col)}H"


@dataclass(frozen=True)
class ScreenLayout:
    """Fixed on-screen footprint of one session.

    Rows ``anchor_row .. anchor_row + capacity - 1`` hold the list, the next
    row is a blank guard row and the one after it is the prompt.
    """

    anchor_row: int
    capacity: int
    columns: int = 80

    @property
    def guard_row(self) -> int:
        return self.anchor_row + self.capacity

    @property
    def prompt_row(self) -> int:
        return self.anchor_row + self.capacity + 1

    @property
    def footprint(self) -> int:
        return self.capacity + 2


def _printable(ch: str) -> str:
    if ch == "\t":
        return " " * TAB_WIDTH
    return ch if ch.isprintable() else "?"


def highlight_label(
    text: str,
    matched_positions: Sequence[int],
    is_selected: bool,
    palette: Palette = DEFAULT_PALETTE,
    max_cols: int | None = None,
) -> str:
    """Colourise one item row.

    Characters whose UTF-8 start offset is in ``matched_positions`` get the
    match background. The selected row additionally gets the marker glyph and
    the selection background behind every unmatched character.
    """
    if max_cols is not None:
        text = clip_to_width(text, max_cols)
    positions = set(matched_positions)
    offsets = utf8_char_offsets(text)

    out: list[str] = []
    if is_selected:
        out.append(
            f"{palette.selected_bg}{palette.marker_fg}{palette.marker_glyph}{palette.reset_fg}{palette.reset_bg}"
        )
        out.append(f"{palette.spacer_fg}  {palette.reset_fg}")
    else:
        out.append(f"{palette.selected_bg} {palette.reset_bg}  ")

    chars = zip(text, offsets)
    for is_match, run in groupby(chars, key=lambda pair: pair[1] in positions):
        segment = "".join(_printable(ch) for ch, _offset in run)
        if is_match:
            out.append(f"{palette.match_bg}{segment}{palette.reset_bg}")
        elif is_selected:
            out.append(f"{palette.selected_bg}{segment}{palette.reset_bg}")
        else:
            out.append(segment)
    return "".join(out)


def render_frame(
    model: SearchModel,
    window: ListWindow,
    layout: ScreenLayout,
    palette: Palette = DEFAULT_PALETTE,
) -> str:
    """Build the full repaint for the current model and window state."""
    out: list[str] = [HIDE_CURSOR]
    label_cols = max(0, layout.columns - GUTTER_WIDTH)
    selected_row = window.selected_row

    for row, item in enumerate(window.visible_rows):
        out.append(cursor_to(layout.anchor_row + row))
        out.append(CLEAR_LINE)
        if item is None:
            continue
        positions = item.score.matched_positions if item.score is not None else ()
        out.append(highlight_label(item.display_text, positions, row == selected_row, palette, label_cols))

    out.append(cursor_to(layout.guard_row))
    out.append(CLEAR_LINE)

    # A wrapped prompt would scroll the screen away from the anchor, so only
    # the tail of a long query is shown, leaving one column for the cursor.
    query_cols = layout.columns - display_width(palette.prompt_glyph) - 2
    query = tail_to_width(model.query, query_cols)
    out.append(cursor_to(layout.prompt_row))
    out.append(CLEAR_LINE)
    out.append(f"{palette.prompt_fg}{palette.prompt_glyph}{palette.reset_fg} {query}")
    prompt_col = display_width(palette.prompt_glyph) + 1 + display_width(query) + 1
    out.append(cursor_to(layout.prompt_row, min(prompt_col, max(1, layout.columns))))
    out.append(SHOW_CURSOR)
    return "".join(out)


def render_clear(layout: ScreenLayout) -> str:
    """Erase every footprint row and park the cursor on the anchor row."""
    out: list[str] = []
    for row in range(layout.footprint):
        out.append(cursor_to(layout.anchor_row + row))
        out.append(CLEAR_LINE)
    out.append(cursor_to(layout.anchor_row))
    out.append(SHOW_CURSOR)
    return "".join(out)
