"""Fixed ANSI palette used by the renderer.

Two highlight backgrounds (matched characters, selected row), the selection
marker and prompt foregrounds, and the reset codes that end each span.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Palette:
    """Semantic ANSI codes for one repaint."""

    match_bg: str
    selected_bg: str
    marker_fg: str
    spacer_fg: str
    prompt_fg: str
    reset_fg: str
    reset_bg: str
    marker_glyph: str = ">"
    prompt_glyph: str = "$"


DEFAULT_PALETTE = Palette(
    match_bg="\033[48;5;24m",
    selected_bg="\033[48;5;237m",
    marker_fg="\033[38;5;114m",
    spacer_fg="\033[38;5;240m",
    prompt_fg="\033[38;5;75m",
    reset_fg="\033[39m",
    reset_bg="\033[49m",
)
