"""Display-width and byte-offset helpers for single-line labels.

Keeps the prompt cursor and clipped item rows aligned when labels contain
wide or combining characters.
"""

from __future__ import annotations

import unicodedata

TAB_WIDTH = 4


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks consume no columns, East Asian wide/fullwidth characters
    consume two and tabs are rendered as a fixed run of spaces.
    """
    if ch == "\t":
        return TAB_WIDTH
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    return sum(char_display_width(ch) for ch in text)


def utf8_char_offsets(text: str) -> list[int]:
    """Return the UTF-8 byte offset at which each character of ``text`` starts."""
    offsets: list[int] = []
    offset = 0
    for ch in text:
        offsets.append(offset)
        offset += len(ch.encode("utf-8", errors="surrogatepass"))
    return offsets


def clip_to_width(text: str, max_cols: int) -> str:
    """Trim ``text`` to at most ``max_cols`` display columns."""
    if max_cols <= 0:
        return ""
    col = 0
    for idx, ch in enumerate(text):
        w = char_display_width(ch)
        if col + w > max_cols:
            return text[:idx]
        col += w
    return text


def tail_to_width(text: str, max_cols: int) -> str:
    """Keep the end of ``text`` that fits in ``max_cols`` display columns."""
    if max_cols <= 0:
        return ""
    col = 0
    for idx in range(len(text) - 1, -1, -1):
        col += char_display_width(text[idx])
        if col > max_cols:
            return text[idx + 1 :]
    return text
