"""Default fuzzy scorer plugged into the search model.

Matches the query as an ordered, case-insensitive character subsequence and
ranks with run, word-boundary and gap terms. Positions are reported as UTF-8
byte offsets into the candidate so they line up with the highlight contract.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from ..text_width import utf8_char_offsets

Matcher = Callable[[str, str], "tuple[int, list[int]] | None"]

WORD_BOUNDARY_CHARS = "/_- ."


def _fold(text: str) -> list[str]:
    # One folded entry per source character so indices stay aligned.
    return [ch.casefold() for ch in text]


def subsequence_indices(query: str, candidate: str) -> list[int] | None:
    """Return leftmost character indices spelling ``query`` in order, if any."""
    folded = _fold(candidate)
    indices: list[int] = []
    pos = 0
    for needle in _fold(query):
        while pos < len(folded) and folded[pos] != needle:
            pos += 1
        if pos >= len(folded):
            return None
        indices.append(pos)
        pos += 1
    return indices


def substring_indices(query: str, candidate: str) -> list[int] | None:
    """Return character indices of the first contiguous occurrence of ``query``."""
    needles = _fold(query)
    folded = _fold(candidate)
    if not needles:
        return []
    width = len(needles)
    for start in range(len(folded) - width + 1):
        if folded[start : start + width] == needles:
            return list(range(start, start + width))
    return None


def score_indices(candidate: str, indices: Sequence[int]) -> int:
    """Rank a set of matched character indices within ``candidate``.

    Consecutive runs earn growing bonuses, matches at the start of a word earn
    a boundary bonus, and gaps between matches cost a bounded penalty. Longer
    candidates are mildly penalised so tighter labels win ties.
    """
    folded = _fold(candidate)
    score = 0
    prev_idx = -1
    run = 0
    for idx in indices:
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, gap * 2)
        if idx == 0 or folded[idx - 1] in WORD_BOUNDARY_CHARS:
            score += 35
        prev_idx = idx

    score -= len(folded) // 5
    return score


def fuzzy_score(query: str, candidate: str) -> tuple[int, list[int]] | None:
    """Score ``candidate`` against ``query``.

    Returns ``(rank, matched_byte_offsets)`` or ``None`` when the query is not
    a subsequence of the candidate. An empty query matches everything with
    rank 0 and no highlighted positions.
    """
    if not query:
        return 0, []

    scattered = subsequence_indices(query, candidate)
    if scattered is None:
        return None

    best = scattered
    best_score = score_indices(candidate, scattered)
    contiguous = substring_indices(query, candidate)
    if contiguous is not None and contiguous != scattered:
        contiguous_score = score_indices(candidate, contiguous)
        if contiguous_score > best_score:
            best, best_score = contiguous, contiguous_score

    offsets = utf8_char_offsets(candidate)
    return best_score, [offsets[idx] for idx in best]
