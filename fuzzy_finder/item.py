"""Candidate items and their per-query match scores."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class MatchScore:
    """Matcher verdict for one item.

    ``matched_positions`` are strictly increasing UTF-8 byte offsets into the
    item's display text; the renderer uses them for highlighting only.
    """

    rank: int
    matched_positions: tuple[int, ...] = ()


@dataclass(eq=False)
class Item(Generic[T]):
    """A display label paired with an opaque caller payload.

    Items compare by identity: two entries with the same label and payload are
    still distinct candidates, which keeps selection tracking unambiguous.
    """

    display_text: str
    payload: T
    score: MatchScore | None = field(default=None, repr=False)

    @property
    def is_match(self) -> bool:
        return self.score is not None
