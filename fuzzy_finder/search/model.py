"""Query state and the ranked match list derived from it.

Every query edit rescores the whole item collection through the matcher and
rebuilds the match list from scratch; there is no incremental diffing.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Generic

from loguru import logger

from ..item import Item, MatchScore, T
from .fuzzy import Matcher, fuzzy_score


class SearchModel(Generic[T]):
    """Own the item collection, the query and the ranked matches."""

    def __init__(self, items: Iterable[Item[T]], matcher: Matcher = fuzzy_score) -> None:
        self.all_items: list[Item[T]] = list(items)
        self.matcher = matcher
        self._query = ""
        self.matches: list[Item[T]] = []
        self._rescore()

    @property
    def query(self) -> str:
        return self._query

    def set_query(self, new_query: str) -> bool:
        """Replace the query and recompute matches.

        Returns ``False`` without calling the matcher when the query is
        unchanged.
        """
        if new_query == self._query:
            return False
        self._query = new_query
        self._rescore()
        return True

    def append(self, ch: str) -> bool:
        return self.set_query(self._query + ch)

    def backspace(self) -> bool:
        if not self._query:
            return False
        return self.set_query(self._query[:-1])

    def _rescore(self) -> None:
        for item in self.all_items:
            verdict = self.matcher(self._query, item.display_text)
            if verdict is None:
                item.score = None
                continue
            rank, positions = verdict
            item.score = MatchScore(rank=rank, matched_positions=tuple(positions))

        # sorted() is stable with reverse=True, so equal ranks keep input order.
        self.matches = sorted(
            (item for item in self.all_items if item.is_match),
            key=lambda item: item.score.rank,
            reverse=True,
        )
        logger.debug(
            "There are a total of {} item(s) and {} match(es) for {!r}",
            len(self.all_items),
            len(self.matches),
            self._query,
        )
