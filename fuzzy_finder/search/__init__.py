"""Search-layer public API: the default matcher and the search model."""

from .fuzzy import Matcher, fuzzy_score
from .model import SearchModel

__all__ = ["Matcher", "SearchModel", "fuzzy_score"]
