"""Inverted trigram index over food descriptions."""

import logging
import time
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from grubprint_api.core.exceptions import IndexBuildError
from grubprint_api.models.food import FoodRecord

from .trigrams import trigrams

logger = logging.getLogger(__name__)


class SearchIndex:
    """
    Immutable snapshot of foods and their trigram postings.

    Built once by build_index() and never mutated afterwards, so any
    number of readers can share it without locking.
    """

    __slots__ = ("_foods", "_postings")

    def __init__(
        self,
        foods: Mapping[str, FoodRecord],
        postings: Mapping[str, tuple[str, ...]],
    ):
        self._foods = MappingProxyType(dict(foods))
        self._postings = MappingProxyType(dict(postings))

    @property
    def foods(self) -> Mapping[str, FoodRecord]:
        return self._foods

    @property
    def postings(self) -> Mapping[str, tuple[str, ...]]:
        return self._postings

    def get_postings(self, gram: str) -> tuple[str, ...]:
        return self._postings.get(gram, ())

    def __len__(self) -> int:
        return len(self._foods)


def build_index(records: Iterable[FoodRecord]) -> SearchIndex:
    """
    Build a search index from every food record.

    The index is assembled in private structures and only returned once
    complete; callers publish it as a whole.

    Args:
        records: All foods to index

    Returns:
        The completed SearchIndex

    Raises:
        IndexBuildError: If two records share an id
    """
    started = time.perf_counter()
    foods: dict[str, FoodRecord] = {}
    postings: dict[str, list[str]] = {}

    for record in records:
        if record.id in foods:
            raise IndexBuildError(f"Duplicate food id '{record.id}'")
        foods[record.id] = record
        # trigrams() is a set, so a record posts to each gram once
        for gram in trigrams(record.long_desc):
            postings.setdefault(gram, []).append(record.id)

    index = SearchIndex(
        foods,
        {gram: tuple(ids) for gram, ids in postings.items()},
    )
    logger.info(
        f"Built food index: {len(foods)} foods, {len(postings)} trigrams "
        f"in {time.perf_counter() - started:.2f}s"
    )
    return index
