"""
Fuzzy food search by trigram overlap.

A food matches when its description contains at least
SIMILARITY_THRESHOLD of the query's distinct trigrams:

    score = matched query trigrams / total query trigrams

With the default 0.70, a ten-gram query needs seven grams present in a
description. Raising the threshold makes matching stricter; lowering it
lets more misspellings and partial words through.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from fractions import Fraction

from grubprint_api.core.exceptions import InconsistentIndexError
from grubprint_api.db.stores.base import RecordStore
from grubprint_api.models.food import FoodMatch, FoodRecord

from .trigrams import trigrams

logger = logging.getLogger(__name__)

SIMILARITY_THRESHOLD = 0.70
MAX_RESULTS = 50


@dataclass(frozen=True)
class ScoredFood:
    food: FoodRecord
    score: float

    def to_match(self) -> FoodMatch:
        return FoodMatch.from_record(self.food, self.score)


class FoodSearchEngine:
    """
    Ranks foods against a free-text query.

    Holds no state besides the store handle; each call reads through a
    fresh store reader and mutates nothing shared.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        threshold: float = SIMILARITY_THRESHOLD,
        max_results: int = MAX_RESULTS,
    ):
        if not 0.0 < threshold <= 1.0:
            raise ValueError(f"threshold must be in (0, 1], got {threshold}")
        if max_results < 1:
            raise ValueError(f"max_results must be positive, got {max_results}")
        self.store = store
        self.threshold = threshold
        self.max_results = max_results
        # Compare counts exactly so 7/10 clears 0.70
        self._cutoff = Fraction(str(threshold))

    async def search(self, query: str) -> list[ScoredFood]:
        """
        Find foods whose descriptions overlap the query.

        Args:
            query: Free text, e.g. "cheddar cheese"

        Returns:
            Up to max_results foods, highest score first, ties by id

        Raises:
            IndexNotBuiltError: If no index is published
            StoreReadError: If a store lookup fails
            InconsistentIndexError: If postings name a food the store lacks
        """
        # Bind to one published version before doing any reads
        reader = self.store.reader()
        grams = trigrams(query)
        if not grams:
            return []

        counts: Counter[str] = Counter()
        for gram in grams:
            counts.update(await reader.get_postings(gram))

        total = len(grams)
        candidates = [
            (food_id, n) for food_id, n in counts.items()
            if Fraction(n, total) >= self._cutoff
        ]
        candidates.sort(key=lambda c: (-c[1], c[0]))
        logger.debug(
            f"Search '{query}': {total} trigrams, {len(counts)} candidates, "
            f"{len(candidates)} at or above {self.threshold}"
        )

        foods = await reader.get_foods([food_id for food_id, _ in candidates])
        results: list[ScoredFood] = []
        for food_id, n in candidates:
            food = foods.get(food_id)
            if food is None:
                logger.error(f"Postings reference missing food {food_id}")
                raise InconsistentIndexError(food_id)
            results.append(ScoredFood(food=food, score=n / total))
        # Cap only after full scoring and sorting
        return results[: self.max_results]

    async def search_foods(self, query: str) -> list[FoodMatch]:
        """Search and return API-ready matches."""
        return [r.to_match() for r in await self.search(query)]
