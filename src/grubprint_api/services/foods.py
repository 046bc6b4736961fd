"""Food lookup service over the published record store."""

import logging

from grubprint_api.core.exceptions import NotFoundError
from grubprint_api.db.stores.base import RecordStore
from grubprint_api.models.food import FoodMatch, FoodRecord, Nutrient, Weight
from grubprint_api.search.engine import FoodSearchEngine

logger = logging.getLogger(__name__)


class FoodService:
    """
    Service for food, weight and nutrient lookups.

    Search goes through the trigram engine; everything else is a direct
    read against the current store version.
    """

    def __init__(self, store: RecordStore, engine: FoodSearchEngine):
        """
        Initialize food service.

        Args:
            store: Record store holding the published dataset
            engine: Search engine reading from the same store
        """
        self.store = store
        self.engine = engine

    async def search(self, query: str) -> list[FoodMatch]:
        """Search foods by description."""
        return await self.engine.search_foods(query)

    async def get_food(self, food_id: str) -> FoodRecord:
        """
        Get a single food.

        Raises:
            NotFoundError: If no food has this id
        """
        food = await self.store.reader().get_food(food_id)
        if food is None:
            raise NotFoundError("Food", food_id)
        return food

    async def weights(self, food_id: str) -> list[Weight]:
        return await self.store.reader().weights_by_food_id(food_id)

    async def nutrients(self, food_id: str) -> list[Nutrient]:
        return await self.store.reader().nutrients_by_food_id(food_id)
