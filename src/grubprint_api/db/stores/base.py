"""
Record store interfaces.

A RecordStore owns published data. Each request asks it for a
RecordReader, which stays bound to the data that was current at that
moment; a later publish never changes what an existing reader sees.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from grubprint_api.db.dataset import FoodDataset
from grubprint_api.models.food import FoodRecord, Nutrient, Weight


class RecordReader(ABC):
    """Read access to one published version of the dataset."""

    @abstractmethod
    async def get_food(self, food_id: str) -> FoodRecord | None:
        """
        Get a food by id.

        Returns:
            The record, or None if no food has this id

        Raises:
            StoreReadError: If the underlying storage fails
        """
        ...

    async def get_foods(self, food_ids: list[str]) -> dict[str, FoodRecord]:
        """
        Get several foods at once.

        Backends override this with a single batched read.

        Returns:
            Records keyed by id; ids with no food are left out
        """
        foods = {}
        for food_id in food_ids:
            food = await self.get_food(food_id)
            if food is not None:
                foods[food_id] = food
        return foods

    @abstractmethod
    async def get_postings(self, gram: str) -> list[str]:
        """
        Get ids of foods whose description contains a trigram.

        Returns:
            Food ids; empty if the trigram was never indexed

        Raises:
            StoreReadError: If the underlying storage fails
        """
        ...

    @abstractmethod
    async def weights_by_food_id(self, food_id: str) -> list[Weight]:
        """Get gram weights for a food, ordered by sequence."""
        ...

    @abstractmethod
    async def nutrients_by_food_id(self, food_id: str) -> list[Nutrient]:
        """Get nutrient values for a food, ordered by definition sort order."""
        ...


class RecordStore(ABC):
    """Holder of the currently published dataset."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        ...

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        """Whether a dataset has been published."""
        ...

    @property
    @abstractmethod
    def published_at(self) -> datetime | None:
        """When the current dataset was published."""
        ...

    @abstractmethod
    def reader(self) -> RecordReader:
        """
        Get a reader bound to the current dataset.

        Raises:
            IndexNotBuiltError: If nothing has been published yet
        """
        ...

    @abstractmethod
    async def publish(self, dataset: FoodDataset) -> None:
        """
        Replace the served dataset as a whole.

        Readers created before the call keep the previous dataset.
        """
        ...

    async def close(self) -> None:
        """Release any held resources."""
        return None
