"""In-process record store backed by an immutable FoodDataset."""

import logging
from datetime import datetime

from grubprint_api.core.exceptions import IndexNotBuiltError
from grubprint_api.db.dataset import FoodDataset
from grubprint_api.models.food import FoodRecord, Nutrient, Weight

from .base import RecordReader, RecordStore

logger = logging.getLogger(__name__)


class MemoryRecordReader(RecordReader):
    """Reader over a single dataset snapshot."""

    def __init__(self, dataset: FoodDataset):
        self._dataset = dataset

    async def get_food(self, food_id: str) -> FoodRecord | None:
        return self._dataset.foods.get(food_id)

    async def get_foods(self, food_ids: list[str]) -> dict[str, FoodRecord]:
        foods = self._dataset.foods
        return {food_id: foods[food_id] for food_id in food_ids if food_id in foods}

    async def get_postings(self, gram: str) -> list[str]:
        return list(self._dataset.index.get_postings(gram))

    async def weights_by_food_id(self, food_id: str) -> list[Weight]:
        return list(self._dataset.weights.get(food_id, ()))

    async def nutrients_by_food_id(self, food_id: str) -> list[Nutrient]:
        defs = self._dataset.nutrient_defs
        rows = [
            (defs[data.nutrient_def_id], data)
            for data in self._dataset.nutrient_data.get(food_id, ())
            if data.nutrient_def_id in defs
        ]
        rows.sort(key=lambda pair: (pair[0].sort is None, pair[0].sort or 0.0))
        return [
            Nutrient(description=d.description, value=data.value, units=d.units)
            for d, data in rows
        ]


class MemoryRecordStore(RecordStore):
    """
    Record store that serves a dataset held in process memory.

    publish() swaps a single reference, so readers never observe a
    partially built dataset and need no locks.
    """

    def __init__(self, dataset: FoodDataset | None = None):
        self._dataset = dataset

    @property
    def backend_name(self) -> str:
        return "memory"

    @property
    def is_ready(self) -> bool:
        return self._dataset is not None

    @property
    def published_at(self) -> datetime | None:
        return self._dataset.created_at if self._dataset is not None else None

    def reader(self) -> MemoryRecordReader:
        dataset = self._dataset
        if dataset is None:
            raise IndexNotBuiltError()
        return MemoryRecordReader(dataset)

    async def publish(self, dataset: FoodDataset) -> None:
        self._dataset = dataset
        logger.info(f"Published in-memory dataset with {len(dataset.index)} foods")
