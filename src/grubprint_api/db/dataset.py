"""Complete, loaded USDA dataset ready to publish to a record store."""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from grubprint_api.models.food import (
    FoodGroup,
    FoodRecord,
    NutrientData,
    NutrientDef,
    Weight,
)
from grubprint_api.search.index import SearchIndex, build_index


@dataclass(frozen=True)
class FoodDataset:
    """
    Everything a record store serves, built off to the side in one go.

    Weights and nutrient data are grouped by food id. Weights are sorted
    by numeric seq, nutrient data by "{food_id},{nutrient_def_id}" key.
    """

    index: SearchIndex
    weights: dict[str, tuple[Weight, ...]] = field(default_factory=dict)
    nutrient_data: dict[str, tuple[NutrientData, ...]] = field(default_factory=dict)
    nutrient_defs: dict[str, NutrientDef] = field(default_factory=dict)
    food_groups: dict[str, FoodGroup] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def foods(self):
        return self.index.foods

    @classmethod
    def build(
        cls,
        foods: Iterable[FoodRecord],
        weights: Iterable[Weight] = (),
        nutrient_data: Iterable[NutrientData] = (),
        nutrient_defs: Iterable[NutrientDef] = (),
        food_groups: Iterable[FoodGroup] = (),
    ) -> "FoodDataset":
        """Index the foods and group the per-food rows."""
        return cls(
            index=build_index(foods),
            weights=_group_by_food(weights, key=lambda w: w.seq_number),
            nutrient_data=_group_by_food(nutrient_data, key=lambda d: d.key),
            nutrient_defs={d.id: d for d in nutrient_defs},
            food_groups={g.id: g for g in food_groups},
        )


def _group_by_food(rows, key) -> dict[str, tuple]:
    grouped = defaultdict(list)
    for row in rows:
        grouped[row.food_id].append(row)
    return {
        food_id: tuple(sorted(items, key=key))
        for food_id, items in grouped.items()
    }
