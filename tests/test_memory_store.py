"""Tests for the in-memory record store."""

import pytest

from grubprint_api.core.exceptions import IndexNotBuiltError
from grubprint_api.db.dataset import FoodDataset
from grubprint_api.db.stores.memory import MemoryRecordStore
from grubprint_api.models.food import Weight

from .conftest import make_food


class TestMemoryRecordStore:
    def test_not_ready_until_published(self):
        store = MemoryRecordStore()
        assert store.is_ready is False
        assert store.published_at is None
        with pytest.raises(IndexNotBuiltError):
            store.reader()

    @pytest.mark.asyncio
    async def test_publish_makes_ready(self, sample_foods):
        store = MemoryRecordStore()
        dataset = FoodDataset.build(sample_foods)

        await store.publish(dataset)

        assert store.is_ready is True
        assert store.published_at == dataset.created_at
        food = await store.reader().get_food("2")
        assert food.long_desc == "cheese spread"

    @pytest.mark.asyncio
    async def test_publish_swaps_whole_dataset(self, sample_foods):
        store = MemoryRecordStore(FoodDataset.build(sample_foods))
        old_reader = store.reader()

        await store.publish(FoodDataset.build([make_food("9", "pear")]))
        new_reader = store.reader()

        assert await old_reader.get_food("1") is not None
        assert await old_reader.get_postings("pea") == []
        assert await new_reader.get_food("1") is None
        assert await new_reader.get_postings("pea") == ["9"]

    @pytest.mark.asyncio
    async def test_unknown_ids(self, sr_store):
        reader = sr_store.reader()
        assert await reader.get_food("99999") is None
        assert await reader.weights_by_food_id("99999") == []
        assert await reader.nutrients_by_food_id("99999") == []

    @pytest.mark.asyncio
    async def test_weights_in_sequence_order(self, sr_store):
        weights = await sr_store.reader().weights_by_food_id("01001")
        assert [w.description for w in weights] == ['pat (1" sq, 1/3" high)', "tbsp", "cup"]

    @pytest.mark.asyncio
    async def test_nutrients_joined_in_sort_order(self, sr_store):
        nutrients = await sr_store.reader().nutrients_by_food_id("01001")
        assert [(n.description, n.value, n.units) for n in nutrients] == [
            ("Energy", 717, "kcal"),
            ("Protein", 0.85, "g"),
            ("Total lipid (fat)", 81.11, "g"),
        ]

    @pytest.mark.asyncio
    async def test_weights_ordered_by_numeric_seq(self):
        weights = [
            Weight(food_id="1", seq=seq, amount=1, description=f"w{seq}", grams=1)
            for seq in ("10", "1", "2")
        ]
        store = MemoryRecordStore(FoodDataset.build([make_food("1", "x")], weights=weights))

        result = await store.reader().weights_by_food_id("1")

        assert [w.seq for w in result] == ["1", "2", "10"]

    @pytest.mark.asyncio
    async def test_get_foods_skips_unknown_ids(self, sample_store):
        foods = await sample_store.reader().get_foods(["3", "404", "1"])
        assert list(foods) == ["3", "1"]
        assert foods["3"].long_desc == "apple pie"

    @pytest.mark.asyncio
    async def test_weight_prefix_does_not_leak(self):
        # "0100" must not pick up rows for "01001"
        weight = Weight(food_id="01001", seq="1", amount=1, description="cup", grams=227)
        store = MemoryRecordStore(FoodDataset.build(
            [make_food("0100", "x"), make_food("01001", "butter")],
            weights=[weight],
        ))
        reader = store.reader()
        assert await reader.weights_by_food_id("0100") == []
        assert await reader.weights_by_food_id("01001") == [weight]
