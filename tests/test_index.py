"""Unit tests for index construction."""

import pytest

from grubprint_api.core.exceptions import IndexBuildError
from grubprint_api.search.index import build_index
from grubprint_api.search.trigrams import trigrams

from .conftest import make_food


class TestBuildIndex:
    def test_postings_match_record_trigrams(self, sample_foods):
        index = build_index(sample_foods)

        for food in sample_foods:
            grams = trigrams(food.long_desc)
            for gram in grams:
                assert food.id in index.get_postings(gram)
        for gram, ids in index.postings.items():
            for food_id in ids:
                assert gram in trigrams(index.foods[food_id].long_desc)

    def test_ids_appear_once_per_posting(self):
        index = build_index([make_food("1", "cheese cheese cheese")])
        for ids in index.postings.values():
            assert ids == ("1",)

    def test_shared_gram_lists_every_food(self, sample_foods):
        index = build_index(sample_foods)
        assert sorted(index.get_postings("che")) == ["1", "2"]

    def test_missing_gram_is_empty(self, sample_foods):
        index = build_index(sample_foods)
        assert index.get_postings("zzz") == ()

    def test_records_by_id(self, sample_foods):
        index = build_index(sample_foods)
        assert len(index) == 3
        assert index.foods["3"].long_desc == "apple pie"

    def test_duplicate_ids_abort(self):
        with pytest.raises(IndexBuildError, match="Duplicate"):
            build_index([make_food("1", "apple"), make_food("1", "pear")])

    def test_index_is_read_only(self, sample_foods):
        index = build_index(sample_foods)
        with pytest.raises(TypeError):
            index.postings["che"] = ("9",)
        with pytest.raises(TypeError):
            index.foods["9"] = make_food("9", "pear")

    def test_empty_input(self):
        index = build_index([])
        assert len(index) == 0
        assert index.postings == {}
