"""Tests for the USDA SR file loader."""

import pytest

from grubprint_api.core.exceptions import DataLoadError, IndexBuildError
from grubprint_api.loader.sr_legacy import (
    FOOD_DES,
    WEIGHT,
    load_dataset,
    parse_flag,
    parse_float,
)

from .conftest import FIXTURES_DIR

FOOD_ROW = "~{id}~^~0100~^~{desc}~^~SHORT~^~~^~~^~Y~^~~^{refuse}^~~^6.38^4.27^8.79^3.87\r\n"


def write_foods(tmp_path, rows: list[str]):
    (tmp_path / FOOD_DES).write_text("".join(rows), encoding="iso-8859-1")
    return tmp_path


class TestParsers:
    def test_parse_float(self):
        assert parse_float("") is None
        assert parse_float("6.38") == 6.38

    def test_parse_float_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_float("n/a")

    def test_parse_flag(self):
        assert parse_flag("Y") is True
        assert parse_flag("") is False
        with pytest.raises(ValueError):
            parse_flag("N")


class TestLoadDataset:
    def test_loads_fixture_files(self, sr_dataset):
        assert len(sr_dataset.foods) == 6
        butter = sr_dataset.foods["01001"]
        assert butter.long_desc == "Butter, salted"
        assert butter.short_desc == "BUTTER,WITH SALT"
        assert butter.survey is True
        assert butter.common_names is None
        assert butter.protein_factor == 4.27

    def test_optional_fields(self, sr_dataset):
        apples = sr_dataset.foods["09003"]
        assert apples.refuse == 10
        assert apples.refuse_desc == "Core and stem"
        assert apples.scientific_name == "Malus domestica"

        pie = sr_dataset.foods["18301"]
        assert pie.survey is False
        assert pie.nitrogen_factor is None
        assert pie.carbohydrate_factor is None

    def test_weights_grouped_and_ordered(self, sr_dataset):
        weights = sr_dataset.weights["01001"]
        assert [w.seq for w in weights] == ["1", "2", "3"]
        assert weights[0].description == 'pat (1" sq, 1/3" high)'
        assert weights[0].grams == 5
        assert weights[0].data_points is None

    def test_nutrients_and_definitions(self, sr_dataset):
        data = {d.nutrient_def_id: d for d in sr_dataset.nutrient_data["01001"]}
        assert data["204"].value == 81.11
        assert data["208"].std_error is None
        assert sr_dataset.nutrient_defs["208"].units == "kcal"
        assert sr_dataset.food_groups["0900"].description == "Fruits and Fruit Juices"

    def test_index_built_from_long_desc(self, sr_dataset):
        assert sorted(sr_dataset.index.get_postings("che")) == ["01009", "01017", "01018"]

    def test_missing_food_file(self, tmp_path):
        with pytest.raises(DataLoadError, match=FOOD_DES):
            load_dataset(tmp_path)

    def test_optional_files_may_be_absent(self, tmp_path):
        write_foods(tmp_path, [FOOD_ROW.format(id="01001", desc="Butter", refuse="0")])

        dataset = load_dataset(tmp_path)

        assert list(dataset.foods) == ["01001"]
        assert dataset.weights == {}
        assert dataset.nutrient_defs == {}

    def test_malformed_numeric_aborts(self, tmp_path):
        write_foods(tmp_path, [
            FOOD_ROW.format(id="01001", desc="Butter", refuse="0"),
            FOOD_ROW.format(id="01002", desc="Butter oil", refuse="lots"),
        ])

        with pytest.raises(DataLoadError) as exc_info:
            load_dataset(tmp_path)
        assert exc_info.value.file == FOOD_DES
        assert exc_info.value.line == 2

    def test_non_numeric_weight_seq_aborts(self, tmp_path):
        write_foods(tmp_path, [FOOD_ROW.format(id="01001", desc="Butter", refuse="0")])
        (tmp_path / WEIGHT).write_text("~01001~^A^1^~pat~^5^^\r\n", encoding="iso-8859-1")

        with pytest.raises(DataLoadError) as exc_info:
            load_dataset(tmp_path)
        assert exc_info.value.file == WEIGHT
        assert exc_info.value.line == 1

    def test_weights_sorted_by_numeric_seq(self, tmp_path):
        write_foods(tmp_path, [FOOD_ROW.format(id="01001", desc="Butter", refuse="0")])
        (tmp_path / WEIGHT).write_text(
            "~01001~^10^1^~stick~^113^^\r\n"
            "~01001~^2^1^~tbsp~^14.2^^\r\n",
            encoding="iso-8859-1",
        )

        dataset = load_dataset(tmp_path)

        assert [w.seq for w in dataset.weights["01001"]] == ["2", "10"]

    def test_wrong_field_count_aborts(self, tmp_path):
        write_foods(tmp_path, ["~01001~^~0100~^~Butter~\r\n"])

        with pytest.raises(DataLoadError, match="Expected 14 fields"):
            load_dataset(tmp_path)

    def test_duplicate_food_ids_abort(self, tmp_path):
        write_foods(tmp_path, [
            FOOD_ROW.format(id="01001", desc="Butter", refuse="0"),
            FOOD_ROW.format(id="01001", desc="Butter again", refuse="0"),
        ])

        with pytest.raises(IndexBuildError):
            load_dataset(tmp_path)

    def test_fixture_dir_exists(self):
        assert (FIXTURES_DIR / FOOD_DES).exists()
