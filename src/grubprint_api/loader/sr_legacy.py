"""
Loader for USDA Standard Reference ASCII files.

Fields are separated by carets (^) and text fields are surrounded by
tildes (~); a blank field appears as ^^ or ~~. Files are ISO-8859-1.

    ~01001~^~0100~^~Butter, salted~^~BUTTER,WITH SALT~^~~^~~^~Y~^~~^0^~~^6.38^4.27^8.79^3.87

Any malformed row aborts the whole load, so a partial dataset is never
indexed or published.
"""

import csv
import logging
import time
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import TypeVar

from grubprint_api.core.exceptions import DataLoadError
from grubprint_api.db.dataset import FoodDataset
from grubprint_api.models.food import (
    FoodGroup,
    FoodRecord,
    NutrientData,
    NutrientDef,
    Weight,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

FOOD_DES = "FOOD_DES.txt"
FD_GROUP = "FD_GROUP.txt"
WEIGHT = "WEIGHT.txt"
NUT_DATA = "NUT_DATA.txt"
NUTR_DEF = "NUTR_DEF.txt"

ENCODING = "iso-8859-1"


def iter_rows(path: Path, fields: int) -> Iterator[tuple[int, list[str]]]:
    """
    Yield (line number, fields) for each record in an SR file.

    Raises:
        DataLoadError: If a record has the wrong number of fields
    """
    with path.open(newline="", encoding=ENCODING) as f:
        reader = csv.reader(f, delimiter="^", quotechar="~")
        for row in reader:
            if not row:
                continue
            if len(row) != fields:
                raise DataLoadError(
                    f"Expected {fields} fields, got {len(row)}",
                    file=path.name,
                    line=reader.line_num,
                )
            yield reader.line_num, [s.strip("~") for s in row]


def parse_float(value: str) -> float | None:
    """Parse an optional numeric field; blank means missing."""
    if value == "":
        return None
    return float(value)


def parse_flag(value: str) -> bool:
    """Parse a Y/blank indicator field."""
    if value == "Y":
        return True
    if value == "":
        return False
    raise ValueError(f"unexpected indicator {value!r}")


def _required(value: str) -> float:
    parsed = parse_float(value)
    if parsed is None:
        raise ValueError("missing required numeric value")
    return parsed


def _optional_str(value: str) -> str | None:
    return value or None


def _seq(value: str) -> str:
    if not value.isdigit():
        raise ValueError(f"non-numeric sequence number {value!r}")
    return value


def food_from_row(r: list[str]) -> FoodRecord:
    return FoodRecord(
        id=r[0],
        food_group_id=r[1],
        long_desc=r[2],
        short_desc=r[3],
        common_names=_optional_str(r[4]),
        manufacturer=_optional_str(r[5]),
        survey=parse_flag(r[6]),
        refuse_desc=_optional_str(r[7]),
        refuse=parse_float(r[8]),
        scientific_name=_optional_str(r[9]),
        nitrogen_factor=parse_float(r[10]),
        protein_factor=parse_float(r[11]),
        fat_factor=parse_float(r[12]),
        carbohydrate_factor=parse_float(r[13]),
    )


def food_group_from_row(r: list[str]) -> FoodGroup:
    return FoodGroup(id=r[0], description=r[1])


def weight_from_row(r: list[str]) -> Weight:
    return Weight(
        food_id=r[0],
        seq=_seq(r[1]),
        amount=_required(r[2]),
        description=r[3],
        grams=_required(r[4]),
        data_points=parse_float(r[5]),
        std_dev=parse_float(r[6]),
    )


def nutrient_data_from_row(r: list[str]) -> NutrientData:
    # Only the leading columns are kept; the statistical columns
    # (min, max, error bounds, ...) are not served.
    return NutrientData(
        food_id=r[0],
        nutrient_def_id=r[1],
        value=_required(r[2]),
        data_points=parse_float(r[3]),
        std_error=parse_float(r[4]),
        source_code_id=_optional_str(r[5]),
    )


def nutrient_def_from_row(r: list[str]) -> NutrientDef:
    return NutrientDef(
        id=r[0],
        units=r[1],
        tag_name=_optional_str(r[2]),
        description=r[3],
        num_dec=r[4],
        sort=parse_float(r[5]),
    )


def load_file(
    path: Path,
    fields: int,
    parse: Callable[[list[str]], T],
) -> list[T]:
    """
    Parse every record of one SR file.

    Raises:
        DataLoadError: On the first malformed record
    """
    started = time.perf_counter()
    models: list[T] = []
    for line, row in iter_rows(path, fields):
        try:
            models.append(parse(row))
        except ValueError as e:
            raise DataLoadError(str(e), file=path.name, line=line) from e
    logger.info(f"{path.name}: {len(models)} records in {time.perf_counter() - started:.2f}s")
    return models


def _load_optional(
    data_dir: Path,
    name: str,
    fields: int,
    parse: Callable[[list[str]], T],
) -> list[T]:
    path = data_dir / name
    if not path.exists():
        logger.warning(f"{name} not found in {data_dir}, skipping")
        return []
    return load_file(path, fields, parse)


def load_dataset(data_dir: str | Path) -> FoodDataset:
    """
    Load SR files from a directory and build a publishable dataset.

    FOOD_DES.txt is required; FD_GROUP, WEIGHT, NUT_DATA and NUTR_DEF are
    loaded when present.

    Args:
        data_dir: Directory holding the SR text files

    Returns:
        FoodDataset with the search index built

    Raises:
        DataLoadError: If FOOD_DES.txt is missing or any record is malformed
        IndexBuildError: If food ids repeat
    """
    data_dir = Path(data_dir)
    food_path = data_dir / FOOD_DES
    if not food_path.exists():
        raise DataLoadError(f"{FOOD_DES} not found in {data_dir}")

    logger.info(f"Loading USDA data from {data_dir}")
    foods = load_file(food_path, 14, food_from_row)
    groups = _load_optional(data_dir, FD_GROUP, 2, food_group_from_row)
    weights = _load_optional(data_dir, WEIGHT, 7, weight_from_row)
    nutrient_data = _load_optional(data_dir, NUT_DATA, 18, nutrient_data_from_row)
    nutrient_defs = _load_optional(data_dir, NUTR_DEF, 6, nutrient_def_from_row)

    return FoodDataset.build(
        foods=foods,
        weights=weights,
        nutrient_data=nutrient_data,
        nutrient_defs=nutrient_defs,
        food_groups=groups,
    )
