"""Pydantic models for USDA Standard Reference records."""

from pydantic import BaseModel, ConfigDict, Field


class FoodGroup(BaseModel):
    """Food group description (FD_GROUP)."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str


class FoodRecord(BaseModel):
    """A food description record (FOOD_DES)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="5-digit USDA nutrient databank number")
    food_group_id: str = Field(..., description="Food group identifier")
    long_desc: str = Field(..., description="Full food description, used for search")
    short_desc: str = Field(..., description="Abbreviated description")
    common_names: str | None = None
    manufacturer: str | None = None

    # Whether the food appears in FNDDS and so has a complete
    # profile for the 65 FNDDS nutrients.
    survey: bool = False

    # Inedible parts and their percentage of the item
    refuse_desc: str | None = None
    refuse: float | None = None

    scientific_name: str | None = None

    nitrogen_factor: float | None = Field(
        None, description="Factor for converting nitrogen to protein"
    )
    protein_factor: float | None = Field(None, description="Calorie factor for protein")
    fat_factor: float | None = Field(None, description="Calorie factor for fat")
    carbohydrate_factor: float | None = Field(
        None, description="Calorie factor for carbohydrate"
    )


class FoodMatch(FoodRecord):
    """A food returned from search with its trigram similarity score."""

    score: float = Field(..., ge=0.0, le=1.0, description="Share of query trigrams matched")

    @classmethod
    def from_record(cls, record: FoodRecord, score: float) -> "FoodMatch":
        return cls(**record.model_dump(), score=score)


class Weight(BaseModel):
    """Household measure and gram weight for a food (WEIGHT)."""

    model_config = ConfigDict(frozen=True)

    food_id: str
    seq: str
    amount: float
    description: str
    grams: float
    data_points: float | None = None
    std_dev: float | None = None

    @property
    def key(self) -> str:
        return f"{self.food_id},{self.seq}"

    @property
    def seq_number(self) -> int:
        return int(self.seq)


class NutrientDef(BaseModel):
    """Nutrient definition (NUTR_DEF)."""

    model_config = ConfigDict(frozen=True)

    id: str
    units: str
    tag_name: str | None = None
    description: str
    num_dec: str
    sort: float | None = None


class NutrientData(BaseModel):
    """Nutrient value for a single food (NUT_DATA)."""

    model_config = ConfigDict(frozen=True)

    food_id: str
    nutrient_def_id: str
    value: float
    data_points: float | None = None
    std_error: float | None = None
    source_code_id: str | None = None

    @property
    def key(self) -> str:
        return f"{self.food_id},{self.nutrient_def_id}"


class Nutrient(BaseModel):
    """Nutrient value joined with its definition, as served to clients."""

    description: str
    value: float
    units: str
