"""Pydantic models for API schemas."""

from .food import (
    FoodGroup,
    FoodMatch,
    FoodRecord,
    Nutrient,
    NutrientData,
    NutrientDef,
    Weight,
)

__all__ = [
    "FoodGroup",
    "FoodMatch",
    "FoodRecord",
    "Nutrient",
    "NutrientData",
    "NutrientDef",
    "Weight",
]
