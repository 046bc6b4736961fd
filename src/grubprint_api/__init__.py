"""USDA nutrient database API with in-process trigram food search."""

__version__ = "1.0.0"
