"""Business logic services."""

from .foods import FoodService

__all__ = ["FoodService"]
