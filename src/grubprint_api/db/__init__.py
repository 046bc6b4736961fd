"""Database module - MongoDB connection, dataset snapshots and record stores."""

from .dataset import FoodDataset
from .mongo import MongoConnection

__all__ = ["FoodDataset", "MongoConnection"]
