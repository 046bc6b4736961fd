"""Record stores serving published food data."""

from .base import RecordReader, RecordStore
from .memory import MemoryRecordReader, MemoryRecordStore
from .mongo import MongoRecordReader, MongoRecordStore

__all__ = [
    "RecordReader",
    "RecordStore",
    "MemoryRecordReader",
    "MemoryRecordStore",
    "MongoRecordReader",
    "MongoRecordStore",
]
