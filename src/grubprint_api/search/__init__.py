"""Trigram tokenizer, postings index and fuzzy food search."""

from .index import SearchIndex, build_index
from .trigrams import trigrams

__all__ = ["SearchIndex", "build_index", "trigrams"]
