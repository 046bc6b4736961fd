"""API routes."""

from . import foods, nutrients, weights

__all__ = ["foods", "nutrients", "weights"]
