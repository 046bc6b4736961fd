"""Bulk loaders for USDA source files."""

from .sr_legacy import load_dataset

__all__ = ["load_dataset"]
