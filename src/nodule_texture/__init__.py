"""Haralick texture features for segmented lung nodules."""

from __future__ import annotations

from .features import FEATURE_NAMES, HaralickConfig, HaralickExtractor, extract_features
from .nodule import BACKGROUND_VALUE, Nodule

__all__ = [
    "BACKGROUND_VALUE",
    "FEATURE_NAMES",
    "HaralickConfig",
    "HaralickExtractor",
    "Nodule",
    "extract_features",
]
