"""Haralick texture features for segmented lung nodules.

Features come from gray-level co-occurrence matrices built at 4 distances and in
4 directions:
1. Gray-level header (index space of every matrix)
2. Co-occurrence matrices (joint probability of neighbouring gray levels)
3. Haralick statistics (11 features per matrix)
4. Aggregation (average over directions, minimum over distances)
"""

from __future__ import annotations

from .aggregate import average_over_directions, minimum_over_distances, write_features
from .cooccurrence import CoOccurrenceSet, cooccurrence_matrix, perform_cooccurrence
from .extractor import HaralickConfig, HaralickExtractor, extract_features
from .haralick import FEATURE_NAMES, haralick_features
from .header import gray_level_header, header_positions

__all__ = [
    "FEATURE_NAMES",
    "CoOccurrenceSet",
    "HaralickConfig",
    "HaralickExtractor",
    "average_over_directions",
    "cooccurrence_matrix",
    "extract_features",
    "gray_level_header",
    "haralick_features",
    "header_positions",
    "minimum_over_distances",
    "perform_cooccurrence",
    "write_features",
]
