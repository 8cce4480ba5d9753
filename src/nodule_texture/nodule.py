"""Nodule entity consumed by the texture extractor."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

# Pixel value marking "outside the segmented region"
BACKGROUND_VALUE = -2000


@dataclass
class Nodule:
    """A segmented nodule and its Haralick feature map.

    Attributes:
        segmented_pixel_data: 2D integer grid covering the nodule's bounding box,
            with ``BACKGROUND_VALUE`` outside the segmentation.
        haralick: Feature name -> value map, filled in by the extractor.
        nodule_id: Optional identifier used in log messages.
    """

    segmented_pixel_data: np.ndarray
    haralick: dict[str, float] = field(default_factory=dict)
    nodule_id: str = ""

    def __post_init__(self) -> None:
        self.segmented_pixel_data = np.asarray(self.segmented_pixel_data)
        if self.segmented_pixel_data.ndim != 2:
            raise ValueError(f"Expected a 2D pixel grid, got shape {self.segmented_pixel_data.shape}")
