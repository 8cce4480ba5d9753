"""Haralick texture extraction for segmented nodules.

The pipeline for one nodule is: gray-level header, one co-occurrence matrix per
(distance, direction), 11 Haralick values per matrix, average over directions, then
minimum over distances. The result is written into the nodule's feature map.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

import numpy as np
from joblib import Parallel, delayed
from loguru import logger
from tqdm import tqdm

from .aggregate import average_over_directions, minimum_over_distances, write_features
from .cooccurrence import DIRECTION_OFFSETS, cooccurrence_matrix
from .haralick import FEATURE_NAMES, haralick_features
from .header import gray_level_header

if TYPE_CHECKING:
    from omegaconf import DictConfig


class SegmentedNodule(Protocol):
    segmented_pixel_data: np.ndarray
    haralick: dict[str, float]


@dataclass
class HaralickConfig:
    """Configuration for Haralick feature extraction.

    Attributes:
        distances: Pixel distances for the co-occurrence matrices.
        directions: Neighbour directions (1 to 4) for the co-occurrence matrices.
        background_value: Pixel value marking "outside the segmentation".
        n_jobs: Parallel jobs for the (distance, direction) matrices (-1 = all CPUs).
    """

    distances: list[int] = field(default_factory=lambda: [1, 2, 3, 4])
    directions: list[int] = field(default_factory=lambda: [1, 2, 3, 4])
    background_value: int = -2000
    n_jobs: int = 1

    def __post_init__(self) -> None:
        if not self.distances:
            raise ValueError("At least one distance is required")
        if any(distance < 1 for distance in self.distances):
            raise ValueError(f"Distances must be positive integers, got {self.distances}")
        unknown = [direction for direction in self.directions if direction not in DIRECTION_OFFSETS]
        if not self.directions or unknown:
            raise ValueError(f"Directions must be drawn from {sorted(DIRECTION_OFFSETS)}, got {self.directions}")

    @classmethod
    def from_dict(cls, cfg: dict) -> HaralickConfig:
        """Create HaralickConfig from a dictionary."""
        return cls(
            distances=list(cfg.get("distances", [1, 2, 3, 4])),
            directions=list(cfg.get("directions", [1, 2, 3, 4])),
            background_value=int(cfg.get("background_value", -2000)),
            n_jobs=int(cfg.get("n_jobs", 1)),
        )

    @classmethod
    def from_hydra(cls, cfg: DictConfig) -> HaralickConfig:
        """Create HaralickConfig from Hydra config."""
        features_cfg = cfg.get("features", {})
        return cls.from_dict(dict(features_cfg))


def _matrix_features(pixel_data: np.ndarray, header: np.ndarray, distance: int, direction: int) -> list[float]:
    matrix = cooccurrence_matrix(pixel_data, header, direction, distance)
    return list(haralick_features(matrix).values())


class HaralickExtractor:
    """Extract Haralick texture features from segmented nodules.

    Example:
        >>> extractor = HaralickExtractor()
        >>> nodule = Nodule(segmented_pixel_data=pixels)
        >>> extractor.extract_features(nodule)
        >>> print(nodule.haralick["contrast"])
    """

    def __init__(self, config: HaralickConfig | None = None) -> None:
        """Initialize the extractor.

        Args:
            config: Extraction configuration. Uses defaults if None.
        """
        self.config = config or HaralickConfig()

    @property
    def feature_names(self) -> list[str]:
        return list(FEATURE_NAMES)

    @property
    def feature_dim(self) -> int:
        return len(FEATURE_NAMES)

    def raw_features(self, pixel_data: np.ndarray) -> np.ndarray:
        """Compute the Haralick values of every co-occurrence matrix of a grid.

        Args:
            pixel_data: 2D integer grid.

        Returns:
            ``[distance x direction x feature]`` array, axes ordered as in the config.
        """
        pixel_data = np.asarray(pixel_data)
        if pixel_data.ndim != 2:
            raise ValueError(f"Expected a 2D pixel grid, got shape {pixel_data.shape}")

        header = gray_level_header(pixel_data, self.config.background_value)
        logger.debug(f"Gray-level header has {header.size} levels")
        pairs = [(distance, direction) for distance in self.config.distances for direction in self.config.directions]

        if self.config.n_jobs == 1:
            rows = [_matrix_features(pixel_data, header, distance, direction) for distance, direction in pairs]
        else:
            # Jobs only read the shared grid and header
            rows = Parallel(n_jobs=self.config.n_jobs)(
                delayed(_matrix_features)(pixel_data, header, distance, direction) for distance, direction in pairs
            )

        return np.array(rows, dtype=np.float64).reshape(
            len(self.config.distances), len(self.config.directions), len(FEATURE_NAMES)
        )

    def compute(self, pixel_data: np.ndarray) -> dict[str, float]:
        """Compute the final Haralick features of a grid without touching any nodule."""
        averaged = average_over_directions(self.raw_features(pixel_data))
        final = minimum_over_distances(averaged)
        return dict(zip(FEATURE_NAMES, final.tolist()))

    def extract_features(self, nodule: SegmentedNodule) -> dict[str, float]:
        """Compute a nodule's Haralick features and write them into ``nodule.haralick``.

        Existing entries are overwritten, so repeated calls give the same map.

        Returns:
            The nodule's feature map.
        """
        values = self.compute(nodule.segmented_pixel_data)
        write_features(np.array(list(values.values())), nodule.haralick, FEATURE_NAMES)

        non_finite = [name for name, value in values.items() if not np.isfinite(value)]
        if non_finite:
            nodule_id = getattr(nodule, "nodule_id", "")
            logger.warning(f"Non-finite Haralick features for nodule {nodule_id!r}: {non_finite}")
        return nodule.haralick

    def extract_batch(
        self,
        nodules: Sequence[SegmentedNodule],
        n_jobs: int = 1,
        show_progress: bool = True,
    ) -> list[dict[str, float]]:
        """Extract features for many nodules.

        Features are computed in parallel and then written into each nodule in the
        calling process.

        Args:
            nodules: Nodules to process.
            n_jobs: Number of parallel jobs (-1 = all CPUs).
            show_progress: Whether to show progress bar.

        Returns:
            Feature maps, in the order of ``nodules``.
        """
        grids = [nodule.segmented_pixel_data for nodule in nodules]

        if n_jobs == 1 or len(grids) <= 1:
            iterator = tqdm(grids, desc="Extracting Haralick features") if show_progress else grids
            results = [self.compute(grid) for grid in iterator]
        else:
            results = Parallel(n_jobs=n_jobs)(
                delayed(self.compute)(grid)
                for grid in tqdm(grids, desc="Extracting Haralick features", disable=not show_progress)
            )

        for nodule, values in zip(nodules, results):
            write_features(np.array(list(values.values())), nodule.haralick, FEATURE_NAMES)

        logger.info(f"Extracted Haralick features for {len(nodules)} nodules")
        return [nodule.haralick for nodule in nodules]


def extract_features(nodule: SegmentedNodule, config: HaralickConfig | None = None) -> dict[str, float]:
    """Compute a nodule's Haralick features with a one-off extractor."""
    return HaralickExtractor(config).extract_features(nodule)
