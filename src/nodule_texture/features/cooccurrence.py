"""Gray-level co-occurrence matrix construction.

Directions are numbered anticlockwise from the horizontal neighbour::

    4   3   2
     \\  |  /
      \\ | /
        X ----- 1

Each pixel at ``(row, col)`` is paired with the pixel at
``(row + row_step, col + col_step)``, where the steps are the direction's unit
offsets scaled by the distance. Matrices are indexed by header position, not by
gray value, and are normalized to a joint probability distribution.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np
from loguru import logger

from .header import gray_level_header, header_positions

# direction -> (row start, row step, col start, col step, col end trimmed), in units of distance
DIRECTION_OFFSETS: dict[int, tuple[int, int, int, int, bool]] = {
    1: (0, 0, 0, 1, True),
    2: (1, -1, 0, 1, True),
    3: (1, -1, 0, 0, False),
    4: (1, -1, 1, -1, False),
}


def _pixel_pairs(pixel_data: np.ndarray, direction: int, distance: int) -> tuple[np.ndarray, np.ndarray]:
    """Get the reference and neighbour pixels of every pair in the scan window."""
    if direction not in DIRECTION_OFFSETS:
        raise ValueError(f"Unknown direction: {direction}. Available directions: {sorted(DIRECTION_OFFSETS)}")
    if distance < 1:
        raise ValueError(f"Distance must be a positive integer, got {distance}")

    row_start, row_step, col_start, col_step, trim_cols = DIRECTION_OFFSETS[direction]
    row_start, row_step = row_start * distance, row_step * distance
    col_start, col_step = col_start * distance, col_step * distance

    height, width = pixel_data.shape
    row_end = height
    col_end = width - distance if trim_cols else width

    if row_end <= row_start or col_end <= col_start:
        empty = np.empty(0, dtype=pixel_data.dtype)
        return empty, empty

    reference = pixel_data[row_start:row_end, col_start:col_end]
    neighbour = pixel_data[row_start + row_step : row_end + row_step, col_start + col_step : col_end + col_step]
    return reference.ravel(), neighbour.ravel()


def cooccurrence_matrix(
    pixel_data: np.ndarray,
    header: np.ndarray,
    direction: int,
    distance: int,
) -> np.ndarray:
    """Build the normalized co-occurrence matrix for one direction and distance.

    Pairs where either pixel is missing from the header are skipped. When no pair
    is valid the division by zero is left to produce NaN cells.

    Args:
        pixel_data: 2D integer grid.
        header: Ascending gray levels, see :func:`gray_level_header`.
        direction: Neighbour direction, 1 to 4.
        distance: Pixel distance, at least 1.

    Returns:
        ``(K, K)`` float64 array where K is the header length.
    """
    pixel_data = np.asarray(pixel_data)
    reference, neighbour = _pixel_pairs(pixel_data, direction, distance)

    i_pos = header_positions(header, reference)
    j_pos = header_positions(header, neighbour)
    valid = (i_pos >= 0) & (j_pos >= 0)

    counts = np.zeros((header.size, header.size), dtype=np.float64)
    np.add.at(counts, (i_pos[valid], j_pos[valid]), 1)
    total_pairs = int(valid.sum())

    if total_pairs == 0:
        logger.warning(f"No valid pixel pairs at distance {distance}, direction {direction}")

    with np.errstate(divide="ignore", invalid="ignore"):
        return counts / total_pairs


@dataclass
class CoOccurrenceSet:
    """Co-occurrence matrices of one grid, keyed by (distance, direction).

    Attributes:
        header: Gray levels labelling both the rows and the columns of every matrix.
        matrices: ``(distance, direction) -> (K, K)`` normalized matrix.
    """

    header: np.ndarray
    matrices: dict[tuple[int, int], np.ndarray] = field(default_factory=dict)

    @property
    def distances(self) -> list[int]:
        return sorted({distance for distance, _ in self.matrices})

    @property
    def directions(self) -> list[int]:
        return sorted({direction for _, direction in self.matrices})

    def matrix(self, distance: int, direction: int) -> np.ndarray | None:
        """Get one matrix, or None if it was not computed."""
        return self.matrices.get((distance, direction))

    def matrices_at(self, distance: int) -> list[np.ndarray] | None:
        """Get the matrices of every direction at one distance, or None."""
        found = [self.matrices[key] for key in sorted(self.matrices) if key[0] == distance]
        return found or None


def perform_cooccurrence(
    pixel_data: np.ndarray,
    background_value: int = -2000,
    distances: Iterable[int] = (1, 2, 3, 4),
    directions: Iterable[int] = (1, 2, 3, 4),
) -> CoOccurrenceSet:
    """Build the co-occurrence matrix of every distance and direction for a grid."""
    pixel_data = np.asarray(pixel_data)
    header = gray_level_header(pixel_data, background_value)
    logger.debug(f"Gray-level header has {header.size} levels")

    result = CoOccurrenceSet(header=header)
    directions = list(directions)
    for distance in distances:
        for direction in directions:
            result.matrices[(distance, direction)] = cooccurrence_matrix(pixel_data, header, direction, distance)
    return result
