"""Gray-level header: the index space shared by every co-occurrence matrix of a grid."""

from __future__ import annotations

import numpy as np


def gray_level_header(pixel_data: np.ndarray, background_value: int = -2000) -> np.ndarray:
    """Get the sorted distinct gray levels of a pixel grid.

    The sorted pixel values are walked with a cursor that starts at the background
    value, and every value that differs from the cursor is accepted. The background
    run is therefore skipped only when it is the smallest value in the grid; when
    lower values are present the background value is kept as an ordinary level.

    Args:
        pixel_data: 2D integer grid.
        background_value: Value marking pixels outside the segmentation.

    Returns:
        1D int64 array of gray levels in ascending order.
    """
    values = np.sort(np.asarray(pixel_data, dtype=np.int64).ravel())

    levels: list[int] = []
    cursor = background_value
    for value in values.tolist():
        if value != cursor:
            cursor = value
            levels.append(value)

    return np.array(levels, dtype=np.int64)


def header_positions(header: np.ndarray, values: np.ndarray) -> np.ndarray:
    """Map gray values to their positions in the header, -1 where absent."""
    values = np.asarray(values, dtype=np.int64)
    if header.size == 0:
        return np.full(values.shape, -1, dtype=np.int64)

    # header is strictly ascending, so a binary search finds each value
    positions = np.searchsorted(header, values)
    clipped = np.minimum(positions, header.size - 1)
    found = header[clipped] == values
    return np.where(found, clipped, -1)
