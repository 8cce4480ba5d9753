"""Reduce per-matrix Haralick values to one value per feature."""

from __future__ import annotations

from collections.abc import MutableMapping, Sequence

import numpy as np


def average_over_directions(raw: np.ndarray) -> np.ndarray:
    """Average a ``[distance x direction x feature]`` array over directions.

    Returns:
        ``[distance x feature]`` array.
    """
    raw = np.asarray(raw, dtype=np.float64)
    return raw.sum(axis=1) / raw.shape[1]


def minimum_over_distances(averaged: np.ndarray) -> np.ndarray:
    """Take the minimum of each feature across distances.

    The running minimum starts unset (NaN), so a NaN distance is skipped unless every
    distance is NaN. ``np.fmin`` has exactly these semantics.

    Returns:
        ``[feature]`` array.
    """
    averaged = np.asarray(averaged, dtype=np.float64)
    return np.fmin.reduce(averaged, axis=0)


def write_features(
    values: np.ndarray,
    feature_set: MutableMapping[str, float],
    names: Sequence[str],
) -> MutableMapping[str, float]:
    """Overwrite or insert each named value in a nodule's feature map."""
    if len(values) != len(names):
        raise ValueError(f"Got {len(values)} values for {len(names)} feature names")
    for name, value in zip(names, values):
        feature_set[name] = float(value)
    return feature_set
