"""Haralick statistics of a normalized co-occurrence matrix.

Scientific Rationale:
- Contrast, homogeneity and inverse variance describe how far mass sits from the
  diagonal, i.e. how much neighbouring pixels differ
- Energy, entropy and maximum probability describe how concentrated the joint
  distribution is; solid nodules tend to be more uniform than part-solid ones
- Correlation, variance and cluster tendency describe the spread around the
  row and column means
"""

from __future__ import annotations

import numpy as np

FEATURE_NAMES: tuple[str, ...] = (
    "contrast",
    "correlation",
    "energy",
    "homogeneity",
    "entropy",
    "thirdOrderMoment",
    "inverseVariance",
    "sumAverage",
    "variance",
    "clusterTendency",
    "maximumProbability",
)


def _maximum_probability(p: np.ndarray) -> float:
    # Running max seeded from the first cell; NaN never compares larger
    seed = p[0, 0]
    larger = p[p > seed]
    return float(larger.max()) if larger.size else float(seed)


def haralick_features(matrix: np.ndarray) -> dict[str, float]:
    """Compute the 11 Haralick features of one co-occurrence matrix.

    Only correlation (zero variance), homogeneity (``1 + |i - j|``), entropy
    (``p == 0``) and inverse variance (``i == j``) are guarded. A matrix built
    from zero pixel pairs holds NaN cells, which flow into the results unchanged.
    An empty matrix has no distribution at all and every feature is NaN.

    Args:
        matrix: ``(K, K)`` normalized co-occurrence matrix.

    Returns:
        Dictionary keyed by ``FEATURE_NAMES``, in that order.
    """
    p = np.asarray(matrix, dtype=np.float64)
    if p.size == 0:
        return dict.fromkeys(FEATURE_NAMES, float("nan"))

    i, j = np.indices(p.shape, dtype=np.float64)

    # Pass 1: row and column means
    imean = np.sum(i * p)
    jmean = np.sum(j * p)

    # Pass 2: row and column variances
    ivar = np.sum((i - imean) ** 2 * p)
    jvar = np.sum((j - jmean) ** 2 * p)

    # Pass 3: per-cell accumulation
    if ivar != 0.0 and jvar != 0.0:
        correlation = np.sum((i - imean) * (j - jmean) * p / np.sqrt(ivar * jvar))
    else:
        correlation = 0.0

    spread = np.abs(i - j) + 1.0
    nonzero_spread = spread != 0.0
    nonzero = p != 0.0
    off_diagonal = i != j

    features = {
        "contrast": np.sum((i - j) ** 2 * p),
        "correlation": correlation,
        "energy": np.sum(p**2),
        "homogeneity": np.sum(p[nonzero_spread] / spread[nonzero_spread]),
        "entropy": np.sum(-(p[nonzero] * np.log(p[nonzero]))),
        "thirdOrderMoment": np.sum(p * (i - j) ** 3),
        "inverseVariance": np.sum(p[off_diagonal] / (i - j)[off_diagonal] ** 2),
        "sumAverage": np.sum(0.5 * (i * p + j * p)),
        "variance": np.sum(0.5 * (p * (i - imean) ** 2 + p * (j - jmean) ** 2)),
        "clusterTendency": np.sum(p * (i - imean + j - jmean) ** 2),
        "maximumProbability": _maximum_probability(p),
    }
    return {name: float(features[name]) for name in FEATURE_NAMES}
