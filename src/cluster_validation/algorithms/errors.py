"""
Error categories raised by the algorithm layer.

All three subclass ``ValueError`` so callers that only care about bad input
can keep catching ``ValueError``.
"""

from __future__ import annotations

import numpy as np


class ShapeError(ValueError):
    """Input is empty, ragged, non-finite, or too small for the operation."""


class ReductionError(ValueError):
    """PCA cannot be fit (bad component count or degenerate variance)."""


class ClusteringError(ValueError):
    """K-means cannot produce a valid partition."""


def as_feature_matrix(X, *, name: str = "X") -> np.ndarray:
    """
    Validate and coerce input into a float64 feature matrix.

    Returns a fresh copy so callers never alias the caller's buffer.

    Raises:
        ShapeError: If the input is not 2-D, has no rows or columns,
            or contains non-finite values
    """
    try:
        arr = np.array(X, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ShapeError(f"{name} is not a rectangular numeric table: {e}") from e
    if arr.ndim != 2:
        raise ShapeError(f"{name} must be 2-D (rows, columns); got shape {arr.shape}")
    if arr.shape[0] < 1 or arr.shape[1] < 1:
        raise ShapeError(f"{name} must be non-empty; got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ShapeError(f"{name} contains NaN or infinite values")
    return arr
