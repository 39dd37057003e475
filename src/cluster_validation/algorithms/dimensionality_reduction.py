"""
Dimensionality reduction for encoded feature matrices.

Provides PCA via SVD of the centered data, with a fitted model that can
project (and reconstruct) any matrix with the same column count.
"""

from __future__ import annotations

from dataclasses import dataclass
import numpy as np

from .errors import ReductionError, ShapeError, as_feature_matrix

Array2D = np.ndarray

# Column variance at or below this counts as a constant column.
VARIANCE_EPS = 1e-12


@dataclass(frozen=True)
class PCAModel:
    """Fitted PCA basis. Arrays are private copies of the fit results."""

    components: np.ndarray  # (n_components, n_features), orthonormal rows
    explained_variance: np.ndarray  # (n_components,)
    explained_variance_ratio: np.ndarray  # (n_components,)
    singular_values: np.ndarray  # (n_components,)
    mean: np.ndarray  # (n_features,)
    n_samples: int

    def __post_init__(self):
        """Make the stored arrays read-only."""
        for arr in (
            self.components,
            self.explained_variance,
            self.explained_variance_ratio,
            self.singular_values,
            self.mean,
        ):
            arr.setflags(write=False)

    @property
    def n_components(self) -> int:
        return int(self.components.shape[0])

    @property
    def n_features(self) -> int:
        return int(self.components.shape[1])


def _flip_signs(Vt: np.ndarray) -> np.ndarray:
    """Flip each row so its largest-magnitude loading is positive."""
    idx = np.argmax(np.abs(Vt), axis=1)
    signs = np.sign(Vt[np.arange(Vt.shape[0]), idx])
    signs[signs == 0] = 1.0
    return Vt * signs[:, None]


def fit_pca(X: Array2D, n_components: int) -> PCAModel:
    """
    Fit PCA on X using SVD of the centered matrix.

    Centers the data, computes the SVD and keeps the top n_components right
    singular vectors as the projection basis. Component signs are fixed so
    the result is deterministic for a given input.

    Args:
        X: Input data of shape (n_samples, n_features)
        n_components: Number of principal components to keep

    Returns:
        PCAModel with basis, per-component variance and centering mean

    Raises:
        ShapeError: If X is empty, ragged or non-finite
        ReductionError: If n_components is not in [1, n_features], there are
            fewer rows than components (or fewer than two rows), or any
            feature column is constant
    """
    X = as_feature_matrix(X)
    n, d = X.shape

    if n_components < 1:
        raise ReductionError(f"n_components must be >= 1, got {n_components}")
    if n_components > d:
        raise ReductionError(
            f"n_components ({n_components}) cannot exceed number of features ({d})"
        )
    if n < n_components:
        raise ReductionError(
            f"n_components ({n_components}) cannot exceed number of samples ({n})"
        )
    if n < 2:
        raise ReductionError("PCA needs at least two samples to estimate variance")

    mu = X.mean(axis=0)
    Xc = X - mu
    constant = np.flatnonzero(Xc.var(axis=0) <= VARIANCE_EPS)
    if len(constant):
        raise ReductionError(
            f"Feature column(s) {constant.tolist()} have zero variance; "
            "principal directions are undefined"
        )
    _, S, Vt = np.linalg.svd(Xc, full_matrices=False)

    all_variance = S**2 / (n - 1)
    total_variance = float(all_variance.sum())

    kk = int(n_components)
    components = _flip_signs(Vt[:kk])
    variance = all_variance[:kk]
    return PCAModel(
        components=components.copy(),
        explained_variance=variance.copy(),
        explained_variance_ratio=variance / total_variance,
        singular_values=S[:kk].copy(),
        mean=mu.copy(),
        n_samples=n,
    )


def _check_columns(model: PCAModel, X: Array2D) -> None:
    if X.shape[1] != model.n_features:
        raise ShapeError(
            f"Model was fit on {model.n_features} features; got {X.shape[1]}"
        )


def transform_pca(model: PCAModel, X: Array2D) -> Array2D:
    """Center X with the model mean and project onto the stored basis."""
    X = as_feature_matrix(X)
    _check_columns(model, X)
    return (X - model.mean) @ model.components.T


def inverse_transform_pca(model: PCAModel, Z: Array2D) -> Array2D:
    """
    Map projected coordinates back into the original feature space.

    Exact (up to rounding) when the model keeps every component.
    """
    Z = as_feature_matrix(Z, name="Z")
    if Z.shape[1] != model.n_components:
        raise ShapeError(
            f"Model has {model.n_components} components; got {Z.shape[1]} columns"
        )
    return Z @ model.components + model.mean


def explained_variance_ratio(model: PCAModel) -> np.ndarray:
    """Per-component variance fractions, ranked by captured variance."""
    return model.explained_variance_ratio.copy()


def cumulative_variance_ratio(model: PCAModel) -> np.ndarray:
    """Running total of explained_variance_ratio."""
    return np.cumsum(model.explained_variance_ratio)
