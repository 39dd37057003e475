"""
K-means clustering and partition agreement.

Provides Lloyd's k-means with k-means++ seeding drawn from an injectable
random generator, nearest-centroid prediction, and the Adjusted Rand Index.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np

from .errors import ClusteringError, ShapeError, as_feature_matrix
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

Array2D = np.ndarray

DEFAULT_MAX_ITER = 200
DEFAULT_N_INIT = 10


@dataclass(frozen=True)
class KMeansModel:
    """Fitted k-means solution."""

    centroids: np.ndarray  # (K, d)
    inertia: float
    n_iter: int
    converged: bool
    inertia_history: Tuple[float, ...] = ()

    def __post_init__(self):
        """Make the centroid array read-only."""
        self.centroids.setflags(write=False)

    @property
    def k(self) -> int:
        return int(self.centroids.shape[0])


# ------------------------------------------------------------------
# K-means++ initialisation & assignment helpers
# ------------------------------------------------------------------

def _kmeanspp_init(
    Z: np.ndarray, K: int, rng: np.random.Generator
) -> np.ndarray:
    """Return (K, d) initial centroids chosen by the k-means++ rule."""
    n, d = Z.shape
    centroids = np.empty((K, d), dtype=Z.dtype)
    idx = int(rng.integers(0, n))
    centroids[0] = Z[idx]

    for k in range(1, K):
        diffs = Z[:, None, :] - centroids[None, :k, :]  # (n, k, d)
        sq = np.sum(diffs ** 2, axis=2)  # (n, k)
        min_sq = sq.min(axis=1)  # (n,)
        total = min_sq.sum()
        if total == 0.0:
            centroids[k] = Z[int(rng.integers(0, n))]
        else:
            probs = min_sq / total
            centroids[k] = Z[int(rng.choice(n, p=probs))]
    return centroids


def _sq_distances(Z: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """(n, K) squared Euclidean distances from every row to every centroid."""
    diffs = Z[:, None, :] - centroids[None, :, :]
    return np.einsum("nkd,nkd->nk", diffs, diffs)


def _assign(Z: np.ndarray, centroids: np.ndarray) -> Tuple[np.ndarray, float]:
    """Assign each row of *Z* to its nearest centroid.

    Distances are computed directly (not via the dot-product expansion) so
    exact ties stay exact; ``argmin`` then picks the lowest centroid index.

    Returns:
        Tuple of (labels, inertia) for the assignment
    """
    dists = _sq_distances(Z, centroids)
    labels = np.argmin(dists, axis=1)
    inertia = float(dists[np.arange(Z.shape[0]), labels].sum())
    return labels, inertia


def _update_centroids(Z: np.ndarray, labels: np.ndarray, K: int) -> np.ndarray:
    """Recompute centroids as cluster means; an empty cluster is an error."""
    counts = np.bincount(labels, minlength=K)
    empty = np.flatnonzero(counts == 0)
    if len(empty):
        raise ClusteringError(
            f"Cluster(s) {empty.tolist()} became empty; no recovery policy applies"
        )
    centroids = np.zeros((K, Z.shape[1]), dtype=np.float64)
    np.add.at(centroids, labels, Z)
    return centroids / counts[:, None]


def _lloyd(
    Z: np.ndarray, K: int, max_iter: int, rng: np.random.Generator
) -> KMeansModel:
    """Run a single k-means initialisation to convergence or max_iter."""
    centroids = _kmeanspp_init(Z, K, rng)
    labels, inertia = _assign(Z, centroids)
    history = [inertia]

    converged = False
    n_iter = 0
    for t in range(1, max_iter + 1):
        n_iter = t
        centroids = _update_centroids(Z, labels, K)
        new_labels, inertia = _assign(Z, centroids)
        history.append(inertia)
        if np.array_equal(new_labels, labels):
            converged = True
            break
        labels = new_labels

    return KMeansModel(
        centroids=centroids,
        inertia=inertia,
        n_iter=n_iter,
        converged=converged,
        inertia_history=tuple(history),
    )


def fit_kmeans(
    X: Array2D,
    K: int,
    *,
    max_iter: int = DEFAULT_MAX_ITER,
    n_init: int = DEFAULT_N_INIT,
    seed: int = 0,
    rng: Optional[np.random.Generator] = None,
) -> KMeansModel:
    """
    Standard (Lloyd) k-means with k-means++ initialisation.

    Each initialisation alternates nearest-centroid assignment (squared
    Euclidean distance, ties to the lowest index) and mean updates until the
    assignment stops changing or *max_iter* updates have run. The best of
    *n_init* initialisations (lowest inertia, earliest on ties) is returned.
    A cluster emptying in any one initialisation fails the whole fit, even
    if the other initialisations would have succeeded.

    Args:
        X: Input data of shape (n_samples, n_features)
        K: Number of clusters
        max_iter: Maximum centroid updates per initialisation
        n_init: Number of independent k-means++ initialisations
        seed: Random seed, used when *rng* is not given
        rng: Random generator to draw initialisations from

    Returns:
        KMeansModel with centroids, inertia and the per-step objective

    Raises:
        ShapeError: If X is empty, ragged or non-finite
        ClusteringError: If K is not in [1, n_samples] or a cluster empties
            in any initialisation
        ValueError: If max_iter or n_init is < 1
    """
    Z = as_feature_matrix(X)
    n = Z.shape[0]

    if K < 1:
        raise ClusteringError(f"K must be >= 1, got {K}")
    if K > n:
        raise ClusteringError(f"K ({K}) cannot exceed number of samples ({n})")
    if max_iter < 1:
        raise ValueError(f"max_iter must be >= 1, got {max_iter}")
    if n_init < 1:
        raise ValueError(f"n_init must be >= 1, got {n_init}")

    if rng is None:
        rng = np.random.default_rng(seed)

    best: Optional[KMeansModel] = None
    for _ in range(n_init):
        model = _lloyd(Z, K, max_iter, rng)
        if best is None or model.inertia < best.inertia:
            best = model

    if not best.converged:
        logger.debug(
            "k-means (K=%d) stopped at max_iter=%d without converging", K, max_iter
        )
    return best


def kmeans_inertia(model: KMeansModel) -> float:
    """Sum of squared distances to the assigned centroids at the fit."""
    return float(model.inertia)


def predict_kmeans(model: KMeansModel, X: Array2D) -> np.ndarray:
    """
    Assign each row of X to the nearest of the model's fixed centroids.

    Raises:
        ShapeError: If X does not have the model's dimensionality
    """
    Z = as_feature_matrix(X)
    if Z.shape[1] != model.centroids.shape[1]:
        raise ShapeError(
            f"Model centroids have {model.centroids.shape[1]} features; got {Z.shape[1]}"
        )
    labels, _ = _assign(Z, model.centroids)
    return labels.astype(int)


def adjusted_rand_index(labels_a: np.ndarray, labels_b: np.ndarray) -> float:
    """
    Compute Adjusted Rand Index between two clusterings.

    ARI measures agreement between two clusterings, adjusted for chance.
    Returns 1.0 for identical clusterings, ~0.0 for random agreement.

    Args:
        labels_a: First clustering labels
        labels_b: Second clustering labels

    Returns:
        ARI score in [-1, 1], typically in [0, 1]

    Raises:
        ShapeError: If the label sequences differ in length or are empty
    """
    labels_a = np.asarray(labels_a)
    labels_b = np.asarray(labels_b)
    if labels_a.shape != labels_b.shape or labels_a.size == 0:
        raise ShapeError(
            f"Label sequences must be non-empty and aligned; got {labels_a.shape} and {labels_b.shape}"
        )
    _, a = np.unique(labels_a, return_inverse=True)
    _, b = np.unique(labels_b, return_inverse=True)
    n = len(labels_a)

    contingency = np.zeros((a.max() + 1, b.max() + 1), dtype=np.int64)
    np.add.at(contingency, (a, b), 1)

    sum_comb = (contingency * (contingency - 1) / 2.0).sum()
    sum_comb_c = (contingency.sum(axis=1) * (contingency.sum(axis=1) - 1) / 2.0).sum()
    sum_comb_k = (contingency.sum(axis=0) * (contingency.sum(axis=0) - 1) / 2.0).sum()
    comb_n = n * (n - 1) / 2.0

    if comb_n == 0:
        return 1.0

    expected_index = (sum_comb_c * sum_comb_k) / comb_n
    max_index = 0.5 * (sum_comb_c + sum_comb_k)
    denom = max_index - expected_index
    if denom == 0:
        return 1.0
    return float((sum_comb - expected_index) / denom)
