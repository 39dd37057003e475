"""
Permutation test for k-means inertia.

The null distribution is built by shuffling the values inside every row of
the feature matrix, which destroys cross-feature structure while keeping
each row's value multiset, then re-fitting k-means on each permuted copy.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional
import numpy as np
from tqdm import tqdm

from .clustering import DEFAULT_MAX_ITER, DEFAULT_N_INIT, fit_kmeans
from .errors import ClusteringError, ReductionError, as_feature_matrix
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

Array2D = np.ndarray
Transform = Callable[[Array2D], Array2D]

DEFAULT_N_PERMUTATIONS = 200


@dataclass(frozen=True)
class PermutationTestResult:
    """Outcome of a permutation test."""

    observed_inertia: float
    null_inertias: np.ndarray  # inertias of the successful trials, in trial order
    p_value: float
    n_permutations: int
    n_failed: int = 0

    @property
    def n_valid(self) -> int:
        return self.n_permutations - self.n_failed

    def sample(self, n: int = 10) -> List[float]:
        """First *n* null inertias, for log output."""
        return [float(v) for v in self.null_inertias[:n]]


def permute_within_rows(X: Array2D, rng: np.random.Generator) -> Array2D:
    """Return a copy of X with the values of every row independently shuffled."""
    X = np.asarray(X, dtype=np.float64)
    return rng.permuted(X, axis=1)


def permutation_p_value(observed: float, null_values: np.ndarray) -> float:
    """(count(null <= observed) + 1) / (len(null) + 1)."""
    null_values = np.asarray(null_values, dtype=np.float64)
    count = int(np.sum(null_values <= observed))
    return (count + 1.0) / (len(null_values) + 1.0)


def _run_trial(
    X: Array2D,
    K: int,
    seed_seq: np.random.SeedSequence,
    max_iter: int,
    n_init: int,
    transform: Optional[Transform],
) -> Optional[float]:
    """Permute, optionally transform, fit. Returns None when the fit fails."""
    rng = np.random.default_rng(seed_seq)
    permuted = permute_within_rows(X, rng)
    try:
        if transform is not None:
            permuted = transform(permuted)
        model = fit_kmeans(permuted, K, max_iter=max_iter, n_init=n_init, rng=rng)
    except (ClusteringError, ReductionError) as e:
        logger.debug("Permutation trial failed: %s", e)
        return None
    return model.inertia


def permutation_test(
    observed_inertia: float,
    X: Array2D,
    K: int,
    *,
    n_permutations: int = DEFAULT_N_PERMUTATIONS,
    max_iter: int = DEFAULT_MAX_ITER,
    n_init: int = DEFAULT_N_INIT,
    seed: int = 0,
    n_jobs: Optional[int] = None,
    transform: Optional[Transform] = None,
    show_progress: bool = False,
) -> PermutationTestResult:
    """
    Estimate how unusual an observed k-means inertia is under the null.

    Each trial owns a child seed spawned from *seed*, its own permuted copy
    of X and its own fitted model, so results do not depend on *n_jobs*.
    Trials whose transform or fit raises ReductionError or ClusteringError
    are counted in ``n_failed`` and left out of the p-value.

    Args:
        observed_inertia: Inertia of the already-fitted model under test
        X: Feature matrix the permutations are drawn from (n_samples, n_features)
        K: Number of clusters for each null fit
        n_permutations: Number of null datasets
        max_iter: Passed to fit_kmeans
        n_init: Passed to fit_kmeans
        seed: Root seed for the trial generators
        n_jobs: Worker threads; 1 runs serially, None lets the executor decide
        transform: Applied to each permuted matrix before fitting, e.g. a
            PCA refit and projection, so null inertias are computed the same
            way as the observed one
        show_progress: Show a tqdm progress bar

    Returns:
        PermutationTestResult with null inertias and the p-value

    Raises:
        ValueError: If n_permutations < 1
        ClusteringError: If every trial fails
    """
    if n_permutations < 1:
        raise ValueError(f"n_permutations must be >= 1, got {n_permutations}")
    X = as_feature_matrix(X)
    child_seeds = np.random.SeedSequence(seed).spawn(n_permutations)

    def trial(seed_seq: np.random.SeedSequence) -> Optional[float]:
        return _run_trial(X, K, seed_seq, max_iter, n_init, transform)

    if n_jobs == 1:
        results = map(trial, child_seeds)
        scores = list(tqdm(results, total=n_permutations, disable=not show_progress))
    else:
        with ThreadPoolExecutor(max_workers=n_jobs) as executor:
            results = executor.map(trial, child_seeds)
            scores = list(tqdm(results, total=n_permutations, disable=not show_progress))

    null_inertias = np.array([s for s in scores if s is not None], dtype=np.float64)
    n_failed = n_permutations - len(null_inertias)
    if len(null_inertias) == 0:
        raise ClusteringError(f"All {n_permutations} permutation trials failed to cluster")
    if n_failed:
        logger.warning("%d of %d permutation trials failed", n_failed, n_permutations)

    p_value = permutation_p_value(observed_inertia, null_inertias)
    logger.info(
        "Permutation test: observed inertia %.4f, p-value %.4f over %d trials",
        observed_inertia,
        p_value,
        len(null_inertias),
    )
    return PermutationTestResult(
        observed_inertia=float(observed_inertia),
        null_inertias=null_inertias,
        p_value=p_value,
        n_permutations=n_permutations,
        n_failed=n_failed,
    )
