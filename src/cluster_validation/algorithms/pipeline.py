"""
End-to-end validation pipeline.

encode -> split labels -> PCA -> k-means on reduced and raw features ->
signed labels -> mutual information / ARI -> optional permutation test.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Sequence
import numpy as np

from .clustering import (
    DEFAULT_MAX_ITER,
    DEFAULT_N_INIT,
    KMeansModel,
    adjusted_rand_index,
    fit_kmeans,
    predict_kmeans,
)
from .dimensionality_reduction import (
    PCAModel,
    cumulative_variance_ratio,
    explained_variance_ratio,
    fit_pca,
    transform_pca,
)
from .encoding import encode_table, split_labels
from .errors import as_feature_matrix
from .information import mutual_information
from .permutation import DEFAULT_N_PERMUTATIONS, PermutationTestResult, permutation_test
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

Array2D = np.ndarray

# Cluster index -> signed group label; any other index maps to 0.
SIGNED_LABELS = {0: -1, 1: 1}


@dataclass
class PipelineConfig:
    """Configuration for a validation run."""

    n_components: int = 3
    k: int = 2
    max_iter: int = DEFAULT_MAX_ITER
    n_init: int = DEFAULT_N_INIT
    seed: int = 0
    label_column: int = 0
    run_permutation_test: bool = False
    n_permutations: int = DEFAULT_N_PERMUTATIONS
    n_jobs: Optional[int] = None
    show_progress: bool = False


@dataclass
class ClusteringRun:
    """One k-means run and its agreement with the ground truth."""

    name: str
    model: KMeansModel
    assignment: np.ndarray
    signed_labels: np.ndarray
    mutual_information: float
    adjusted_rand_index: float
    permutation: Optional[PermutationTestResult] = None

    @property
    def inertia(self) -> float:
        return self.model.inertia


@dataclass
class PipelineResult:
    """Everything the presentation layer needs from a run."""

    pca: PCAModel
    transformed: Array2D
    truth: np.ndarray
    runs: Dict[str, ClusteringRun] = field(default_factory=dict)

    @property
    def explained_variance_ratio(self) -> np.ndarray:
        return explained_variance_ratio(self.pca)

    @property
    def cumulative_variance_ratio(self) -> np.ndarray:
        return cumulative_variance_ratio(self.pca)

    def summary(self) -> Dict[str, Any]:
        """Plain-dict summary for printing or serialising."""
        out: Dict[str, Any] = {
            "n_samples": int(len(self.truth)),
            "explained_variance_ratio": self.explained_variance_ratio.tolist(),
            "cumulative_variance_ratio": self.cumulative_variance_ratio.tolist(),
            "runs": {},
        }
        for name, run in self.runs.items():
            entry: Dict[str, Any] = {
                "inertia": run.inertia,
                "n_iter": run.model.n_iter,
                "mutual_information": run.mutual_information,
                "adjusted_rand_index": run.adjusted_rand_index,
            }
            if run.permutation is not None:
                entry["p_value"] = run.permutation.p_value
                entry["null_inertia_sample"] = run.permutation.sample()
                entry["n_failed_permutations"] = run.permutation.n_failed
            out["runs"][name] = entry
        return out


def to_signed_labels(assignment: Sequence[int]) -> np.ndarray:
    """Map cluster indices onto signed group labels (0 -> -1, 1 -> +1)."""
    return np.array([SIGNED_LABELS.get(int(i), 0) for i in assignment], dtype=int)


def _cluster_and_score(
    name: str,
    features: Array2D,
    truth: np.ndarray,
    cfg: PipelineConfig,
    permutation_source: Array2D,
    transform=None,
) -> ClusteringRun:
    model = fit_kmeans(
        features, cfg.k, max_iter=cfg.max_iter, n_init=cfg.n_init, seed=cfg.seed
    )
    assignment = predict_kmeans(model, features)
    signed = to_signed_labels(assignment)
    run = ClusteringRun(
        name=name,
        model=model,
        assignment=assignment,
        signed_labels=signed,
        mutual_information=mutual_information(signed, truth),
        adjusted_rand_index=adjusted_rand_index(signed, truth),
    )
    logger.info(
        "%s clustering: inertia %.4f after %d iterations, MI %.4f, ARI %.4f",
        name,
        run.inertia,
        model.n_iter,
        run.mutual_information,
        run.adjusted_rand_index,
    )

    if cfg.run_permutation_test:
        run.permutation = permutation_test(
            model.inertia,
            permutation_source,
            cfg.k,
            n_permutations=cfg.n_permutations,
            max_iter=cfg.max_iter,
            n_init=cfg.n_init,
            seed=cfg.seed,
            n_jobs=cfg.n_jobs,
            transform=transform,
            show_progress=cfg.show_progress,
        )
    return run


def run_pipeline_on_matrix(
    matrix: Array2D, cfg: Optional[PipelineConfig] = None
) -> PipelineResult:
    """
    Run the validation pipeline on an already-encoded table.

    The label column is split off, PCA is fit on the remaining features and
    k-means is fit independently on the projected ("pca") and the raw ("raw")
    features. For the "pca" run each permutation trial refits PCA on the
    shuffled raw rows and clusters that projection, the same way the observed
    run was produced.

    Args:
        matrix: Encoded table including the label column
        cfg: PipelineConfig; defaults are used when omitted

    Returns:
        PipelineResult

    Raises:
        ShapeError, ReductionError, ClusteringError: Propagated from the
            individual stages; the run is aborted
    """
    cfg = cfg or PipelineConfig()
    matrix = as_feature_matrix(matrix, name="table")
    features, truth = split_labels(matrix, cfg.label_column)
    logger.info(
        "Running pipeline on %d samples x %d features", features.shape[0], features.shape[1]
    )

    pca = fit_pca(features, cfg.n_components)
    transformed = transform_pca(pca, features)
    logger.info(
        "PCA explained variance ratio: %s",
        np.array2string(explained_variance_ratio(pca), precision=4),
    )

    def refit_and_project(X: Array2D) -> Array2D:
        return transform_pca(fit_pca(X, cfg.n_components), X)

    result = PipelineResult(pca=pca, transformed=transformed, truth=truth)
    result.runs["pca"] = _cluster_and_score(
        "pca", transformed, truth, cfg, features, transform=refit_and_project
    )
    result.runs["raw"] = _cluster_and_score("raw", features, truth, cfg, features)
    return result


def run_pipeline(
    rows: Iterable[Sequence[Optional[str]]], cfg: Optional[PipelineConfig] = None
) -> PipelineResult:
    """Encode a raw token table and run the validation pipeline on it."""
    return run_pipeline_on_matrix(encode_table(rows), cfg)
