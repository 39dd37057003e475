"""
Algorithm Core Library - encoding, PCA, k-means and cluster validation.

This module provides core algorithm implementations with minimal dependencies,
separate from scripts. Designed for reuse and testing.
"""

from .errors import ShapeError, ReductionError, ClusteringError
from .encoding import encode_token, encode_table, split_labels
from .dimensionality_reduction import (
    PCAModel,
    fit_pca,
    transform_pca,
    inverse_transform_pca,
    explained_variance_ratio,
    cumulative_variance_ratio,
)
from .clustering import (
    KMeansModel,
    fit_kmeans,
    predict_kmeans,
    kmeans_inertia,
    adjusted_rand_index,
)
from .permutation import (
    PermutationTestResult,
    permute_within_rows,
    permutation_p_value,
    permutation_test,
)
from .information import entropy, mutual_information
from .pipeline import (
    PipelineConfig,
    PipelineResult,
    ClusteringRun,
    to_signed_labels,
    run_pipeline,
    run_pipeline_on_matrix,
)

__all__ = [
    # Errors
    "ShapeError",
    "ReductionError",
    "ClusteringError",
    # Encoding
    "encode_token",
    "encode_table",
    "split_labels",
    # Dimensionality reduction
    "PCAModel",
    "fit_pca",
    "transform_pca",
    "inverse_transform_pca",
    "explained_variance_ratio",
    "cumulative_variance_ratio",
    # Clustering
    "KMeansModel",
    "fit_kmeans",
    "predict_kmeans",
    "kmeans_inertia",
    "adjusted_rand_index",
    # Validation
    "PermutationTestResult",
    "permute_within_rows",
    "permutation_p_value",
    "permutation_test",
    "entropy",
    "mutual_information",
    # Pipeline orchestration
    "PipelineConfig",
    "PipelineResult",
    "ClusteringRun",
    "to_signed_labels",
    "run_pipeline",
    "run_pipeline_on_matrix",
]
