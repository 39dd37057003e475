"""
Cluster Validation - Core Package

Checks whether an unsupervised clustering of categorical survey records
recovers a known binary grouping.

This package provides:
- Algorithm layer: encoding, PCA, k-means, permutation test, mutual information
- Pipeline orchestration tying the algorithms together
- Utilities for logging and loading delimited vote tables
"""

__version__ = "0.1.0"

from . import algorithms
from . import utils
from .algorithms import PipelineConfig, PipelineResult, run_pipeline

__all__ = [
    "PipelineConfig",
    "PipelineResult",
    "run_pipeline",
    "algorithms",
    "utils",
]
