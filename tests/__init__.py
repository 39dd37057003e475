"""
Test suite for Cluster Validation.

This package contains all tests organized by component:
- test_algorithms/: Tests for encoding, PCA, k-means, validation and the pipeline
- test_utils/: Tests for loaders, logging and configuration
"""
