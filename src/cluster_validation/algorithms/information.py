"""
Information-theoretic agreement between two categorical label sequences.
"""

from __future__ import annotations

from collections import Counter
from typing import Sequence, Tuple
import numpy as np

from .errors import ShapeError


def _aligned(a: Sequence, b: Sequence) -> Tuple[np.ndarray, np.ndarray]:
    a = np.asarray(a).ravel()
    b = np.asarray(b).ravel()
    if len(a) != len(b):
        raise ShapeError(f"Label sequences differ in length: {len(a)} vs {len(b)}")
    if len(a) == 0:
        raise ShapeError("Label sequences must be non-empty")
    return a, b


def entropy(labels: Sequence) -> float:
    """Empirical Shannon entropy of a label sequence, in nats."""
    labels = np.asarray(labels).ravel()
    if len(labels) == 0:
        raise ShapeError("Label sequence must be non-empty")
    _, counts = np.unique(labels, return_counts=True)
    p = counts / len(labels)
    return float(-np.sum(p * np.log(p)))


def mutual_information(labels: Sequence, truth: Sequence) -> float:
    """
    Empirical mutual information between two aligned label sequences.

    MI = sum_{l,t} P(l,t) * ln(P(l,t) / (P(l) * P(t)))

    Only observed (l, t) pairs contribute, so 0 * ln(0) never arises.
    The result is symmetric in its arguments, 0 for independent sequences
    and equal to entropy(labels) when both sequences are the same.

    Args:
        labels: Cluster labels, one per sample
        truth: Ground-truth labels, aligned with *labels*

    Returns:
        Mutual information in nats (>= 0)

    Raises:
        ShapeError: If the sequences are empty or differ in length
    """
    a, b = _aligned(labels, truth)
    n = float(len(a))

    label_counts = Counter(a.tolist())
    truth_counts = Counter(b.tolist())
    joint_counts = Counter(zip(a.tolist(), b.tolist()))

    mi = 0.0
    for (l, t), c in joint_counts.items():
        p_lt = c / n
        p_l = label_counts[l] / n
        p_t = truth_counts[t] / n
        mi += p_lt * np.log(p_lt / (p_l * p_t))

    # Rounding can leave a tiny negative value for independent sequences.
    return float(max(mi, 0.0))
