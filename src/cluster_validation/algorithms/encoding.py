"""
Categorical encoding for yes/no/abstain survey records.

Maps raw tokens onto the signed scale {-1.0, 0.0, +1.0} and splits the
ground-truth column off the encoded table.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from .errors import ShapeError

Array2D = np.ndarray

AFFIRMATIVE_TOKENS = frozenset({"y", "yes", "republican"})
NEGATIVE_TOKENS = frozenset({"n", "no", "democrat"})

AFFIRMATIVE = 1.0
NEGATIVE = -1.0
NEUTRAL = 0.0


def encode_token(token: Optional[str]) -> float:
    """
    Encode a single raw token.

    Matching is case-insensitive and ignores surrounding whitespace.
    Unknown tokens, abstain markers ("?") and missing values map to 0.0.
    """
    if token is None:
        return NEUTRAL
    key = str(token).strip().lower()
    if key in AFFIRMATIVE_TOKENS:
        return AFFIRMATIVE
    if key in NEGATIVE_TOKENS:
        return NEGATIVE
    return NEUTRAL


def encode_table(rows: Iterable[Sequence[Optional[str]]]) -> Array2D:
    """
    Encode a table of raw tokens into a feature matrix.

    Args:
        rows: Iterable of token rows, all of the same length

    Returns:
        Float64 array of shape (n_rows, n_columns)

    Raises:
        ShapeError: If the table is empty or rows differ in length
    """
    encoded = [[encode_token(t) for t in row] for row in rows]
    if not encoded:
        raise ShapeError("Cannot encode an empty table")
    width = len(encoded[0])
    if width == 0:
        raise ShapeError("Rows must contain at least one column")
    for i, row in enumerate(encoded):
        if len(row) != width:
            raise ShapeError(
                f"Row {i} has {len(row)} columns; expected {width}"
            )
    return np.asarray(encoded, dtype=np.float64)


def split_labels(
    matrix: Array2D, label_column: int = 0
) -> Tuple[Array2D, np.ndarray]:
    """
    Split the ground-truth column off an encoded table.

    Args:
        matrix: Encoded table of shape (n_rows, n_columns)
        label_column: Index of the label column (negative indices allowed)

    Returns:
        Tuple of (features, labels) where features is a copy with the label
        column removed and labels is an int array of length n_rows

    Raises:
        ShapeError: If the column index is out of range or no feature
            columns would remain
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim != 2:
        raise ShapeError(f"Expected a 2-D table; got shape {matrix.shape}")
    n_cols = matrix.shape[1]
    if not -n_cols <= label_column < n_cols:
        raise ShapeError(
            f"label_column {label_column} out of range for {n_cols} columns"
        )
    if n_cols < 2:
        raise ShapeError("Table needs a label column and at least one feature column")
    col = label_column % n_cols
    labels = matrix[:, col].astype(int)
    features = np.delete(matrix, col, axis=1)
    return features, labels
