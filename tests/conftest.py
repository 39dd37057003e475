"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test modules.
"""

import numpy as np
import pytest


@pytest.fixture
def separated_table():
    """
    Encoded 10 x 6 table: label column + 5 features.

    Rows 0-4 are all +1 (label +1), rows 5-9 are all -1 (label -1).
    """
    upper = np.ones((5, 6))
    lower = -np.ones((5, 6))
    return np.vstack([upper, lower])


@pytest.fixture
def separated_tokens():
    """Raw-token version of ``separated_table``."""
    rows = [["republican"] + ["y"] * 5 for _ in range(5)]
    rows += [["democrat"] + ["n"] * 5 for _ in range(5)]
    return rows


@pytest.fixture
def block_features():
    """
    40 x 6 feature matrix with two noisy blocks of opposite vote patterns.

    Every row holds three ~+1 and three ~-1 values, so shuffling within a
    row destroys the block structure but keeps the row's values.
    """
    rng = np.random.default_rng(7)
    pattern = np.array([1.0, 1.0, 1.0, -1.0, -1.0, -1.0])
    X = np.vstack([np.tile(pattern, (20, 1)), np.tile(-pattern, (20, 1))])
    return X + rng.normal(scale=0.05, size=X.shape)


@pytest.fixture
def vote_csv(tmp_path):
    """Small vote CSV with a header row, party first."""
    path = tmp_path / "votes.csv"
    lines = ["party,v1,v2,v3,v4"]
    for i in range(6):
        lines.append("republican,y,y,n,y" if i % 2 == 0 else "democrat,n,n,y,?")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
