"""
Tests for vote table loading.
"""

import numpy as np
import pytest

from cluster_validation.algorithms.encoding import encode_table
from cluster_validation.algorithms.errors import ShapeError
from cluster_validation.utils.votes_loader import load_vote_table


def test_load_vote_table_skips_header(vote_csv):
    rows = load_vote_table(vote_csv)
    assert len(rows) == 6
    assert rows[0] == ["republican", "y", "y", "n", "y"]
    assert rows[1] == ["democrat", "n", "n", "y", "?"]


def test_load_vote_table_without_header(vote_csv):
    rows = load_vote_table(vote_csv, has_header=False)
    assert len(rows) == 7
    assert rows[0][0] == "party"


def test_loaded_rows_encode(vote_csv):
    X = encode_table(load_vote_table(vote_csv))
    np.testing.assert_array_equal(X[1], [-1.0, -1.0, -1.0, 1.0, 0.0])


def test_load_vote_table_skips_blank_lines(tmp_path):
    path = tmp_path / "votes.csv"
    path.write_text("party,v1\n\nrepublican,y\n , \ndemocrat,n\n", encoding="utf-8")
    assert load_vote_table(path) == [["republican", "y"], ["democrat", "n"]]


def test_load_vote_table_other_delimiter(tmp_path):
    path = tmp_path / "votes.tsv"
    path.write_text("party\tv1\ndemocrat\tn\n", encoding="utf-8")
    assert load_vote_table(path, delimiter="\t") == [["democrat", "n"]]


def test_load_vote_table_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_vote_table(tmp_path / "missing.csv")


def test_load_vote_table_header_only(tmp_path):
    path = tmp_path / "votes.csv"
    path.write_text("party,v1\n", encoding="utf-8")
    with pytest.raises(ShapeError, match="No data rows"):
        load_vote_table(path)


def test_load_vote_table_ragged(tmp_path):
    path = tmp_path / "votes.csv"
    path.write_text("party,v1,v2\nrepublican,y,n\ndemocrat,n\n", encoding="utf-8")
    with pytest.raises(ShapeError, match="data row 1 has 2 columns"):
        load_vote_table(path)
