"""
Tests for k-means clustering and partition agreement.
"""

import numpy as np
import pytest

from cluster_validation.algorithms.clustering import (
    _kmeanspp_init,
    adjusted_rand_index,
    fit_kmeans,
    kmeans_inertia,
    predict_kmeans,
)
from cluster_validation.algorithms.errors import ClusteringError, ShapeError


def _blobs(rng, K=3, per=20, d=4, spread=0.3):
    centers = rng.standard_normal((K, d)) * 5
    X = np.vstack([centers[k] + rng.standard_normal((per, d)) * spread for k in range(K)])
    truth = np.repeat(np.arange(K), per)
    return X, truth


# ------------------------------------------------------------------
# fit_kmeans
# ------------------------------------------------------------------


def test_fit_kmeans_basic():
    rng = np.random.default_rng(42)
    X, truth = _blobs(rng)

    model = fit_kmeans(X, 3, seed=0)
    labels = predict_kmeans(model, X)

    assert model.centroids.shape == (3, 4)
    assert labels.shape == (60,)
    assert set(np.unique(labels)) == {0, 1, 2}
    assert adjusted_rand_index(labels, truth) == pytest.approx(1.0)
    assert model.converged
    assert 1 <= model.n_iter <= 200


def test_inertia_matches_assignment():
    rng = np.random.default_rng(0)
    X = rng.standard_normal((40, 5))
    model = fit_kmeans(X, 4, seed=1)
    labels = predict_kmeans(model, X)
    expected = float(np.sum((X - model.centroids[labels]) ** 2))
    assert kmeans_inertia(model) == pytest.approx(expected)


def test_inertia_history_non_increasing():
    rng = np.random.default_rng(3)
    X = rng.standard_normal((80, 3))
    model = fit_kmeans(X, 5, n_init=1, seed=3)
    history = np.array(model.inertia_history)
    assert len(history) == model.n_iter + 1
    assert np.all(np.diff(history) <= 1e-9)
    assert history[-1] == pytest.approx(model.inertia)


def test_single_cluster_is_column_mean():
    rng = np.random.default_rng(4)
    X = rng.standard_normal((30, 6))
    model = fit_kmeans(X, 1)
    np.testing.assert_allclose(model.centroids[0], X.mean(axis=0))
    total_ss = float(np.sum((X - X.mean(axis=0)) ** 2))
    assert model.inertia == pytest.approx(total_ss)
    assert model.inertia == pytest.approx(X.var(axis=0).sum() * X.shape[0])


def test_same_seed_same_inertia():
    rng = np.random.default_rng(5)
    X = rng.standard_normal((50, 4))
    a = fit_kmeans(X, 3, seed=11)
    b = fit_kmeans(X, 3, seed=11)
    assert a.inertia == b.inertia
    np.testing.assert_array_equal(a.centroids, b.centroids)


def test_injected_generator_is_used():
    rng = np.random.default_rng(6)
    X = rng.standard_normal((50, 4))
    a = fit_kmeans(X, 3, rng=np.random.default_rng(123))
    b = fit_kmeans(X, 3, rng=np.random.default_rng(123), seed=999)
    assert a.inertia == b.inertia


def test_best_of_n_init_not_worse():
    rng = np.random.default_rng(7)
    X = rng.standard_normal((60, 2))
    single = fit_kmeans(X, 4, n_init=1, rng=np.random.default_rng(0))
    multi = fit_kmeans(X, 4, n_init=10, rng=np.random.default_rng(0))
    # The first initialisation of both draws is identical.
    assert multi.inertia <= single.inertia


def test_separated_scenario_exact(separated_table):
    X = separated_table[:, 1:]
    model = fit_kmeans(X, 2)
    labels = predict_kmeans(model, X)
    assert model.inertia == pytest.approx(0.0, abs=1e-12)
    assert len(set(labels[:5])) == 1
    assert len(set(labels[5:])) == 1
    assert labels[0] != labels[5]


def test_max_iter_caps_iterations():
    rng = np.random.default_rng(8)
    X = rng.standard_normal((200, 2))
    model = fit_kmeans(X, 8, max_iter=1, n_init=1)
    assert model.n_iter == 1
    labels = predict_kmeans(model, X)
    expected = float(np.sum((X - model.centroids[labels]) ** 2))
    assert model.inertia == pytest.approx(expected)


def test_empty_cluster_raises():
    """Fewer distinct points than K forces a duplicate centroid that empties."""
    X = np.array([[0.0, 0.0]] * 3 + [[1.0, 1.0]] * 3)
    with pytest.raises(ClusteringError, match="became empty"):
        fit_kmeans(X, 3)


def test_fit_kmeans_validation():
    X = np.random.default_rng(9).standard_normal((10, 3))

    with pytest.raises(ClusteringError, match="K.*cannot exceed"):
        fit_kmeans(X, 11)
    with pytest.raises(ClusteringError, match="K must be >= 1"):
        fit_kmeans(X, 0)
    with pytest.raises(ValueError, match="max_iter"):
        fit_kmeans(X, 2, max_iter=0)
    with pytest.raises(ValueError, match="n_init"):
        fit_kmeans(X, 2, n_init=0)
    with pytest.raises(ShapeError):
        fit_kmeans(np.array([[np.inf, 0.0]]), 1)


# ------------------------------------------------------------------
# predict_kmeans
# ------------------------------------------------------------------


def test_predict_new_data_does_not_mutate_model():
    rng = np.random.default_rng(10)
    X, _ = _blobs(rng, K=2)
    model = fit_kmeans(X, 2)
    before = model.centroids.copy()

    labels = predict_kmeans(model, model.centroids + 0.01)
    np.testing.assert_array_equal(labels, [0, 1])
    np.testing.assert_array_equal(model.centroids, before)
    with pytest.raises(ValueError):
        model.centroids[0, 0] = 0.0


def test_predict_ties_go_to_lowest_index():
    rng = np.random.default_rng(11)
    X = np.array([[-1.0], [-1.0], [1.0], [1.0]])
    model = fit_kmeans(X, 2, rng=rng)
    midpoint = np.array([[0.0]])
    assert predict_kmeans(model, midpoint)[0] == 0


def test_predict_dimension_mismatch():
    model = fit_kmeans(np.random.default_rng(12).standard_normal((10, 3)), 2)
    with pytest.raises(ShapeError, match="3 features"):
        predict_kmeans(model, np.zeros((2, 4)))


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def test_kmeanspp_init_picks_distinct_points():
    rng = np.random.default_rng(13)
    X = np.array([[0.0, 0.0]] * 5 + [[10.0, 10.0]] * 5)
    centroids = _kmeanspp_init(X, 2, rng)
    assert not np.array_equal(centroids[0], centroids[1])


def test_adjusted_rand_index():
    """Test ARI computation."""
    labels_a = np.array([0, 0, 1, 1, 2, 2])
    labels_b = np.array([1, 1, 0, 0, 2, 2])

    assert adjusted_rand_index(labels_a, labels_b) == pytest.approx(1.0)

    labels_c = np.array([0, 1, 0, 1, 0, 1])
    ari_mixed = adjusted_rand_index(labels_a, labels_c)
    assert -1.0 <= ari_mixed <= 1.0


def test_adjusted_rand_index_matches_sklearn():
    metrics = pytest.importorskip("sklearn.metrics")
    rng = np.random.default_rng(14)
    a = rng.integers(0, 3, size=50)
    b = rng.integers(-1, 2, size=50)
    assert adjusted_rand_index(a, b) == pytest.approx(metrics.adjusted_rand_score(a, b))


def test_adjusted_rand_index_length_mismatch():
    with pytest.raises(ShapeError):
        adjusted_rand_index([0, 1], [0, 1, 1])


def test_one_failed_initialisation_fails_the_fit(monkeypatch):
    from cluster_validation.algorithms import clustering

    real_lloyd = clustering._lloyd
    calls = {"n": 0}

    def first_run_empties(Z, K, max_iter, rng):
        calls["n"] += 1
        if calls["n"] == 1:
            raise ClusteringError("Cluster(s) [1] became empty")
        return real_lloyd(Z, K, max_iter, rng)

    monkeypatch.setattr(clustering, "_lloyd", first_run_empties)
    X = np.random.default_rng(15).standard_normal((20, 2))

    with pytest.raises(ClusteringError, match="became empty"):
        fit_kmeans(X, 2, n_init=3)
    assert calls["n"] == 1
