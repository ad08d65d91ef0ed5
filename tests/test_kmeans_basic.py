# tests/test_kmeans_basic.py
"""
K-means engine behavior.

Covers:
- two well-separated groups end up in two clusters
- partition and fixed-point invariants after convergence
- empty training set, misuse, invalid configuration
- determinism under random_state, iteration cap, parameters, verbose output
"""

from __future__ import annotations

import pytest
import torch

from clusterfetch import KMeans
from clusterfetch.assignments import HardAssignment

from utils import as_partition, is_partition
from data_gen import make_access_profiles


TWO_GROUPS = [[0.0, 0.0], [0.0, 0.0], [10.0, 10.0], [10.0, 10.0]]


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4, 5])
def test_kmeans_separates_two_groups(seed):
    km = KMeans(n_clusters=2, train_data=TWO_GROUPS, test_data=TWO_GROUPS, dim=2,
                random_state=seed)

    assert km.train() is True
    assert km.converged_
    assert as_partition(km.members_) == {frozenset({0, 1}), frozenset({2, 3})}

    prototypes = sorted(tuple(p) for p in km.prototypes_.tolist())
    assert prototypes == [(0.0, 0.0), (10.0, 10.0)]


def test_kmeans_partition_and_fixed_point(seed_all):
    train, test, _, _ = make_access_profiles(n_per=15, dim=24, n_profiles=3, seed=seed_all)
    km = KMeans(n_clusters=4, train_data=train, test_data=test, dim=24,
                max_iter=200, random_state=11)

    assert km.train()
    assert km.converged_
    assert is_partition(km.members_, train.shape[0])
    assert torch.all(km.labels_ >= 0)

    # Every vector sits in the cluster with the nearest prototype
    X = km.train_data
    nearest = HardAssignment().compute_assignments(X, km.prototypes_)
    assert torch.equal(nearest, km.labels_)

    # Every prototype is the mean of its members (zero for an empty cluster)
    for k, members in enumerate(km.members_):
        if members:
            expected = X[sorted(members)].mean(dim=0)
        else:
            expected = torch.zeros(24)
        assert torch.allclose(km.prototypes_[k], expected, atol=1e-6)


def test_kmeans_more_clusters_than_points():
    X = [[1.0, 1.0], [3.0, 3.0]]
    km = KMeans(n_clusters=5, train_data=X, test_data=X, dim=2, random_state=0)

    assert km.train()
    assert is_partition(km.members_, 2)
    for cluster in km.clusters:
        if not cluster.current_members:
            assert torch.equal(cluster.prototype, torch.zeros(2))


def test_kmeans_empty_training_set():
    km = KMeans(n_clusters=3, train_data=[], test_data=[[1.0, 0.0]], dim=2)

    assert km.train() is False
    assert not km.fitted_
    with pytest.raises(RuntimeError, match="trained before calling test"):
        km.test()
    with pytest.raises(RuntimeError, match="tested before calling report"):
        km.report()


def test_kmeans_test_before_train_raises():
    km = KMeans(n_clusters=2, train_data=TWO_GROUPS, test_data=TWO_GROUPS, dim=2)
    with pytest.raises(RuntimeError):
        km.test()
    with pytest.raises(RuntimeError):
        km.threshold_sweep([0.5])


@pytest.mark.parametrize("kwargs, error", [
    ({"n_clusters": 0}, ValueError),
    ({"n_clusters": -2}, ValueError),
    ({"n_clusters": 1.5}, TypeError),
    ({"n_clusters": 2, "dim": 0}, ValueError),
    ({"n_clusters": 2, "dim": 3}, ValueError),
    ({"n_clusters": 2, "max_iter": 0}, ValueError),
    ({"n_clusters": 2, "prefetch_threshold": float("nan")}, ValueError),
])
def test_kmeans_invalid_config(kwargs, error):
    params = {"train_data": TWO_GROUPS, "test_data": TWO_GROUPS, "dim": 2}
    params.update(kwargs)
    with pytest.raises(error):
        KMeans(**params)


def test_kmeans_determinism(seed_all):
    train, test, _, _ = make_access_profiles(n_per=10, dim=15, n_profiles=3, seed=seed_all)

    runs = []
    for _ in range(2):
        km = KMeans(n_clusters=3, train_data=train, test_data=test, dim=15,
                    max_iter=200, random_state=123)
        km.train()
        runs.append(km)

    assert runs[0].members_ == runs[1].members_
    assert torch.equal(runs[0].prototypes_, runs[1].prototypes_)
    assert runs[0].n_iter_ == runs[1].n_iter_


def test_kmeans_iteration_cap_warns(seed_all):
    train, test, _, _ = make_access_profiles(n_per=20, dim=30, n_profiles=3, seed=seed_all)
    km = KMeans(n_clusters=3, train_data=train, test_data=test, dim=30,
                max_iter=1, random_state=0)

    with pytest.warns(UserWarning, match="Failed to converge after 1 iterations"):
        assert km.train()

    assert km.n_iter_ == 1
    assert not km.converged_
    assert km.fitted_
    assert is_partition(km.members_, train.shape[0])


def test_kmeans_history_and_retrain():
    km = KMeans(n_clusters=2, train_data=TWO_GROUPS, test_data=TWO_GROUPS, dim=2,
                random_state=0)
    km.train()

    assert len(km.history_) == km.n_iter_
    assert km.history_[-1].converged
    assert km.history_[-1].metadata["n_moved"] == 0
    assert km.history_[-1].metadata["n_changed_clusters"] == 0

    # A second run starts from a new random partition and converges again
    km.train()
    assert km.converged_
    assert as_partition(km.members_) == {frozenset({0, 1}), frozenset({2, 3})}


def test_kmeans_params():
    km = KMeans(n_clusters=2, train_data=TWO_GROUPS, test_data=TWO_GROUPS, dim=2,
                max_iter=50, random_state=3)
    params = km.get_params()
    assert params["n_clusters"] == 2
    assert params["max_iter"] == 50
    assert params["prefetch_threshold"] == 0.5
    assert params["random_state"] == 3

    km.set_params(prefetch_threshold=0.25, verbose=1)
    assert km.prefetch_threshold == 0.25
    assert km.verbose == 1

    with pytest.raises(ValueError, match="cannot be changed"):
        km.set_params(n_clusters=3)
    with pytest.raises(ValueError, match="Invalid parameter"):
        km.set_params(n_components=3)


def test_kmeans_set_params_validates():
    km = KMeans(n_clusters=2, train_data=TWO_GROUPS, test_data=TWO_GROUPS, dim=2,
                max_iter=50, random_state=3)

    with pytest.raises(ValueError, match="max_iter"):
        km.set_params(max_iter=0)
    with pytest.raises(ValueError, match="max_iter"):
        km.set_params(max_iter=-3)
    with pytest.raises(TypeError, match="max_iter"):
        km.set_params(max_iter=2.5)
    with pytest.raises(TypeError, match="verbose"):
        km.set_params(verbose="loud")
    with pytest.raises(ValueError, match="NaN"):
        km.set_params(prefetch_threshold=float("nan"))
    assert km.max_iter == 50

    km.set_params(max_iter=None)
    assert km.max_iter is None
    assert km.train() is True


def test_kmeans_verbose_output(capsys):
    km = KMeans(n_clusters=2, train_data=TWO_GROUPS, test_data=TWO_GROUPS, dim=2,
                verbose=2, random_state=0)
    km.train()
    km.test()

    out = capsys.readouterr().out
    assert "Iteration   0" in out
    assert "Converged at iteration" in out
    assert "hitrate" in out


def test_kmeans_silent_by_default(capsys):
    km = KMeans(n_clusters=2, train_data=TWO_GROUPS, test_data=TWO_GROUPS, dim=2,
                random_state=0)
    km.train()
    km.test()
    assert capsys.readouterr().out == ""
