"""
k-d tree, bounded distance heap and pivot selection.

Radius and nearest queries are checked against brute force on random data.
"""

from __future__ import annotations

import math

import numpy as np
import pytest
import torch

from shiftmeans.spatial import KDTree, DistKeeper, median_of_randoms, partition


def _brute_radius(X: np.ndarray, q: np.ndarray, r2: float):
    d2 = ((X - q) ** 2).sum(axis=1)
    idx = np.nonzero(d2 <= r2)[0]
    return sorted(idx.tolist(), key=lambda i: (d2[i], i)), d2


# ----------------------------
# DistKeeper
# ----------------------------

def test_dist_keeper_orders_by_distance():
    keeper = DistKeeper(radius_squared=10.0)
    for item, dist in [("c", 3.0), ("a", 1.0), ("far", 11.0), ("b", 2.0)]:
        keeper.keep(item, dist)
    assert keeper.results() == [("a", 1.0), ("b", 2.0), ("c", 3.0)]


def test_dist_keeper_evicts_farthest_when_full():
    keeper = DistKeeper(capacity=2)
    keeper.keep("x", 5.0)
    keeper.keep("y", 1.0)
    assert keeper.full
    assert keeper.max_distance == 5.0
    assert keeper.keep("z", 2.0) is True
    assert keeper.keep("w", 9.0) is False
    assert [item for item, _ in keeper.results()] == ["y", "z"]


def test_dist_keeper_ties_keep_first_offered():
    keeper = DistKeeper(capacity=2)
    for item in ["first", "second", "third"]:
        keeper.keep(item, 1.0)
    assert [item for item, _ in keeper.results()] == ["first", "second"]


def test_dist_keeper_includes_boundary():
    keeper = DistKeeper(radius_squared=4.0)
    assert keeper.keep("edge", 4.0) is True
    assert keeper.keep("out", 4.0000001) is False


def test_dist_keeper_rejects_bad_capacity():
    with pytest.raises(ValueError):
        DistKeeper(capacity=0)


# ----------------------------
# Pivoting
# ----------------------------

def test_median_of_randoms_exact_for_small_sets():
    coords = [(5.0,), (1.0,), (3.0,), (4.0,), (2.0,)]
    indices = list(range(5))
    pos = median_of_randoms(coords, indices, 0, n_randoms=100)
    assert coords[indices[pos]][0] == 3.0


def test_partition_splits_on_pivot_value():
    coords = [(5.0, 0.0), (1.0, 0.0), (3.0, 0.0), (3.0, 1.0), (2.0, 0.0)]
    indices = [0, 1, 2, 3, 4]
    pivot_index, below, above = partition(coords, indices, 0, 2)
    assert pivot_index == 2
    assert below == [1, 4]
    assert above == [0, 3]


# ----------------------------
# KDTree
# ----------------------------

@pytest.mark.parametrize("n,d", [(1, 2), (50, 2), (300, 3), (200, 5)])
def test_radius_query_matches_brute_force(rng, n, d):
    X = rng.normal(size=(n, d))
    tree = KDTree(torch.from_numpy(X), random_state=0)
    assert len(tree) == n

    for _ in range(10):
        q = rng.normal(size=d)
        r2 = float(rng.uniform(0.1, 2.0))
        expected, d2 = _brute_radius(X, q, r2)
        hits = tree.nearest_within_radius(q.tolist(), r2)
        assert sorted(h.index for h in hits) == sorted(expected)
        dists = [h.distance for h in hits]
        assert dists == sorted(dists)
        for h in hits:
            assert h.distance == pytest.approx(d2[h.index])


def test_radius_query_capacity_keeps_nearest(rng):
    X = rng.normal(size=(100, 2))
    tree = KDTree(X.tolist(), random_state=1)
    q = np.zeros(2)
    expected, _ = _brute_radius(X, q, math.inf)
    hits = tree.nearest_within_radius(q, math.inf, capacity=7)
    assert [h.index for h in hits] == expected[:7]


def test_nearest_matches_brute_force(rng):
    X = rng.uniform(-10, 10, size=(250, 3))
    tree = KDTree(torch.from_numpy(X), payloads=[f"p{i}" for i in range(250)], random_state=2)
    for _ in range(20):
        q = rng.uniform(-10, 10, size=3)
        neighbor, dist = tree.nearest(q)
        d2 = ((X - q) ** 2).sum(axis=1)
        assert neighbor.index == int(np.argmin(d2))
        assert neighbor.payload == f"p{neighbor.index}"
        assert dist == pytest.approx(d2.min())


def test_nearest_exact_duplicate_has_zero_distance():
    tree = KDTree([[0.0, 0.0], [1.0, 2.0], [3.0, 4.0]], random_state=0)
    neighbor, dist = tree.nearest([1.0, 2.0])
    assert dist == 0
    assert neighbor.coordinates == (1.0, 2.0)


def test_empty_tree_and_insert(rng):
    tree = KDTree(dimension=2)
    assert len(tree) == 0
    assert tree.nearest([0.0, 0.0]) == (None, math.inf)
    assert tree.nearest_within_radius([0.0, 0.0], 1.0) == []

    X = rng.normal(size=(80, 2))
    for i, p in enumerate(X):
        assert tree.insert(p, payload=i) == i
    assert len(tree) == 80

    q = np.array([0.3, -0.2])
    expected, _ = _brute_radius(X, q, 0.5)
    hits = tree.nearest_within_radius(q, 0.5)
    assert sorted(h.payload for h in hits) == sorted(expected)


def test_insert_into_built_tree(rng):
    X = rng.normal(size=(40, 2))
    tree = KDTree(X[:20], random_state=3)
    for p in X[20:]:
        tree.insert(p)
    expected, _ = _brute_radius(X, np.zeros(2), 1.0)
    hits = tree.nearest_within_radius(np.zeros(2), 1.0)
    assert sorted(h.index for h in hits) == sorted(expected)


def test_sorted_insertions_do_not_recurse():
    tree = KDTree(dimension=1)
    for i in range(5000):
        tree.insert([float(i)])
    assert tree.depth() == 5000
    neighbor, dist = tree.nearest([4999.2])
    assert neighbor.index == 4999
    assert len(tree.nearest_within_radius([10.0], 4.0)) == 5


def test_iteration_visits_every_point(rng):
    X = rng.normal(size=(60, 3))
    tree = KDTree(X, random_state=4)
    assert sorted(nb.index for nb in tree) == list(range(60))


def test_construction_is_reproducible(rng):
    X = rng.normal(size=(500, 2))
    a = [nb.index for nb in KDTree(X, n_randoms=15, random_state=7)]
    b = [nb.index for nb in KDTree(X, n_randoms=15, random_state=7)]
    assert a == b


def test_tree_depth_is_sublinear(rng):
    X = rng.normal(size=(2000, 2))
    tree = KDTree(X, n_randoms=25, random_state=5)
    assert tree.depth() < 60


def test_dimension_mismatch_rejected():
    tree = KDTree([[0.0, 1.0]])
    with pytest.raises(ValueError):
        tree.nearest([0.0, 1.0, 2.0])
    with pytest.raises(ValueError):
        KDTree([[0.0, 1.0], [1.0]])
    with pytest.raises(ValueError):
        KDTree()
