"""
K-means over eleven overlapping interval features.

The caller searches for the smallest k for which every feature lies within
epsilon * length of its cluster center, making `effort` seeding attempts per
k. The features form four natural groups.
"""

import pytest

from shiftmeans import KMeans

from data_gen import Features, FEATS, SEQ


def cluster_features(feats, epsilon, effort, random_state=1):
    km = KMeans(Features(feats), random_state=random_state)

    cut = [(epsilon * len(f)) ** 2 for f in feats]

    for k in range(1, len(feats) + 1):
        for _ in range(effort):
            km.seed(k)
            km.cluster()
            centers = km.centers()
            if all(
                sum((c - x) ** 2 for c, x in zip(centers[v.cluster].coordinates, v.coordinates)) < cut[i]
                for i, v in enumerate(km.values())
            ):
                return km

    raise AssertionError("no acceptable clustering found")


def test_four_feature_groups():
    km = cluster_features(FEATS, epsilon=0.15, effort=5)

    assert len(km.centers()) == 4
    groups = sorted(sorted(c) for c in km.clusters())
    assert groups == [[0, 1], [2, 3, 4, 5], [6, 7], [8, 9, 10]]
    assert sorted(c.count for c in km.centers()) == [2, 2, 3, 4]

    assert int(km.total()) == 4747787
    assert sorted(km.within()) == pytest.approx([0.5, 2500.0, 3829.333333333333, 15820.75])

    between = 1 - sum(km.within()) / km.total()
    assert between == pytest.approx(0.995335, abs=1e-6)


def test_same_seed_same_result():
    a = cluster_features(FEATS, epsilon=0.15, effort=5, random_state=7)
    b = cluster_features(FEATS, epsilon=0.15, effort=5, random_state=7)
    assert a.centers() == b.centers()
    assert a.within() == b.within()


def test_abutting_features_need_one_cluster_each():
    km = cluster_features(SEQ, epsilon=0.2, effort=5)
    assert len(km.centers()) == 10
    assert km.within() == [0.0] * 10
    assert int(km.total()) == 1650000
