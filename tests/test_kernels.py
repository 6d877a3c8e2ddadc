"""
Uniform and TruncatedGaussian kernel strategies.
"""

from __future__ import annotations

import math

import numpy as np
import pytest
import torch

from shiftmeans import (
    Uniform,
    TruncatedGaussian,
    TensorSource,
    InvalidArgumentError,
    DegenerateGeometryError,
)
from shiftmeans.kernels import BaseKernel


def test_modes_start_at_points():
    X = [[0.0, 0.0], [1.0, 0.0], [10.0, 10.0]]
    k = Uniform(2.0)
    k.init(TensorSource(X))
    assert k.n_modes == 3
    assert k.modes.tolist() == X


def test_modes_is_a_copy():
    k = Uniform(1.0)
    k.init(TensorSource([[0.0, 0.0]]))
    m = k.modes
    m[0, 0] = 99.0
    assert k.modes[0, 0].item() == 0.0


def test_uniform_shift_moves_to_neighbour_mean():
    X = [[0.0, 0.0], [1.0, 0.0], [10.0, 10.0]]
    k = Uniform(1.5)
    k.init(TensorSource(X))
    delta = k.shift()
    modes = k.modes
    assert modes[0].tolist() == [0.5, 0.0]
    assert modes[1].tolist() == [0.5, 0.0]
    assert modes[2].tolist() == [10.0, 10.0]
    assert delta == pytest.approx(0.25 + 0.25)


def test_uniform_respects_weights():
    k = Uniform(2.0)
    k.init(TensorSource([[0.0], [1.0]], weights=[3.0, 1.0]))
    k.shift()
    assert k.modes[:, 0].tolist() == [0.25, 0.25]


def test_isolated_points_do_not_move():
    k = TruncatedGaussian(1.0, oversample=3)
    k.init(TensorSource([[0.0, 0.0], [10.0, 0.0]]))
    assert k.shift() == 0.0


def test_gaussian_weights_decay_with_distance():
    h = 1.0
    k = TruncatedGaussian(h, oversample=4)
    k.init(TensorSource([[0.0], [1.0]]))
    k.shift()
    w = math.exp(-1.0 / (2 * h * h))
    expected = (0.0 * 1.0 + 1.0 * w) / (1.0 + w)
    assert k.modes[0, 0].item() == pytest.approx(expected)
    assert k.modes[1, 0].item() == pytest.approx(1.0 - expected)


def test_gaussian_query_radius_is_widened():
    k = TruncatedGaussian(1.0, oversample=3)
    assert k.radius_squared == pytest.approx(3.0)
    assert k.bandwidth == 1.0
    # Points sqrt(2) apart are outside h but inside h*sqrt(3)
    k.init(TensorSource([[0.0], [math.sqrt(2.0)]]))
    assert k.shift() > 0


def test_uniform_bandwidth_is_query_radius():
    k = Uniform(2.5)
    assert k.bandwidth == 2.5
    assert k.radius_squared == pytest.approx(6.25)


def test_capacity_limits_neighbours():
    k = Uniform(10.0, capacity=1)
    k.init(TensorSource([[0.0], [1.0], [2.0]]))
    assert k.shift() == 0.0


def test_shift_converges_on_blob(rng):
    X = rng.normal(scale=0.1, size=(40, 2))
    k = TruncatedGaussian(0.5, oversample=9)
    k.init(TensorSource(X))
    deltas = [k.shift() for _ in range(30)]
    assert deltas[-1] < 1e-6
    modes = k.modes.numpy()
    assert np.abs(modes - modes.mean(axis=0)).max() < 1e-3


@pytest.mark.parametrize("cls,args", [
    (Uniform, (0.0,)),
    (Uniform, (-1.0,)),
    (TruncatedGaussian, (1.0, 0.5)),
    (TruncatedGaussian, (math.nan,)),
])
def test_bad_parameters_rejected(cls, args):
    with pytest.raises(InvalidArgumentError):
        cls(*args)


def test_shift_before_init():
    with pytest.raises(RuntimeError):
        Uniform(1.0).shift()


class _EmptyNeighbourhood(BaseKernel):
    """Queries a radius too small to contain anything after the first move."""

    @property
    def radius_squared(self) -> float:
        return -1.0

    def _kernel_weights(self, distances, weights):
        return weights


def test_empty_neighbourhood_is_degenerate():
    k = _EmptyNeighbourhood(1.0)
    k.init(TensorSource([[0.0, 0.0]]))
    with pytest.raises(DegenerateGeometryError):
        k.shift()


class _ZeroWeight(BaseKernel):
    @property
    def radius_squared(self) -> float:
        return 1.0

    def _kernel_weights(self, distances, weights):
        return torch.zeros_like(weights)


def test_zero_weight_is_degenerate():
    k = _ZeroWeight(1.0)
    k.init(TensorSource([[0.0, 0.0]]))
    with pytest.raises(DegenerateGeometryError):
        k.shift()
