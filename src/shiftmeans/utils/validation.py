"""
Input validation utilities.

Provides the one-time conversion of a DataSource into the internal tensor
representation used by the engines, plus parameter sanity checks.
"""

from typing import Optional, Union, Tuple, Sequence
import math
import numbers
import torch
from torch import Tensor
import numpy as np

from ..base.interfaces import DataSource, Weighter
from ..base.data_structures import TensorSource
from ..base.exceptions import InvalidArgumentError


def as_data_source(data: Union[DataSource, Tensor, np.ndarray, Sequence]) -> DataSource:
    """Wrap array-like input in a TensorSource; pass DataSources through.
    
    Objects that merely provide ``length`` and ``coordinates`` methods are
    accepted as data sources too.
    """
    if isinstance(data, DataSource):
        return data
    if callable(getattr(data, 'length', None)) and callable(getattr(data, 'coordinates', None)):
        return data
    return TensorSource(data)


def validate_data(data: Union[DataSource, Tensor, np.ndarray, Sequence],
                  dtype: torch.dtype = torch.float64) -> Tuple[Tensor, Tensor]:
    """Convert a data source to point and weight tensors.
    
    Args:
        data: DataSource, or array-like of shape (n, d)
        dtype: Target floating point type
        
    Returns:
        points: (n, d) tensor of coordinates
        weights: (n,) tensor of weights, all ones for unweighted sources
        
    Raises:
        InvalidArgumentError: If the source is empty, ragged, non-finite
            or carries non-positive weights
    """
    source = as_data_source(data)
    
    n = source.length()
    if n <= 0:
        raise InvalidArgumentError("Cannot cluster an empty data source")
        
    rows = [list(source.coordinates(i)) for i in range(n)]
    dimension = len(rows[0])
    if dimension == 0:
        raise InvalidArgumentError("Points must have at least one coordinate")
    for i, row in enumerate(rows):
        if len(row) != dimension:
            raise InvalidArgumentError(f"Point {i} has dimension {len(row)}, "
                                       f"expected {dimension}")
                                       
    points = torch.tensor(rows, dtype=dtype)
    if not torch.isfinite(points).all():
        raise InvalidArgumentError("Input contains NaN or infinite values")
        
    if isinstance(source, Weighter):
        weights = torch.tensor([float(source.weight(i)) for i in range(n)], dtype=dtype)
        if not torch.isfinite(weights).all():
            raise InvalidArgumentError("Weights must be finite")
        if (weights <= 0).any():
            raise InvalidArgumentError("Weights must be positive")
    else:
        weights = torch.ones(n, dtype=dtype)
        
    return points, weights


def check_n_clusters(n_clusters: int, n_samples: int) -> None:
    """Validate number of clusters.
    
    Args:
        n_clusters: Number of clusters
        n_samples: Number of samples
        
    Raises:
        InvalidArgumentError: If invalid
    """
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, int):
        raise InvalidArgumentError(f"n_clusters must be int, got {type(n_clusters)}")
        
    if n_clusters <= 0:
        raise InvalidArgumentError(f"n_clusters must be positive, got {n_clusters}")
        
    if n_clusters > n_samples:
        raise InvalidArgumentError(f"n_clusters ({n_clusters}) cannot be larger than "
                                   f"n_samples ({n_samples})")


def check_positive(name: str, value: float) -> float:
    """Ensure value is a finite, strictly positive real."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"{name} must be a real number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidArgumentError(f"{name} must be positive and finite, got {value}")
    return value


def check_max_iter(max_iter: Optional[int], allow_none: bool = False) -> Optional[int]:
    """Validate an iteration cap."""
    if max_iter is None and allow_none:
        return None
    if isinstance(max_iter, bool) or not isinstance(max_iter, int):
        raise InvalidArgumentError(f"max_iter must be int, got {type(max_iter)}")
    if max_iter < 1:
        raise InvalidArgumentError(f"max_iter must be at least 1, got {max_iter}")
    return max_iter


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> Optional[torch.Generator]:
    """Create generator from random state.
    
    Args:
        random_state: Seed or generator
        
    Returns:
        Generator or None
    """
    if random_state is None:
        return None
    elif isinstance(random_state, numbers.Integral) and not isinstance(random_state, bool):
        generator = torch.Generator()
        generator.manual_seed(int(random_state))
        return generator
    elif isinstance(random_state, torch.Generator):
        return random_state
    else:
        raise InvalidArgumentError(f"random_state must be int or Generator, got {type(random_state)}")
