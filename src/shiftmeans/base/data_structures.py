"""
Core data structures for the shiftmeans clustering engines.

The result types are read-only snapshots built from engine-internal tensors.
Each accessor call builds a fresh sequence, so callers can never mutate the
state of an engine through them.
"""

from typing import Optional, List, Tuple, Sequence, Union
import torch
from torch import Tensor
import numpy as np
from dataclasses import dataclass

from .interfaces import DataSource, Weighter
from .exceptions import InvalidArgumentError


# Cluster index of a Value that has not been assigned yet
UNASSIGNED = -1


@dataclass(frozen=True)
class Value:
    """A data point as held by an engine, tagged with its cluster."""
    
    coordinates: Tuple[float, ...]
    weight: float = 1.0
    cluster: int = UNASSIGNED
    
    @property
    def dimension(self) -> int:
        return len(self.coordinates)


@dataclass(frozen=True)
class Center:
    """A k-means cluster centroid and the number of its members."""
    
    coordinates: Tuple[float, ...]
    count: int = 0
    
    @property
    def dimension(self) -> int:
        return len(self.coordinates)


@dataclass(frozen=True)
class MergedCenter:
    """A mean-shift cluster: representative position and member indices.
    
    Members are indices into the original data source.
    """
    
    coordinates: Tuple[float, ...]
    members: Tuple[int, ...] = ()
    
    @property
    def count(self) -> int:
        return len(self.members)
    
    @property
    def dimension(self) -> int:
        return len(self.coordinates)


class TensorSource(DataSource, Weighter):
    """DataSource over an in-memory (n, d) array of points.
    
    Args:
        points: (n, d) tensor, NumPy array or nested list of coordinates
        weights: Optional (n,) weights; every point weighs 1 when omitted
    """
    
    def __init__(self, points: Union[Tensor, np.ndarray, Sequence[Sequence[float]]],
                 weights: Optional[Union[Tensor, np.ndarray, Sequence[float]]] = None):
        if isinstance(points, Tensor):
            self._points = points.detach().to(dtype=torch.float64, device='cpu')
        else:
            try:
                self._points = torch.as_tensor(np.asarray(points, dtype=np.float64))
            except (TypeError, ValueError) as e:
                raise InvalidArgumentError(f"points must form an (n, d) array of reals: {e}") from e
        if self._points.dim() == 1 and self._points.numel() == 0:
            self._points = self._points.reshape(0, 0)
        if self._points.dim() != 2:
            raise InvalidArgumentError(f"Expected 2D points, got {self._points.dim()}D")
            
        if weights is None:
            self._weights = None
        elif isinstance(weights, Tensor):
            self._weights = weights.detach().to(dtype=torch.float64, device='cpu').flatten()
        else:
            try:
                self._weights = torch.as_tensor(np.asarray(weights, dtype=np.float64)).flatten()
            except (TypeError, ValueError) as e:
                raise InvalidArgumentError(f"weights must be an (n,) array of reals: {e}") from e
        if self._weights is not None and len(self._weights) != len(self._points):
            raise InvalidArgumentError(f"Expected {len(self._points)} weights, "
                                       f"got {len(self._weights)}")
                                 
    def length(self) -> int:
        return self._points.shape[0]
        
    def coordinates(self, i: int) -> List[float]:
        return self._points[i].tolist()
        
    def weight(self, i: int) -> float:
        if self._weights is None:
            return 1.0
        return float(self._weights[i])
        
    def __len__(self) -> int:
        return self.length()
        
    def __repr__(self) -> str:
        return (f"TensorSource(n={self._points.shape[0]}, d={self._points.shape[1]}, "
                f"weighted={self._weights is not None})")


def as_values(points: Tensor, weights: Tensor, labels: Tensor) -> List[Value]:
    """Build read-only Value snapshots from engine tensors."""
    return [
        Value(coordinates=tuple(p), weight=w, cluster=c)
        for p, w, c in zip(points.tolist(), weights.tolist(), labels.tolist())
    ]


def as_centers(centers: Tensor, counts: Tensor) -> List[Center]:
    """Build read-only Center snapshots from engine tensors."""
    return [
        Center(coordinates=tuple(c), count=n)
        for c, n in zip(centers.tolist(), counts.tolist())
    ]
