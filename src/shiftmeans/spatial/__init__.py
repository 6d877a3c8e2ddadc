"""Spatial indexing for neighbour queries."""

from .kdtree import KDTree, Neighbor
from .heap import DistKeeper
from .pivot import median_of_randoms, partition

__all__ = [
    'KDTree',
    'Neighbor',
    'DistKeeper',
    'median_of_randoms',
    'partition'
]
