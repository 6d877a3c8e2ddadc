"""
k-d tree over fixed-dimensional points.

Supports bulk construction, incremental insertion, nearest-point lookup and
bounded radius queries. Queries walk the tree with an explicit stack so that
trees grown by insertion cannot exhaust the interpreter's recursion limit.
"""

from typing import Any, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union
import math
import torch
from torch import Tensor
import numpy as np

from .heap import DistKeeper
from .pivot import median_of_randoms, partition
from ..utils.validation import check_random_state


class Neighbor(NamedTuple):
    """A point returned by a tree query."""
    index: int
    coordinates: Tuple[float, ...]
    payload: Any
    distance: float  # squared Euclidean distance to the query


class _Node:
    __slots__ = ('index', 'coordinates', 'payload', 'dim', 'left', 'right')
    
    def __init__(self, index: int, coordinates: Tuple[float, ...], payload: Any, dim: int):
        self.index = index
        self.coordinates = coordinates
        self.payload = payload
        self.dim = dim
        self.left: Optional['_Node'] = None
        self.right: Optional['_Node'] = None


def _squared_distance(a: Sequence[float], b: Sequence[float]) -> float:
    total = 0.0
    for x, y in zip(a, b):
        d = x - y
        total += d * d
    return total


class KDTree:
    """Partition tree for nearest-neighbour and radius queries.
    
    Each point carries the index it was added under (construction order,
    then insertion order) and an optional payload.
    
    Parameters
    ----------
    points : array-like of shape (n, d), optional
        Points to build the tree from
    payloads : sequence of length n, optional
        Values attached to the points and returned by queries
    dimension : int, optional
        Point dimension; required when the tree is built empty
    n_randoms : int, default=100
        Sample size of the median-of-randoms pivot estimator
    random_state : int or torch.Generator, optional
        Source of randomness for pivot sampling
    """
    
    def __init__(self,
                 points: Optional[Union[Tensor, np.ndarray, Sequence[Sequence[float]]]] = None,
                 payloads: Optional[Sequence[Any]] = None,
                 dimension: Optional[int] = None,
                 n_randoms: int = 100,
                 random_state: Optional[Union[int, torch.Generator]] = None):
        if points is None:
            coords: List[Tuple[float, ...]] = []
        elif isinstance(points, Tensor):
            coords = [tuple(p) for p in points.tolist()]
        else:
            coords = [tuple(float(x) for x in p) for p in points]
            
        if coords:
            dimension = len(coords[0])
            if any(len(c) != dimension for c in coords):
                raise ValueError("All points must have the same dimension")
        elif dimension is None:
            raise ValueError("dimension is required for an empty tree")
            
        if payloads is None:
            payloads = [None] * len(coords)
        elif len(payloads) != len(coords):
            raise ValueError(f"Expected {len(coords)} payloads, got {len(payloads)}")
            
        self.dimension = dimension
        self.n_randoms = n_randoms
        self._generator = check_random_state(random_state)
        self._size = len(coords)
        self._root = self._build(coords, list(payloads), list(range(len(coords))), 0)
        
    def _build(self, coords, payloads, indices: List[int], depth: int) -> Optional[_Node]:
        # Duplicate points all fall right of their pivot, so depth can reach n.
        root = None
        pending = [(None, False, indices, depth)]
        while pending:
            parent, is_left, members, level = pending.pop()
            if not members:
                continue
            dim = level % self.dimension
            pivot = median_of_randoms(coords, members, dim, self.n_randoms, self._generator)
            index, below, above = partition(coords, members, dim, pivot)

            node = _Node(index, coords[index], payloads[index], dim)
            if parent is None:
                root = node
            elif is_left:
                parent.left = node
            else:
                parent.right = node
            pending.append((node, False, above, level + 1))
            pending.append((node, True, below, level + 1))
        return root
        
    def __len__(self) -> int:
        return self._size
        
    def __iter__(self) -> Iterator[Neighbor]:
        """Walk the points in order of the tree."""
        stack: List[_Node] = []
        node = self._root
        while stack or node is not None:
            if node is not None:
                stack.append(node)
                node = node.left
            else:
                node = stack.pop()
                yield Neighbor(node.index, node.coordinates, node.payload, 0.0)
                node = node.right
                
    def depth(self) -> int:
        """Length of the longest root-to-leaf path (0 when empty)."""
        deepest = 0
        stack = [(self._root, 1)] if self._root is not None else []
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            for child in (node.left, node.right):
                if child is not None:
                    stack.append((child, level + 1))
        return deepest
        
    def _check_query(self, query) -> Tuple[float, ...]:
        if isinstance(query, Tensor):
            query = query.tolist()
        query = tuple(float(x) for x in query)
        if len(query) != self.dimension:
            raise ValueError(f"Expected dimension {self.dimension}, got {len(query)}")
        return query
        
    def insert(self, point, payload: Any = None) -> int:
        """Add a point without rebuilding the tree.
        
        Returns:
            Index assigned to the new point
        """
        coords = self._check_query(point)
        index = self._size
        self._size += 1
        
        if self._root is None:
            self._root = _Node(index, coords, payload, 0)
            return index
            
        node = self._root
        while True:
            if coords[node.dim] < node.coordinates[node.dim]:
                if node.left is None:
                    node.left = _Node(index, coords, payload, (node.dim + 1) % self.dimension)
                    return index
                node = node.left
            else:
                if node.right is None:
                    node.right = _Node(index, coords, payload, (node.dim + 1) % self.dimension)
                    return index
                node = node.right
                
    def _search(self, query: Tuple[float, ...], keeper: DistKeeper) -> None:
        if self._root is None:
            return
        # Entries carry a lower bound on the distance to anything below the node.
        stack: List[Tuple[_Node, float]] = [(self._root, 0.0)]
        while stack:
            node, bound = stack.pop()
            if bound > keeper.max_distance:
                continue
                
            keeper.keep(node, _squared_distance(query, node.coordinates))
            
            c = query[node.dim] - node.coordinates[node.dim]
            if c < 0:
                near, far = node.left, node.right
            else:
                near, far = node.right, node.left
            if far is not None:
                stack.append((far, c * c))
            if near is not None:
                stack.append((near, 0.0))
                
    def nearest(self, query) -> Tuple[Optional[Neighbor], float]:
        """Find the closest point to query.
        
        Returns:
            The nearest neighbour and its squared distance, or (None, inf)
            for an empty tree. A distance of 0 means query duplicates an
            indexed point.
        """
        query = self._check_query(query)
        keeper = DistKeeper(capacity=1)
        self._search(query, keeper)
        results = keeper.results()
        if not results:
            return None, math.inf
        node, dist = results[0]
        return Neighbor(node.index, node.coordinates, node.payload, dist), dist
        
    def nearest_within_radius(self, query, radius_squared: float,
                              capacity: Optional[int] = None) -> List[Neighbor]:
        """Find the points within a squared radius of query.
        
        Args:
            query: Point of the tree's dimension
            radius_squared: Squared radius; points at exactly this distance match
            capacity: Keep at most this many of the nearest points
            
        Returns:
            Neighbours ordered by squared distance, ties in traversal order
        """
        query = self._check_query(query)
        keeper = DistKeeper(radius_squared, capacity)
        self._search(query, keeper)
        return [Neighbor(node.index, node.coordinates, node.payload, dist)
                for node, dist in keeper.results()]
