"""
Base class for the shiftmeans clustering engines.

Holds the converted point data and implements the reporting shared by
k-means and mean-shift.
"""

from abc import abstractmethod
from typing import Optional, Dict, Any, List, Union, Tuple
import torch
from torch import Tensor

from .interfaces import DataSource
from .data_structures import Value, UNASSIGNED, as_values
from .exceptions import InvalidArgumentError
from ..utils.validation import validate_data, check_random_state
from ..utils.metrics import total_sum_of_squares, within_sum_of_squares


class BaseClusteringEngine:
    """Base class for single-threaded, in-memory clustering engines.
    
    The data source is converted once at construction; points and weights
    are never resized afterwards. Engine instances are not safe for
    concurrent use. Parallel runs need independent instances.
    
    Subclasses need to implement:
    - cluster()
    - _center_tensor() returning the (k, d) centers of the last run
    - centers()
    """
    
    def __init__(self,
                 data: Union[DataSource, Tensor, Any],
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None):
        """
        Args:
            data: DataSource or (n, d) array-like of points
            verbose: Verbosity level (0=silent, 1=progress, 2=detailed)
            random_state: Random seed or generator for reproducibility
        """
        self._points, self._weights = validate_data(data)
        self.verbose = verbose
        self.random_state = random_state
        self._generator = check_random_state(random_state)
        
        n_points = self._points.shape[0]
        self.labels_ = torch.full((n_points,), UNASSIGNED, dtype=torch.long)
        self.n_iter_ = 0
        self.converged_ = False
        self.history_: List[float] = []
        
    @property
    def n_points(self) -> int:
        return self._points.shape[0]
        
    @property
    def dimension(self) -> int:
        return self._points.shape[1]
        
    @property
    def clustered_(self) -> bool:
        """Whether a clustering run has finalized results."""
        return self._center_tensor() is not None
        
    @abstractmethod
    def cluster(self):
        pass
        
    @abstractmethod
    def _center_tensor(self) -> Optional[Tensor]:
        pass
        
    def _log(self, level: int, message: str) -> None:
        if self.verbose >= level:
            print(message)
            
    def values(self) -> List[Value]:
        """Original points tagged with their current cluster index."""
        return as_values(self._points, self._weights, self.labels_)
        
    def clusters(self) -> List[Tuple[int, ...]]:
        """Indices of the original points grouped by cluster.
        
        Empty until a clustering run has finished.
        """
        centers = self._center_tensor()
        if centers is None:
            return []
        groups: List[List[int]] = [[] for _ in range(centers.shape[0])]
        for i, c in enumerate(self.labels_.tolist()):
            groups[c].append(i)
        return [tuple(g) for g in groups]
        
    def total(self) -> float:
        """Total sum of squares of the data about its centroid."""
        return total_sum_of_squares(self._points)
        
    def within(self) -> List[float]:
        """Sum of squares of each cluster about its center.
        
        Empty until a clustering run has finished.
        """
        centers = self._center_tensor()
        if centers is None:
            return []
        return within_sum_of_squares(self._points, self.labels_, centers)
        
    def get_params(self) -> Dict[str, Any]:
        """Get configuration parameters."""
        return {
            'verbose': self.verbose,
            'random_state': self.random_state,
        }
        
    def set_params(self, **params) -> 'BaseClusteringEngine':
        """Set configuration parameters.
        
        Every parameter is checked before any is applied.
        """
        valid = self.get_params()
        for key in params:
            if key not in valid:
                raise InvalidArgumentError(f"Invalid parameter {key!r} for {self.__class__.__name__}")
        generator = self._generator
        if 'random_state' in params:
            generator = check_random_state(params['random_state'])
            
        for key, value in params.items():
            setattr(self, key, value)
        self._generator = generator
        return self
