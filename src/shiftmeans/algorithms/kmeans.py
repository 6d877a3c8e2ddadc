"""
K-means clustering engine.

Lloyd's algorithm over n-dimensional points with D²-weighted seeding.
Only pairwise Euclidean distances are used; with k small relative to n a
spatial index does not pay off.
"""

from typing import Optional, List, Dict, Any, Union
import itertools
import warnings
import torch
from torch import Tensor

from ..base.clustering_base import BaseClusteringEngine
from ..base.interfaces import DataSource, InitializationStrategy
from ..base.data_structures import Center, UNASSIGNED, as_centers
from ..base.exceptions import NotSeededError, ConvergenceWarning, InvalidArgumentError
from ..initialization.kmeans_plusplus import KMeansPlusPlusInit
from ..initialization.random import RandomInit, random_index
from ..utils.convergence import ChangeInAssignments
from ..utils.metrics import squared_distances, inertia
from ..utils.validation import check_max_iter


class KMeans(BaseClusteringEngine):
    """K-means clustering engine.
    
    Partitions the data into k clusters by minimizing the within-cluster
    sum of squared distances. Centers are chosen with ``seed(k)`` and
    refined with ``cluster()``; calling ``seed`` again discards the
    previous result.
    
    Parameters
    ----------
    data : DataSource or array-like of shape (n_samples, n_features)
        Points to cluster. Weights, if any, are ignored.
    init : str or InitializationStrategy, default='k-means++'
        Seeding method:
        - 'k-means++' : D²-weighted seeding
        - 'random' : k distinct random points
    max_iter : int or None, default=100
        Maximum number of Lloyd iterations. None runs until no point
        changes cluster.
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        Random seed for reproducibility
        
    Attributes
    ----------
    labels_ : Tensor of shape (n_samples,)
        Cluster index of every point, -1 before clustering
    n_iter_ : int
        Number of Lloyd iterations run by the last ``cluster()``
    converged_ : bool
        Whether the last run reached a fixed point
    history_ : list of float
        Within-cluster sum of squares after each assignment step
    """
    
    def __init__(self,
                 data: Union[DataSource, Tensor, Any],
                 init: Union[str, InitializationStrategy] = 'k-means++',
                 max_iter: Optional[int] = 100,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None):
        """Initialize K-means engine."""
        self.max_iter = check_max_iter(max_iter, allow_none=True)
        self.initialization_strategy = self._make_initialization(init)
        self.init = init
        super().__init__(data, verbose=verbose, random_state=random_state)
        
        self._centers: Optional[Tensor] = None
        self._counts: Optional[Tensor] = None
        self._clustered = False
        
    @staticmethod
    def _make_initialization(init) -> InitializationStrategy:
        if isinstance(init, InitializationStrategy):
            return init
        if init == 'k-means++':
            return KMeansPlusPlusInit()
        elif init == 'random':
            return RandomInit()
        raise InvalidArgumentError(f"Unknown init method: {init}")
        
    def seed(self, k: int) -> 'KMeans':
        """Choose k initial centers.
        
        Args:
            k: Number of clusters, 1 <= k <= n_points
            
        Returns:
            self
        """
        centers = self.initialization_strategy.initialize(
            self._points, k, generator=self._generator
        )
        
        self._centers = centers
        self._counts = torch.zeros(k, dtype=torch.long)
        self._clustered = False
        self.labels_.fill_(UNASSIGNED)
        self.n_iter_ = 0
        self.converged_ = False
        self.history_ = []
        
        self._log(1, f"Seeded {k} centers")
        return self
        
    def _assign(self, centers: Tensor):
        """Nearest center per point; ties go to the lowest center index."""
        distances = squared_distances(self._points, centers)
        min_distances, labels = torch.min(distances, dim=1)
        return labels, min_distances.sum().item()
        
    def _update_centers(self, labels: Tensor) -> None:
        """Recompute every center as the mean of its members."""
        k = self._centers.shape[0]
        counts = torch.bincount(labels, minlength=k)
        sums = torch.zeros_like(self._centers)
        sums.index_add_(0, labels, self._points)
        
        centers = sums / counts.clamp(min=1).unsqueeze(1).to(sums.dtype)
        for c in torch.nonzero(counts == 0).flatten().tolist():
            # Empty cluster: reseed at a random data point
            idx = random_index(self.n_points, self._generator)
            centers[c] = self._points[idx]
            self._log(2, f"Center {c} lost all members, reseeded at point {idx}")
            
        self._centers = centers
        self._counts = counts
        
    def cluster(self) -> Optional[ConvergenceWarning]:
        """Run Lloyd's algorithm from the seeded centers.
        
        Returns:
            None on convergence, or the ConvergenceWarning that was issued
            when max_iter ran out first (the result is still usable)
            
        Raises:
            NotSeededError: If seed() has not been called
        """
        if self._centers is None:
            raise NotSeededError("kmeans: no centers, call seed() first")
            
        criterion = ChangeInAssignments()
        self.history_ = []
        self.converged_ = False
        self.n_iter_ = 0
        
        labels, objective = self._assign(self._centers)
        criterion.check({'iteration': 0, 'assignments': labels})
        self.history_.append(objective)
        self._log(2, f"Iteration   0: objective = {objective:.6f}")
        
        iterations = itertools.count(1) if self.max_iter is None else range(1, self.max_iter + 1)
        for iteration in iterations:
            self._update_centers(labels)
            labels, objective = self._assign(self._centers)
            self.history_.append(objective)
            self.n_iter_ = iteration
            
            converged = criterion.check({'iteration': iteration, 'assignments': labels})
            self._log(2, f"Iteration {iteration:3d}: objective = {objective:.6f} "
                         f"({criterion.n_changed} changed)")
            if converged:
                self.converged_ = True
                break
                
        self.labels_ = labels
        self._clustered = True
        
        if not self.converged_:
            # Keep centers consistent with the final memberships.
            self._update_centers(labels)
            warning = ConvergenceWarning(self.n_iter_, float(criterion.n_changed))
            warnings.warn(warning, stacklevel=2)
            return warning
            
        self._log(1, f"Converged after {self.n_iter_} iterations")
        return None
        
    def _center_tensor(self) -> Optional[Tensor]:
        return self._centers if self._clustered else None
        
    def centers(self) -> List[Center]:
        """Current centers, position = cluster index.
        
        Before ``cluster()`` these are the seeded centers with zero counts;
        empty before ``seed()``.
        """
        if self._centers is None:
            return []
        return as_centers(self._centers, self._counts)
        
    @property
    def cluster_centers_(self) -> Tensor:
        """Get cluster centers as a (k, d) tensor."""
        if not self._clustered:
            raise RuntimeError("Model must be clustered first")
        return self._centers.clone()
        
    @property
    def inertia_(self) -> float:
        """Sum of squared distances of points to their centers."""
        if not self._clustered:
            raise RuntimeError("Model must be clustered first")
        return inertia(self._points, self.labels_, self._centers)
        
    def get_params(self) -> Dict[str, Any]:
        params = super().get_params()
        params.update({'init': self.init, 'max_iter': self.max_iter})
        return params
        
    def set_params(self, **params) -> 'KMeans':
        if 'max_iter' in params:
            check_max_iter(params['max_iter'], allow_none=True)
        strategy = self.initialization_strategy
        if 'init' in params:
            strategy = self._make_initialization(params['init'])
        super().set_params(**params)
        self.initialization_strategy = strategy
        return self
