"""
Mean-shift clustering engine.

Every point starts a walker ("mode") that the kernel repeatedly moves to the
weighted mean of its neighbourhood. Once the modes settle, or the iteration
cap is hit, nearby modes are collated into merged clusters.
"""

from typing import Optional, List, Dict, Any, Union, Tuple
import warnings
import torch
from torch import Tensor

from ..base.clustering_base import BaseClusteringEngine
from ..base.interfaces import DataSource, KernelStrategy
from ..base.data_structures import MergedCenter, TensorSource, UNASSIGNED
from ..base.exceptions import ConvergenceWarning, DegenerateGeometryError, InvalidArgumentError
from ..spatial.kdtree import KDTree
from ..utils.convergence import ShiftTolerance
from ..utils.validation import check_max_iter


def _check_tol(tol) -> float:
    try:
        tol = float(tol)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"tol must be a real number, got {tol!r}")
    if not tol >= 0:
        raise InvalidArgumentError(f"tol must be non-negative, got {tol}")
    return tol


class MeanShift(BaseClusteringEngine):
    """Mean-shift clustering engine.
    
    Parameters
    ----------
    data : DataSource or array-like of shape (n_samples, n_features)
        Points to cluster, optionally weighted
    kernel : KernelStrategy
        Kernel that moves the modes, e.g. Uniform or TruncatedGaussian.
        The engine initializes it with the data and owns it afterwards.
    tol : float, default=0.1
        Shifting stops once the summed squared mode displacement of a
        sweep is at most tol
    max_iter : int, default=100
        Maximum number of shift sweeps
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        Seed for pivot sampling in the spatial indexes
        
    Attributes
    ----------
    labels_ : Tensor of shape (n_samples,)
        Merged cluster index of every point, -1 before clustering
    n_iter_ : int
        Number of shift sweeps run by the last ``cluster()``
    converged_ : bool
        Whether the last run met the tolerance
    history_ : list of float
        Displacement returned by each sweep
    """
    
    def __init__(self,
                 data: Union[DataSource, Tensor, Any],
                 kernel: KernelStrategy,
                 tol: float = 0.1,
                 max_iter: int = 100,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None):
        """Initialize mean-shift engine and its kernel."""
        if not isinstance(kernel, KernelStrategy):
            raise InvalidArgumentError(f"kernel must be a KernelStrategy, got {type(kernel)}")
        self.tol = _check_tol(tol)
        self.max_iter = check_max_iter(max_iter)
        super().__init__(data, verbose=verbose, random_state=random_state)
        
        self.kernel = kernel
        self.kernel.init(TensorSource(self._points, self._weights), generator=self._generator)
        
        self._merged_positions: Optional[Tensor] = None
        self._merged_members: List[Tuple[int, ...]] = []
        
    def cluster(self) -> Optional[ConvergenceWarning]:
        """Shift the modes and collate them into clusters.
        
        Collation runs whether or not the modes converged.
        
        Returns:
            None on convergence, or the ConvergenceWarning that was issued
            when max_iter ran out first (the result is still usable)
            
        Raises:
            DegenerateGeometryError: If a neighbour query comes back empty
        """
        criterion = ShiftTolerance(self.tol)
        self._merged_positions = None
        self._merged_members = []
        self.labels_.fill_(UNASSIGNED)
        self.history_ = []
        self.converged_ = False
        self.n_iter_ = 0
        
        delta = float('inf')
        for iteration in range(self.max_iter):
            delta = self.kernel.shift()
            self.history_.append(delta)
            self.n_iter_ = iteration + 1
            
            self._log(2, f"Iteration {iteration:3d}: delta = {delta:.6f}")
            if criterion.check({'iteration': iteration, 'delta': delta}):
                self.converged_ = True
                break
                
        warning = None
        if self.converged_:
            self._log(1, f"Converged after {self.n_iter_} iterations")
        else:
            warning = ConvergenceWarning(self.n_iter_, delta)
            warnings.warn(warning, stacklevel=2)
            
        self._collate()
        self._log(1, f"Collated {self.n_points} modes into "
                     f"{len(self._merged_members)} clusters")
        return warning
        
    def _collate(self) -> None:
        """Merge modes lying within one bandwidth into clusters.
        
        Modes are visited in index order. An unclaimed mode gathers all
        modes around it; their mean becomes the cluster position and the
        still unclaimed ones become its members. Claimed modes still count
        towards the position of later clusters near them.
        """
        modes = self.kernel.modes
        n_modes, dimension = modes.shape
        radius_squared = self.kernel.bandwidth ** 2
        
        mode_tree = KDTree(modes, payloads=list(range(n_modes)), random_state=self._generator)
        center_tree = KDTree(dimension=dimension)
        claimed = [False] * n_modes
        positions: List[Tensor] = []
        members: List[List[int]] = []
        
        for i in range(n_modes):
            if claimed[i]:
                continue
                
            hits = mode_tree.nearest_within_radius(modes[i], radius_squared)
            if not hits:
                raise DegenerateGeometryError(f"mode {i} is not within the bandwidth of itself")
                
            idx = torch.tensor([h.payload for h in hits])
            position = modes[idx].mean(dim=0)
            
            new_members = []
            for h in hits:
                if not claimed[h.payload]:
                    claimed[h.payload] = True
                    new_members.append(h.payload)
                    
            existing, dist = center_tree.nearest(position)
            if existing is not None and dist == 0:
                members[existing.payload].extend(new_members)
            else:
                center_tree.insert(position, payload=len(positions))
                positions.append(position)
                members.append(new_members)
                
        kept = [c for c in range(len(positions)) if members[c]]
        for cluster_id, c in enumerate(kept):
            self.labels_[members[c]] = cluster_id
            
        self._merged_positions = torch.stack([positions[c] for c in kept])
        self._merged_members = [tuple(members[c]) for c in kept]
        
    def _center_tensor(self) -> Optional[Tensor]:
        return self._merged_positions
        
    def centers(self) -> List[MergedCenter]:
        """Merged clusters of the last run, position = cluster index.
        
        Empty before ``cluster()``.
        """
        if self._merged_positions is None:
            return []
        return [
            MergedCenter(coordinates=tuple(p), members=m)
            for p, m in zip(self._merged_positions.tolist(), self._merged_members)
        ]
        
    def clusters(self) -> List[Tuple[int, ...]]:
        """Member indices of each merged cluster, in claim order."""
        return list(self._merged_members)
        
    @property
    def modes_(self) -> Tensor:
        """Current mode positions held by the kernel."""
        return self.kernel.modes
        
    def get_params(self) -> Dict[str, Any]:
        params = super().get_params()
        params.update({'kernel': self.kernel, 'tol': self.tol, 'max_iter': self.max_iter})
        return params
        
    def set_params(self, **params) -> 'MeanShift':
        if 'kernel' in params:
            raise InvalidArgumentError("kernel cannot be replaced after construction")
        if 'max_iter' in params:
            check_max_iter(params['max_iter'])
        if 'tol' in params:
            params['tol'] = _check_tol(params['tol'])
        return super().set_params(**params)
