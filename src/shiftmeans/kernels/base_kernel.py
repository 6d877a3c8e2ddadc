"""
Base kernel class with the shared mode bookkeeping and shift loop.
"""

from abc import abstractmethod
from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import KernelStrategy, DataSource
from ..base.exceptions import DegenerateGeometryError
from ..spatial.kdtree import KDTree
from ..utils.validation import validate_data, check_positive


class BaseKernel(KernelStrategy):
    """Base class providing mode storage and the mean-shift sweep.
    
    Subclasses define the query radius and how neighbours are weighted.
    """
    
    def __init__(self, bandwidth: float, capacity: Optional[int] = None):
        """
        Args:
            bandwidth: Kernel width h
            capacity: Optional cap on the neighbours used per mode (nearest kept)
        """
        self._bandwidth = check_positive('bandwidth', bandwidth)
        self.capacity = capacity
        self._points: Optional[Tensor] = None
        self._weights: Optional[Tensor] = None
        self._modes: Optional[Tensor] = None
        self._tree: Optional[KDTree] = None
        
    @property
    def bandwidth(self) -> float:
        return self._bandwidth
        
    @property
    @abstractmethod
    def radius_squared(self) -> float:
        """Squared radius of the neighbour query issued for each mode."""
        pass
        
    @abstractmethod
    def _kernel_weights(self, distances: Tensor, weights: Tensor) -> Tensor:
        """Combine neighbour squared distances and point weights."""
        pass
        
    def init(self, data: DataSource, generator: Optional[torch.Generator] = None) -> None:
        points, weights = validate_data(data)
        self._points = points
        self._weights = weights
        self._modes = points.clone()
        self._tree = KDTree(points, payloads=list(range(len(points))),
                            random_state=generator)
                            
    @property
    def modes(self) -> Tensor:
        self._check_initialized()
        return self._modes.clone()
        
    @property
    def n_modes(self) -> int:
        return 0 if self._modes is None else self._modes.shape[0]
        
    def _check_initialized(self):
        if self._modes is None:
            raise RuntimeError(f"{self.__class__.__name__} must be initialized with data first")
            
    def shift(self) -> float:
        self._check_initialized()
        radius_squared = self.radius_squared
        delta = 0.0
        
        for i in range(self._modes.shape[0]):
            mode = self._modes[i]
            hits = self._tree.nearest_within_radius(mode, radius_squared, self.capacity)
            if not hits:
                raise DegenerateGeometryError(f"mode {i} has no neighbours within "
                                              f"squared radius {radius_squared}")
                                              
            idx = torch.tensor([h.payload for h in hits])
            distances = torch.tensor([h.distance for h in hits], dtype=self._points.dtype)
            kfn = self._kernel_weights(distances, self._weights[idx])
            div = kfn.sum()
            if not div > 0:
                raise DegenerateGeometryError(f"mode {i} has zero total kernel weight")
                
            shifted = torch.sum(self._points[idx] * kfn.unsqueeze(1), dim=0) / div
            diff = mode - shifted
            delta += torch.sum(diff * diff).item()
            self._modes[i] = shifted
            
        return delta
        
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(bandwidth={self._bandwidth})"
