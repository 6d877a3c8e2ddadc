"""
Truncated Gaussian mean-shift kernel.
"""

from typing import Optional
import torch
from torch import Tensor

from .base_kernel import BaseKernel
from ..base.exceptions import InvalidArgumentError


class TruncatedGaussian(BaseKernel):
    """Gaussian kernel evaluated over a bounded neighbourhood.
    
    Neighbours are gathered within h * sqrt(oversample) and weighted by
    ``w * exp(-d² / (2h²))``. The widened radius only controls recall;
    ``bandwidth`` still reports h.
    
    Parameters
    ----------
    bandwidth : float
        Gaussian width h
    oversample : float, default=3.0
        Squared radius multiplier for the neighbour query, at least 1
    capacity : int, optional
        Cap on neighbours used per mode
    """
    
    def __init__(self, bandwidth: float, oversample: float = 3.0,
                 capacity: Optional[int] = None):
        super().__init__(bandwidth, capacity)
        try:
            oversample = float(oversample)
        except (TypeError, ValueError):
            raise InvalidArgumentError(f"oversample must be a real number, got {oversample!r}")
        if not oversample >= 1.0 or oversample == float('inf'):
            raise InvalidArgumentError(f"oversample must be finite and at least 1, got {oversample}")
        self.oversample = oversample
        
    @property
    def radius_squared(self) -> float:
        return self._bandwidth * self._bandwidth * self.oversample
        
    def _kernel_weights(self, distances: Tensor, weights: Tensor) -> Tensor:
        inv = 1.0 / (2.0 * self._bandwidth * self._bandwidth)
        return weights * torch.exp(-distances * inv)
        
    def __repr__(self) -> str:
        return f"TruncatedGaussian(bandwidth={self._bandwidth}, oversample={self.oversample})"
