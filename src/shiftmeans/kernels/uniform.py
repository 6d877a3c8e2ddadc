"""
Uniform (flat) mean-shift kernel.
"""

from torch import Tensor

from .base_kernel import BaseKernel


class Uniform(BaseKernel):
    """Flat kernel: every point within the bandwidth counts by its weight.
    
    Each shift moves a mode to the weighted mean of the original points
    within distance h of it.
    """
    
    @property
    def radius_squared(self) -> float:
        return self._bandwidth * self._bandwidth
        
    def _kernel_weights(self, distances: Tensor, weights: Tensor) -> Tensor:
        return weights
