"""
Random initialization strategy for clustering engines.

Selects random points from the dataset as initial cluster centers.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy
from ..utils.validation import check_n_clusters


def random_index(n_points: int, generator: Optional[torch.Generator] = None) -> int:
    """Draw a point index uniformly from [0, n_points)."""
    return torch.randint(n_points, (1,), generator=generator).item()


class RandomInit(InitializationStrategy):
    """Random initialization by selecting points from the dataset.
    
    Selects n_clusters random points (without replacement) as initial centers.
    """
    
    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> Tensor:
        """Initialize clusters with random points.
        
        Args:
            points: (n, d) data points
            n_clusters: Number of clusters
            generator: Optional random generator
            
        Returns:
            (n_clusters, d) tensor of centers
        """
        check_n_clusters(n_clusters, points.shape[0])
        
        # Select random indices without replacement
        indices = torch.randperm(points.shape[0], generator=generator)[:n_clusters]
        return points[indices].clone()
