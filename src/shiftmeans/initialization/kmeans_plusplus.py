"""
K-means++ initialization strategy.

Selects initial cluster centers with D²-weighted sampling, which spreads the
centers out and improves both convergence speed and clustering quality.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy
from ..base.exceptions import InvalidArgumentError
from ..utils.validation import check_n_clusters
from .random import random_index


class KMeansPlusPlusInit(InitializationStrategy):
    """K-means++ (D²-weighted) seeding.
    
    Algorithm:
    1. Choose the first center uniformly at random among the points
    2. For each remaining center:
       - Compute the squared distance from each point to its nearest center
       - Draw u uniformly from [0, sum) and take the first point whose
         cumulative squared distance exceeds u
    """
    
    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> Tensor:
        """Initialize cluster centers using K-means++.
        
        Args:
            points: (n, d) data points
            n_clusters: Number of clusters
            generator: Optional random generator
            
        Returns:
            (n_clusters, d) tensor of centers
        """
        n_points, dimension = points.shape
        try:
            check_n_clusters(n_clusters, n_points)
        except InvalidArgumentError as e:
            raise InvalidArgumentError(f"Cannot seed: {e}") from e
            
        centers = torch.empty(n_clusters, dimension, dtype=points.dtype, device=points.device)
        
        # Choose first center uniformly at random
        centers[0] = points[random_index(n_points, generator)]
        if n_clusters == 1:
            return centers
            
        # Squared distance from each point to its nearest chosen center
        distances = torch.sum((points - centers[0].unsqueeze(0)) ** 2, dim=1)
        
        for c in range(1, n_clusters):
            cumulative = torch.cumsum(distances, dim=0)
            total = cumulative[-1].item()
            
            if total > 0:
                target = torch.rand(1, generator=generator, dtype=points.dtype).item() * total
                # right=True skips points at zero distance from a chosen center
                idx = torch.searchsorted(cumulative, torch.tensor([target], dtype=points.dtype),
                                         right=True).item()
                idx = min(idx, n_points - 1)
            else:
                # Every point coincides with a center already chosen
                idx = random_index(n_points, generator)
                
            centers[c] = points[idx]
            new_distances = torch.sum((points - centers[c].unsqueeze(0)) ** 2, dim=1)
            distances = torch.minimum(distances, new_distances)
            
        return centers
