"""
Sum-of-squares statistics reported by the clustering engines.
"""

from typing import List
import torch
from torch import Tensor


def squared_distances(X: Tensor, Y: Tensor) -> Tensor:
    """Compute squared Euclidean distances between two point sets.
    
    Args:
        X: (n, d) first set of points
        Y: (m, d) second set of points
        
    Returns:
        (n, m) matrix of squared distances
    """
    # Explicit differences keep exact results for integer-valued data,
    # unlike the ||x||² + ||y||² - 2<x,y> expansion.
    diff = X.unsqueeze(1) - Y.unsqueeze(0)
    return torch.sum(diff * diff, dim=2)


def total_sum_of_squares(X: Tensor) -> float:
    """Sum of squared distances of every point to the centroid of all points."""
    centroid = X.mean(dim=0)
    diff = X - centroid.unsqueeze(0)
    return torch.sum(diff * diff).item()


def within_sum_of_squares(X: Tensor, labels: Tensor, centers: Tensor) -> List[float]:
    """Per-cluster sum of squared distances of members to their center.
    
    Args:
        X: (n, d) data points
        labels: (n,) cluster labels
        centers: (k, d) cluster centers
        
    Returns:
        List of k sums, one per center
    """
    n_clusters = centers.shape[0]
    diff = X - centers[labels]
    per_point = torch.sum(diff * diff, dim=1)
    ss = torch.zeros(n_clusters, dtype=X.dtype, device=X.device)
    ss.index_add_(0, labels, per_point)
    return ss.tolist()


def inertia(X: Tensor, labels: Tensor, centers: Tensor) -> float:
    """Compute sum of squared distances to assigned centers (inertia)."""
    return float(sum(within_sum_of_squares(X, labels, centers)))
