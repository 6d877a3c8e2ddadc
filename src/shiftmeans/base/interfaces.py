"""
Core interfaces for the shiftmeans clustering engines.

This module defines the abstract base classes that data sources and the
pluggable engine components must implement.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Dict, Any
import torch
from torch import Tensor


class DataSource(ABC):
    """Abstract source of points to be clustered.
    
    Points are enumerated by an integer index in [0, length()) and all
    points share the same dimension.
    """
    
    @abstractmethod
    def length(self) -> int:
        """Number of points in the source."""
        pass
    
    @abstractmethod
    def coordinates(self, i: int) -> Sequence[float]:
        """Return the coordinates of point i."""
        pass


class Weighter(ABC):
    """Optional extension of DataSource giving points individual weights."""
    
    @abstractmethod
    def weight(self, i: int) -> float:
        """Return the (positive) weight of point i."""
        pass
    
    @classmethod
    def __subclasshook__(cls, C):
        if cls is Weighter:
            if any(callable(B.__dict__.get('weight')) for B in C.__mro__):
                return True
        return NotImplemented


class KernelStrategy(ABC):
    """Abstract base class for mean-shift kernels.
    
    A kernel owns the mean-shift walkers ("modes") and the spatial index
    over the original points, and defines how neighbours are weighted.
    """
    
    @abstractmethod
    def init(self, data: DataSource, generator: Optional[torch.Generator] = None) -> None:
        """Create one mode per point and index the original points.
        
        Args:
            data: Source of the points to shift
            generator: Optional random generator used while building the index
        """
        pass
    
    @abstractmethod
    def shift(self) -> float:
        """Move every mode once.
        
        Returns:
            Sum of squared per-coordinate displacements over all modes
        """
        pass
    
    @property
    @abstractmethod
    def bandwidth(self) -> float:
        """Logical kernel width used for collating converged modes."""
        pass
    
    @property
    @abstractmethod
    def modes(self) -> Tensor:
        """(n, d) tensor of current mode positions, row i started at point i."""
        pass


class InitializationStrategy(ABC):
    """Abstract base class for cluster center seeding strategies."""
    
    @abstractmethod
    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> Tensor:
        """Choose initial cluster centers.
        
        Args:
            points: (n, d) tensor of data points
            n_clusters: Number of centers to choose
            generator: Optional random generator
            **kwargs: Strategy-specific parameters
            
        Returns:
            (n_clusters, d) tensor of centers
        """
        pass


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""
    
    def __init__(self):
        self.history = []
    
    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if algorithm has converged.
        
        Args:
            current_state: Dictionary containing current algorithm state
            
        Returns:
            True if converged, False otherwise
        """
        pass
    
    def reset(self):
        """Reset convergence history."""
        self.history = []
