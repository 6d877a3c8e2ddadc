"""
shiftmeans: centroid and density-mode clustering engines.

This package implements two clustering engines over points in n-dimensional
real space:
- K-means (Lloyd's algorithm with k-means++ seeding)
- Mean-shift (pluggable Uniform / TruncatedGaussian kernels backed by a k-d tree)

Example usage:
    >>> import torch
    >>> from shiftmeans import KMeans, MeanShift, TruncatedGaussian
    >>> 
    >>> X = torch.randn(1000, 2)
    >>> 
    >>> km = KMeans(X, random_state=0)
    >>> km.seed(5)
    >>> km.cluster()
    >>> km.within()
    >>> 
    >>> ms = MeanShift(X, TruncatedGaussian(0.5, oversample=3), tol=1e-3)
    >>> ms.cluster()
    >>> [c.members for c in ms.centers()]
"""

__version__ = '0.1.0'

from .algorithms.kmeans import KMeans
from .algorithms.meanshift import MeanShift
from .kernels import Uniform, TruncatedGaussian
from .spatial import KDTree

from .base import (
    DataSource,
    Weighter,
    KernelStrategy,
    TensorSource,
    Value,
    Center,
    MergedCenter,
    ClusteringError,
    InvalidArgumentError,
    NotSeededError,
    DegenerateGeometryError,
    ConvergenceWarning
)

__all__ = [
    # Engines
    'KMeans',
    'MeanShift',
    
    # Kernels
    'Uniform',
    'TruncatedGaussian',
    
    # Spatial index
    'KDTree',
    
    # Data sources and results
    'DataSource',
    'Weighter',
    'KernelStrategy',
    'TensorSource',
    'Value',
    'Center',
    'MergedCenter',
    
    # Errors
    'ClusteringError',
    'InvalidArgumentError',
    'NotSeededError',
    'DegenerateGeometryError',
    'ConvergenceWarning',
    
    # Version
    '__version__'
]
