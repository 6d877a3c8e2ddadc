"""Base classes and interfaces for shiftmeans clustering engines."""

from .interfaces import (
    DataSource,
    Weighter,
    KernelStrategy,
    InitializationStrategy,
    ConvergenceCriterion
)

from .data_structures import (
    Value,
    Center,
    MergedCenter,
    TensorSource,
    UNASSIGNED
)

from .exceptions import (
    ClusteringError,
    InvalidArgumentError,
    NotSeededError,
    DegenerateGeometryError,
    ConvergenceWarning
)

from .clustering_base import BaseClusteringEngine

__all__ = [
    # Interfaces
    'DataSource',
    'Weighter',
    'KernelStrategy',
    'InitializationStrategy',
    'ConvergenceCriterion',
    
    # Data structures
    'Value',
    'Center',
    'MergedCenter',
    'TensorSource',
    'UNASSIGNED',
    
    # Errors
    'ClusteringError',
    'InvalidArgumentError',
    'NotSeededError',
    'DegenerateGeometryError',
    'ConvergenceWarning',
    
    # Base engine
    'BaseClusteringEngine'
]
