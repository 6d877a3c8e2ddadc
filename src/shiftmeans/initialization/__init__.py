"""Center seeding strategies."""

from .kmeans_plusplus import KMeansPlusPlusInit
from .random import RandomInit, random_index

__all__ = [
    'KMeansPlusPlusInit',
    'RandomInit',
    'random_index'
]
