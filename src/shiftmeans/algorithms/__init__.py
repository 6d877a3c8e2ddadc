"""Clustering engines."""

from .kmeans import KMeans
from .meanshift import MeanShift

__all__ = [
    'KMeans',
    'MeanShift'
]
