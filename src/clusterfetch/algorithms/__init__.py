"""Clustering algorithm implementations."""

from .kmeans import KMeans
from .kohonen import Kohonen
from .builder import ClusteringBuilder, create_clusterer

__all__ = [
    'KMeans',
    'Kohonen',
    'ClusteringBuilder',
    'create_clusterer'
]
