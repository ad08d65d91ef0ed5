"""
clusterfetch: clustering client access vectors for prefetch simulation.

Clients are described by fixed-length access vectors, one value per
resource. A clusterer groups the training clients; every resource whose
cluster prototype reaches the prefetch threshold is prefetched for the
cluster's clients, and the predictions are scored against a held-out test
set:

- K-means (random partition, mean prototypes, stable-membership stop)
- Kohonen self-organizing map (square neighbourhood, linear decay)

Example usage:
    >>> import torch
    >>> from clusterfetch import KMeans
    >>>
    >>> train = (torch.rand(200, 30) > 0.7).float()
    >>> test = (torch.rand(200, 30) > 0.7).float()
    >>>
    >>> kmeans = KMeans(n_clusters=5, train_data=train, test_data=test, dim=30,
    ...                 random_state=0)
    >>> kmeans.train()
    True
    >>> kmeans.set_prefetch_threshold(0.4)
    >>> kmeans.test()
    True
    >>> report = kmeans.report()
    >>> report.hitrate, report.accuracy
"""

__version__ = '0.1.0'

# Import main algorithms
from .algorithms.kmeans import KMeans
from .algorithms.kohonen import Kohonen
from .algorithms.builder import ClusteringBuilder, create_clusterer

# Import evaluation and data helpers
from .utils.metrics import evaluate_prefetch, threshold_sweep
from .utils.io import load_vectors

# Import visualization
from .visualization import (
    plot_prototypes,
    plot_map_membership,
    plot_threshold_sweep
)

# Convenience imports
from .base import (
    Cluster,
    PrefetchReport,
    BaseClusteringAlgorithm
)

__all__ = [
    # Algorithms
    'KMeans',
    'Kohonen',

    # Builder
    'ClusteringBuilder',
    'create_clusterer',

    # Evaluation and data
    'evaluate_prefetch',
    'threshold_sweep',
    'load_vectors',

    # Core data structures
    'Cluster',
    'PrefetchReport',
    'BaseClusteringAlgorithm',

    # Visualization
    'plot_prototypes',
    'plot_map_membership',
    'plot_threshold_sweep',

    # Version
    '__version__'
]
