"""
Builder for constructing clusterers.

Provides a fluent interface for collecting the settings both engines share
(data, dimensionality, threshold, seed, ...) and a name-based factory used by
the command-line runner.
"""

from typing import Optional, Union, Dict, Any
import torch
from torch import Tensor

from ..base.clustering_base import BaseClusteringAlgorithm
from ..utils.validation import validate_data
from .kmeans import KMeans
from .kohonen import Kohonen


ALGORITHMS = {
    'kmeans': KMeans,
    'kohonen': Kohonen,
}


def infer_dim(train_data: Tensor, test_data: Tensor) -> int:
    """Vector dimensionality of the first non-empty data set."""
    for data in (train_data, test_data):
        if data.dim() == 2 and data.shape[0] > 0:
            return int(data.shape[1])
    raise ValueError("Cannot infer dim from empty train and test data; pass dim explicitly")


class ClusteringBuilder:
    """Fluent builder for creating clusterers.

    Examples
    --------
    >>> model = (ClusteringBuilder()
    ...     .with_data(train, test)
    ...     .with_prefetch_threshold(0.4)
    ...     .with_random_state(0)
    ...     .kmeans(n_clusters=5))

    >>> som = (ClusteringBuilder()
    ...     .with_data(train, test)
    ...     .kohonen(map_size=4, epochs=100))
    """

    def __init__(self):
        """Initialize builder with defaults."""
        self._train_data = None
        self._test_data = None
        self._dim = None

        # Algorithm parameters
        self._prefetch_threshold = 0.5
        self._verbose = 0
        self._random_state = None
        self._device = None

    def with_data(self, train_data, test_data, dim: Optional[int] = None) -> 'ClusteringBuilder':
        """Set training and test vectors (dim inferred when not given)."""
        self._train_data = validate_data(train_data, dim=dim, name='train_data')
        self._test_data = validate_data(test_data, dim=dim, name='test_data')
        self._dim = dim if dim is not None else infer_dim(self._train_data, self._test_data)
        return self

    def with_prefetch_threshold(self, prefetch_threshold: float) -> 'ClusteringBuilder':
        """Set prefetch threshold."""
        self._prefetch_threshold = prefetch_threshold
        return self

    def with_verbose(self, verbose: int) -> 'ClusteringBuilder':
        """Set verbosity level."""
        self._verbose = verbose
        return self

    def with_random_state(self, random_state: Optional[Union[int, torch.Generator]]) -> 'ClusteringBuilder':
        """Set random seed."""
        self._random_state = random_state
        return self

    def with_device(self, device: Union[str, torch.device]) -> 'ClusteringBuilder':
        """Set computation device."""
        self._device = device
        return self

    def _common_kwargs(self) -> Dict[str, Any]:
        if self._train_data is None:
            raise ValueError("No data configured; call with_data() first")
        return {
            'train_data': self._train_data,
            'test_data': self._test_data,
            'dim': self._dim,
            'prefetch_threshold': self._prefetch_threshold,
            'verbose': self._verbose,
            'random_state': self._random_state,
            'device': self._device,
        }

    def kmeans(self, n_clusters: int, max_iter: Optional[int] = None) -> KMeans:
        """Build a K-means clusterer."""
        return KMeans(n_clusters=n_clusters, max_iter=max_iter, **self._common_kwargs())

    def kohonen(self, map_size: int, epochs: int,
                initial_learning_rate: float = Kohonen.INITIAL_LEARNING_RATE) -> Kohonen:
        """Build a Kohonen map clusterer."""
        return Kohonen(map_size=map_size, epochs=epochs,
                       initial_learning_rate=initial_learning_rate,
                       **self._common_kwargs())

    def build(self, algorithm: str, **params) -> BaseClusteringAlgorithm:
        """Build a clusterer by name ('kmeans' or 'kohonen')."""
        if algorithm not in ALGORITHMS:
            raise ValueError(f"Unknown algorithm {algorithm!r}; "
                             f"choose from {sorted(ALGORITHMS)}")
        return getattr(self, algorithm)(**params)


def create_clusterer(algorithm: str, train_data, test_data,
                     dim: Optional[int] = None, **kwargs) -> BaseClusteringAlgorithm:
    """Create a clusterer by name.

    Parameters
    ----------
    algorithm : str
        'kmeans' or 'kohonen'
    train_data, test_data : array-like
        Training and test vectors
    dim : int, optional
        Vector dimensionality (inferred from the data when omitted)
    **kwargs
        Algorithm parameters (n_clusters / max_iter for K-means; map_size /
        epochs / initial_learning_rate for Kohonen) plus prefetch_threshold,
        verbose, random_state, device

    Returns
    -------
    The configured, untrained clusterer
    """
    builder = ClusteringBuilder().with_data(train_data, test_data, dim=dim)

    if 'prefetch_threshold' in kwargs:
        builder.with_prefetch_threshold(kwargs.pop('prefetch_threshold'))
    if 'verbose' in kwargs:
        builder.with_verbose(kwargs.pop('verbose'))
    if 'random_state' in kwargs:
        builder.with_random_state(kwargs.pop('random_state'))
    if 'device' in kwargs:
        builder.with_device(kwargs.pop('device'))

    return builder.build(algorithm, **kwargs)
