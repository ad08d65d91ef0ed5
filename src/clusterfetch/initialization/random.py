"""
Random initialization strategies.

K-means starts from a random partition of the training points; the Kohonen
map starts from prototypes drawn uniformly from [0, 1).
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy


class RandomPartitionInit(InitializationStrategy):
    """Random partition: every point is put into a uniformly random cluster."""

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> Tensor:
        """Draw an initial label for every point.

        Args:
            points: (n, d) data points
            n_clusters: Number of clusters
            generator: Random source

        Returns:
            (n,) tensor of labels in [0, n_clusters)
        """
        n_points = points.shape[0]

        # Draw on the CPU generator, then move
        labels = torch.randint(0, n_clusters, (n_points,), generator=generator)

        return labels.to(points.device)


class RandomPrototypeInit(InitializationStrategy):
    """Independent uniform [0, 1) values for every prototype dimension."""

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   dimension: Optional[int] = None,
                   **kwargs) -> Tensor:
        """Draw initial prototypes.

        Args:
            points: (n, d) data points (only shape, dtype and device are used)
            n_clusters: Number of prototypes
            generator: Random source
            dimension: Prototype length (defaults to the width of ``points``)

        Returns:
            (n_clusters, dimension) tensor
        """
        if dimension is None:
            dimension = points.shape[1]

        prototypes = torch.rand(n_clusters, dimension, generator=generator,
                                dtype=points.dtype)

        return prototypes.to(points.device)
