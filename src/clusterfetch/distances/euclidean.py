"""
Euclidean distance metric for clustering.

The only metric both engines use: nearest-prototype search in K-means
reassignment and best-matching-unit search in the Kohonen map.
"""

import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric


class EuclideanDistance(DistanceMetric):
    """Euclidean distance metric.

    Computes sqrt(sum_i (x_i - p_i)^2) between every point x and every
    prototype p.
    """

    def compute(self, points: Tensor, prototypes: Tensor, **kwargs) -> Tensor:
        """Compute Euclidean distances from points to prototypes.

        Args:
            points: (n, d) tensor of points
            prototypes: (K, d) tensor of prototypes

        Returns:
            (n, K) tensor of distances
        """
        if points.shape[-1] != prototypes.shape[-1]:
            raise ValueError(f"Dimension mismatch: points have {points.shape[-1]}, "
                             f"prototypes have {prototypes.shape[-1]}")

        # Explicit differences keep d(x, x) exactly 0
        diff = points.unsqueeze(1) - prototypes.unsqueeze(0)
        return torch.sqrt(torch.sum(diff * diff, dim=2))
