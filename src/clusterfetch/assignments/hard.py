"""
Nearest-prototype assignment.

Used for K-means reassignment, for the Kohonen best-matching-unit search,
and for the final membership pass of the map.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import AssignmentStrategy, DistanceMetric
from ..distances.euclidean import EuclideanDistance


class HardAssignment(AssignmentStrategy):
    """Every vector goes to the cluster with the nearest prototype.

    On exact ties the lowest cluster index wins (``torch.argmin`` returns the
    first minimal index), which for a Kohonen map is the first cell in
    row-major order.
    """

    def __init__(self, metric: Optional[DistanceMetric] = None):
        """
        Args:
            metric: Distance metric (Euclidean by default)
        """
        super().__init__()
        self.metric = metric if metric is not None else EuclideanDistance()

    def compute_assignments(self, points: Tensor, prototypes: Tensor,
                            **kwargs) -> Tensor:
        """Nearest prototype of every vector.

        Args:
            points: (n, d) client vectors
            prototypes: (K, d) prototypes

        Returns:
            (n,) long tensor of cluster indices, empty for n == 0
        """
        if points.shape[0] == 0:
            return torch.zeros(0, dtype=torch.long, device=points.device)

        return self.metric.compute(points, prototypes).argmin(dim=1)

    def nearest(self, point: Tensor, prototypes: Tensor) -> int:
        """Index of the prototype nearest to a single (d,) vector."""
        return int(self.compute_assignments(point.unsqueeze(0), prototypes)[0])
