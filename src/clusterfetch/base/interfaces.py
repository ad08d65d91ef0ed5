"""
Core interfaces for the clusterfetch clustering engines.

K-means and the Kohonen map are assembled from the same small strategy
objects: a distance, an assignment rule, a prototype update, an
initialization and (for K-means) a convergence test. Each seam is one
abstract class here.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List
import torch
from torch import Tensor


class DistanceMetric(ABC):
    """Distance between client vectors and cluster prototypes."""

    @abstractmethod
    def compute(self, points: Tensor, prototypes: Tensor, **kwargs) -> Tensor:
        """Distance from every vector to every prototype.

        Args:
            points: (n, d) client vectors
            prototypes: (K, d) prototypes, one per cluster or map cell

        Returns:
            (n, K) distance matrix
        """


class AssignmentStrategy(ABC):
    """Rule mapping each client vector to exactly one cluster."""

    @abstractmethod
    def compute_assignments(self, points: Tensor, prototypes: Tensor,
                            **kwargs) -> Tensor:
        """Cluster index of every vector.

        Args:
            points: (n, d) client vectors
            prototypes: (K, d) prototypes

        Returns:
            (n,) long tensor of indices in [0, K)
        """


class ParameterUpdater(ABC):
    """Moves prototypes toward the data they represent."""

    @abstractmethod
    def update(self, target: Any, points: Tensor, **kwargs) -> Any:
        """Update ``target`` in place or by replacing its prototype.

        ``target`` is a single cluster for mean updates and the whole
        prototype grid for neighbourhood updates.
        """


class InitializationStrategy(ABC):
    """Produces the starting state of a clusterer from its random source."""

    @abstractmethod
    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> Tensor:
        """Draw the initial labels (K-means) or prototypes (map).

        Args:
            points: (n, d) training vectors
            n_clusters: Number of clusters or map cells
            generator: Every random draw is taken from this generator
        """


class ConvergenceCriterion(ABC):
    """Stopping test for iterative training, with a per-check history."""

    def __init__(self):
        self.history: List[Dict[str, Any]] = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Record the state of one iteration and report whether to stop."""

    def reset(self):
        """Forget the recorded history before a new training run."""
        self.history = []
