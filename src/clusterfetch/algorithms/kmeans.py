"""
K-means clustering of client access vectors.

Starts from a random partition and alternates prototype recomputation and
nearest-prototype reassignment until no cluster's membership changes.
"""

from typing import Optional, Union
import time
import warnings
import torch
from torch import Tensor

from ..base.clustering_base import BaseClusteringAlgorithm
from ..base.data_structures import Cluster, AlgorithmState
from ..assignments.hard import HardAssignment
from ..distances.euclidean import EuclideanDistance
from ..initialization.random import RandomPartitionInit
from ..updates.mean import MeanUpdater
from ..utils.convergence import MembershipUnchanged
from ..utils.validation import check_positive_int


class KMeans(BaseClusteringAlgorithm):
    """K-means clustering algorithm.

    Partitions the training clients into K clusters whose prototypes are the
    per-resource mean of their members; the prototypes then drive prefetch
    predictions in ``test()``.

    Parameters
    ----------
    n_clusters : int
        Number of clusters K
    train_data : array-like of shape (n_clients, dim)
        Training vectors
    test_data : array-like of shape (n_clients, dim)
        Test vectors, index-aligned with the training clients
    dim : int
        Vector dimensionality
    prefetch_threshold : float, default=0.5
        Prototype value at or above which a resource is prefetched
    max_iter : int, optional
        Iteration cap. None (default) iterates until membership is stable
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        Random source for the initial partition
    device : torch.device, optional
        Device for computation

    Attributes
    ----------
    prototypes_ : Tensor of shape (n_clusters, dim)
        Cluster prototypes
    members_ : list of set
        Training indices of every cluster
    labels_ : Tensor of shape (n_clients,)
        Cluster of every training vector
    n_iter_ : int
        Number of iterations run
    converged_ : bool
        Whether the last run reached a stable membership
    """

    _param_names = BaseClusteringAlgorithm._param_names + ('n_clusters', 'max_iter')
    _fixed_params = BaseClusteringAlgorithm._fixed_params + ('n_clusters',)

    def __init__(self,
                 n_clusters: int,
                 train_data: Union[Tensor, list],
                 test_data: Union[Tensor, list],
                 dim: int,
                 prefetch_threshold: float = 0.5,
                 max_iter: Optional[int] = None,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[torch.device] = None):
        """Initialize K-means algorithm."""
        self.n_clusters = check_positive_int(n_clusters, 'n_clusters')
        super().__init__(
            train_data=train_data,
            test_data=test_data,
            dim=dim,
            prefetch_threshold=prefetch_threshold,
            verbose=verbose,
            random_state=random_state,
            device=device
        )
        self.max_iter = self._check_param('max_iter', max_iter)
        self.converged_ = False

        self._create_components()
        self._reset_clusters()

    def _check_param(self, name, value):
        if name == 'max_iter':
            return None if value is None else check_positive_int(value, 'max_iter')
        return super()._check_param(name, value)

    def _create_components(self) -> None:
        """Create K-means specific components."""
        self.assignment_strategy = HardAssignment(EuclideanDistance())
        self.update_strategy = MeanUpdater()
        self.initialization_strategy = RandomPartitionInit()
        self.convergence_criterion = MembershipUnchanged()

    def _reset_clusters(self) -> None:
        """K empty clusters with all-zero prototypes."""
        self.clusters = [
            Cluster(prototype=torch.zeros(self.dim, device=self.device))
            for _ in range(self.n_clusters)
        ]

    def train(self) -> bool:
        """Run K-means from a fresh random partition.

        Returns
        -------
        bool
            False if there is no training data (the model stays untrained),
            True otherwise
        """
        self._reset_clusters()
        self.fitted_ = False
        self.converged_ = False
        self.report_ = None
        self.n_iter_ = 0
        self.history_ = []
        self.convergence_criterion.reset()

        X = self.train_data
        n_points = X.shape[0]

        if n_points == 0:
            if self.verbose:
                print("No training data, nothing to cluster")
            return False

        if self.verbose:
            print(f"Partitioning {n_points} clients into {self.n_clusters} random clusters...")

        start_time = time.time()
        labels = self.initialization_strategy.initialize(
            X, self.n_clusters, generator=self._generator
        )
        self._assign_members(labels)

        iteration = 0
        converged = False
        while True:
            iter_start_time = time.time()

            for cluster in self.clusters:
                cluster.shift_members()
                cluster.reset_prototype()

            # Update step
            for cluster in self.clusters:
                self.update_strategy.update(cluster, X, members=cluster.previous_members)

            # Assignment step
            new_labels = self.assignment_strategy.compute_assignments(X, self.prototypes_)
            self._assign_members(new_labels)

            converged = self.convergence_criterion.check({
                'iteration': iteration,
                'clusters': self.clusters
            })

            n_moved = int((new_labels != labels).sum().item())
            labels = new_labels

            iter_time = time.time() - iter_start_time
            self.history_.append(AlgorithmState(
                iteration=iteration,
                elapsed=iter_time,
                converged=converged,
                metadata={
                    'n_moved': n_moved,
                    'n_changed_clusters': self.convergence_criterion.history[-1]['n_changed_clusters']
                }
            ))

            if self.verbose >= 2 or (self.verbose >= 1 and iteration % 10 == 0):
                print(f"Iteration {iteration:3d}: {n_moved} clients reassigned ({iter_time:.3f}s)")

            iteration += 1

            if converged:
                if self.verbose:
                    print(f"Converged at iteration {iteration - 1}")
                break

            if self.max_iter is not None and iteration >= self.max_iter:
                warnings.warn(f"Failed to converge after {self.max_iter} iterations")
                break

        self.n_iter_ = iteration
        self.converged_ = converged

        if self.verbose:
            print(f"Total training time: {time.time() - start_time:.3f}s")

        self.fitted_ = True
        return True

    def __repr__(self) -> str:
        return (f"KMeans(n_clusters={self.n_clusters}, dim={self.dim}, "
                f"prefetch_threshold={self.prefetch_threshold})")
