"""
Kohonen self-organizing map for client access vectors.

An n x n grid of prototypes, seeded uniformly in [0, 1) at construction, is
trained by competitive learning: every training vector pulls its best
matching unit and the square neighbourhood around it toward itself. Learning
rate and neighbourhood radius shrink linearly over a fixed number of epochs.
"""

from typing import Optional, Tuple, Union
import time
import warnings
import torch
from torch import Tensor

from ..base.clustering_base import BaseClusteringAlgorithm
from ..base.data_structures import Cluster, AlgorithmState
from ..assignments.hard import HardAssignment
from ..distances.euclidean import EuclideanDistance
from ..initialization.random import RandomPrototypeInit
from ..updates.neighborhood import NeighborhoodUpdater, LinearDecaySchedule
from ..utils.validation import check_int, check_positive_int, check_real


class Kohonen(BaseClusteringAlgorithm):
    """Kohonen map (SOM) clustering algorithm.

    Cells are kept in ``clusters`` in row-major order: cell (row, col) is
    ``clusters[row * map_size + col]``. Each cell's prototype is a view into
    one contiguous weight tensor, so ``prototype_grid_`` and the clusters
    always agree.

    Parameters
    ----------
    map_size : int
        Side length n of the n x n map
    epochs : int
        Number of passes over the training data. Values <= 0 leave the
        random seed prototypes untouched
    train_data : array-like of shape (n_clients, dim)
        Training vectors, presented in this order every epoch
    test_data : array-like of shape (n_clients, dim)
        Test vectors, index-aligned with the training clients
    dim : int
        Vector dimensionality
    initial_learning_rate : float, default=0.8
        Learning rate of the first epoch
    prefetch_threshold : float, default=0.5
        Prototype value at or above which a resource is prefetched
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        Random source for the seed prototypes
    device : torch.device, optional
        Device for computation
    """

    INITIAL_LEARNING_RATE = 0.8

    _param_names = BaseClusteringAlgorithm._param_names + (
        'map_size', 'epochs', 'initial_learning_rate'
    )
    _fixed_params = BaseClusteringAlgorithm._fixed_params + ('map_size',)

    def __init__(self,
                 map_size: int,
                 epochs: int,
                 train_data: Union[Tensor, list],
                 test_data: Union[Tensor, list],
                 dim: int,
                 initial_learning_rate: float = INITIAL_LEARNING_RATE,
                 prefetch_threshold: float = 0.5,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[torch.device] = None):
        """Initialize the map with random prototypes."""
        self.map_size = check_positive_int(map_size, 'map_size')
        self.epochs = self._check_param('epochs', epochs)
        super().__init__(
            train_data=train_data,
            test_data=test_data,
            dim=dim,
            prefetch_threshold=prefetch_threshold,
            verbose=verbose,
            random_state=random_state,
            device=device
        )
        self.initial_learning_rate = self._check_param('initial_learning_rate',
                                                       initial_learning_rate)
        self.n_clusters = self.map_size * self.map_size

        self._create_components()

        self._weights = self.initialization_strategy.initialize(
            self.train_data, self.n_clusters,
            generator=self._generator, dimension=self.dim
        )
        self.clusters = [
            Cluster(prototype=self._weights[index])
            for index in range(self.n_clusters)
        ]

    def _check_param(self, name, value):
        if name == 'epochs':
            value = check_int(value, 'epochs')
            if value <= 0:
                warnings.warn(f"epochs={value}: the map keeps its random seed prototypes")
            return value
        if name == 'initial_learning_rate':
            return check_real(value, 'initial_learning_rate')
        return super()._check_param(name, value)

    def _create_components(self) -> None:
        """Create Kohonen specific components."""
        self.assignment_strategy = HardAssignment(EuclideanDistance())
        self.update_strategy = NeighborhoodUpdater()
        self.initialization_strategy = RandomPrototypeInit()

    @property
    def schedule(self) -> Optional[LinearDecaySchedule]:
        """Learning rate / radius schedule, None when no epochs are run."""
        if self.epochs <= 0:
            return None
        return LinearDecaySchedule(self.initial_learning_rate, self.map_size, self.epochs)

    @property
    def prototype_grid_(self) -> Tensor:
        """(map_size, map_size, dim) view of the prototypes."""
        return self._weights.view(self.map_size, self.map_size, self.dim)

    @property
    def member_counts_(self) -> Tensor:
        """(map_size, map_size) number of training vectors per cell."""
        counts = torch.tensor([cluster.size for cluster in self.clusters], dtype=torch.long)
        return counts.view(self.map_size, self.map_size)

    def cell_index(self, row: int, col: int) -> int:
        """Flat index of cell (row, col)."""
        return row * self.map_size + col

    def best_matching_unit(self, vector: Tensor) -> Tuple[int, int]:
        """(row, col) of the cell whose prototype is nearest to ``vector``.

        Ties go to the first cell in row-major order.
        """
        index = self.assignment_strategy.nearest(vector, self._weights)
        return divmod(index, self.map_size)

    def train(self) -> bool:
        """Train the map for ``epochs`` passes, then assign members.

        Training continues from the current prototypes, so calling this twice
        trains the map further rather than starting over.

        Returns
        -------
        bool
            Always True
        """
        self.fitted_ = False
        self.report_ = None
        self.history_ = []
        for cluster in self.clusters:
            cluster.current_members = set()

        X = self.train_data
        grid = self.prototype_grid_
        schedule = self.schedule
        start_time = time.time()

        for epoch in range(max(self.epochs, 0)):
            epoch_start_time = time.time()
            learning_rate = schedule.learning_rate(epoch)
            radius = schedule.radius(epoch)

            # Presentation order matters: always the training-set order
            for index in range(X.shape[0]):
                vector = X[index]
                bmu = self.best_matching_unit(vector)
                self.update_strategy.update(
                    grid, vector,
                    bmu=bmu, radius=radius, learning_rate=learning_rate
                )

            epoch_time = time.time() - epoch_start_time
            self.history_.append(AlgorithmState(
                iteration=epoch,
                elapsed=epoch_time,
                metadata={'learning_rate': learning_rate, 'radius': radius}
            ))

            if self.verbose >= 2 or (self.verbose >= 1 and epoch % 10 == 0):
                print(f"Epoch {epoch:3d}/{self.epochs}: learning rate = {learning_rate:.4f}, "
                      f"radius = {radius} ({epoch_time:.3f}s)")

        labels = self.assignment_strategy.compute_assignments(X, self._weights)
        self._assign_members(labels)

        self.n_iter_ = max(self.epochs, 0)

        if self.verbose:
            print(f"Total training time: {time.time() - start_time:.3f}s")

        self.fitted_ = True
        return True

    def __repr__(self) -> str:
        return (f"Kohonen(map_size={self.map_size}, epochs={self.epochs}, dim={self.dim}, "
                f"initial_learning_rate={self.initial_learning_rate})")
