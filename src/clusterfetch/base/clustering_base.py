"""
Base class for the prefetch clustering engines.

Holds what K-means and the Kohonen map share: validated train/test data, the
prefetch threshold, the random source, the cluster list, and the
``test()`` / ``report()`` side of the contract. Subclasses implement
``train()``.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List, Iterable, Set, Union
import torch
from torch import Tensor

from .data_structures import (
    Cluster, PrefetchReport, AlgorithmState, stack_prototypes, labels_from_members
)
from ..utils.metrics import evaluate_prefetch, threshold_sweep
from ..utils.validation import (
    validate_data, check_int, check_positive_int, check_threshold, check_random_state
)
from ..utils.device import parse_device


class BaseClusteringAlgorithm(ABC):
    """Base class implementing the train / test / report contract.

    Subclasses need to:
    - create ``self.clusters`` (flat list, row-major for a map)
    - implement ``train()``, returning False when nothing could be trained
    - set ``self.fitted_`` once the clusters are usable for ``test()``
    """

    # Constructor arguments reported by get_params, extended by subclasses
    _param_names = ('dim', 'prefetch_threshold', 'verbose', 'random_state', 'device')
    # Parameters that shape the data or the cluster list
    _fixed_params = ('dim', 'device')

    def __init__(self,
                 train_data: Union[Tensor, list],
                 test_data: Union[Tensor, list],
                 dim: int,
                 prefetch_threshold: float = 0.5,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[Union[str, torch.device]] = None):
        """
        Args:
            train_data: (n, dim) training vectors
            test_data: (m, dim) test vectors, index-aligned with the training clients
            dim: Vector dimensionality (number of resources)
            prefetch_threshold: Prototype value at or above which a resource is prefetched
            verbose: Verbosity level (0=silent, 1=progress, 2=detailed)
            random_state: Seed or torch.Generator (None for fresh entropy)
            device: Torch device (None for CPU, 'auto' for best available)
        """
        self.dim = check_positive_int(dim, 'dim')
        self.device = parse_device(device)
        self.train_data = validate_data(train_data, dim=self.dim, device=self.device,
                                        name='train_data')
        self.test_data = validate_data(test_data, dim=self.dim, device=self.device,
                                       name='test_data')
        self.prefetch_threshold = self._check_param('prefetch_threshold', prefetch_threshold)
        self.verbose = self._check_param('verbose', verbose)
        self.random_state = random_state
        self._generator = check_random_state(random_state)

        self.clusters: List[Cluster] = []

        # Algorithm state
        self.fitted_ = False
        self.n_iter_ = 0
        self.history_: List[AlgorithmState] = []
        self.report_: Optional[PrefetchReport] = None

    @abstractmethod
    def train(self) -> bool:
        """Train the clusters on ``train_data``.

        Returns:
            True if a usable model was produced
        """
        pass

    def test(self) -> bool:
        """Score the trained clusters' prefetch predictions on ``test_data``.

        Returns:
            True (degenerate counts score 0 rather than failing)
        """
        self._check_fitted()

        self.report_ = evaluate_prefetch(
            self.prototypes_,
            self.members_,
            self.test_data,
            self.prefetch_threshold
        )

        if self.verbose:
            print(f"Tested {self.report_.n_clients} clients at threshold "
                  f"{self.prefetch_threshold}: hitrate = {self.report_.hitrate:.4f}, "
                  f"accuracy = {self.report_.accuracy:.4f}")

        return True

    def report(self) -> PrefetchReport:
        """Results of the last ``test()``."""
        if self.report_ is None:
            raise RuntimeError("Model must be tested before calling report")
        return self.report_

    def threshold_sweep(self, thresholds: Iterable[float]) -> List[PrefetchReport]:
        """Score the trained clusters at several thresholds.

        Leaves ``prefetch_threshold`` and the last report untouched.
        """
        self._check_fitted()
        thresholds = [check_threshold(t) for t in thresholds]
        return threshold_sweep(self.prototypes_, self.members_, self.test_data, thresholds)

    def set_prefetch_threshold(self, prefetch_threshold: float) -> None:
        """Set the threshold used by the next ``test()``."""
        self.prefetch_threshold = check_threshold(prefetch_threshold)

    def _check_fitted(self) -> None:
        if not self.fitted_:
            raise RuntimeError("Model must be trained before calling test")

    def _assign_members(self, labels: Tensor) -> None:
        """Replace every cluster's current members according to (n,) labels."""
        for cluster in self.clusters:
            cluster.current_members = set()
        for index, label in enumerate(labels.tolist()):
            self.clusters[label].current_members.add(index)

    @property
    def prototypes_(self) -> Tensor:
        """(K, dim) copy of the cluster prototypes."""
        return stack_prototypes(self.clusters)

    @property
    def members_(self) -> List[Set[int]]:
        """Current member set of every cluster (copies)."""
        return [set(cluster.current_members) for cluster in self.clusters]

    @property
    def labels_(self) -> Tensor:
        """(n,) cluster of every training vector, -1 where unassigned."""
        return labels_from_members(self.members_, self.train_data.shape[0])

    @property
    def hitrate_(self) -> float:
        return self.report().hitrate

    @property
    def accuracy_(self) -> float:
        return self.report().accuracy

    def _check_param(self, name: str, value: Any) -> Any:
        """Validated value of a mutable parameter, used by __init__ and set_params."""
        if name == 'prefetch_threshold':
            return check_threshold(value)
        if name == 'verbose':
            return check_int(value, 'verbose')
        return value

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {name: getattr(self, name) for name in self._param_names}

    def set_params(self, **params) -> 'BaseClusteringAlgorithm':
        """Set parameters (sklearn compatibility)."""
        for key, value in params.items():
            if key not in self._param_names:
                raise ValueError(f"Invalid parameter {key!r} for {type(self).__name__}")
            if key in self._fixed_params:
                raise ValueError(f"{key} cannot be changed after construction")
            if key == 'random_state':
                self._generator = check_random_state(value)
            else:
                value = self._check_param(key, value)
            setattr(self, key, value)
        return self
