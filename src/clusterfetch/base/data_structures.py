"""
Core data structures for the clusterfetch engines.

Clusters are plain records (prototype plus membership sets) kept in a flat,
index-addressable list. A Kohonen map stores its cells in the same list in
row-major order.
"""

from typing import List, Dict, Any, Iterable, Set
import torch
from torch import Tensor
from dataclasses import dataclass, field


@dataclass(eq=False)
class Cluster:
    """A single cluster: prototype vector and member bookkeeping.

    ``previous_members`` is only used by K-means, to compare membership
    between iterations.
    """

    prototype: Tensor  # (d,)
    current_members: Set[int] = field(default_factory=set)
    previous_members: Set[int] = field(default_factory=set)

    @property
    def dimension(self) -> int:
        return self.prototype.shape[0]

    @property
    def size(self) -> int:
        return len(self.current_members)

    def shift_members(self) -> None:
        """Make the current members the previous ones and start empty."""
        self.previous_members = self.current_members
        self.current_members = set()

    def reset_prototype(self) -> None:
        """Replace the prototype with an all-zero vector."""
        self.prototype = torch.zeros_like(self.prototype)

    def membership_changed(self) -> bool:
        return self.current_members != self.previous_members


def stack_prototypes(clusters: List[Cluster]) -> Tensor:
    """Stack cluster prototypes into a (K, d) tensor (a copy)."""
    return torch.stack([cluster.prototype for cluster in clusters])


def members_from_labels(labels: Tensor, n_clusters: int) -> List[Set[int]]:
    """Convert (n,) hard labels into one member set per cluster."""
    members: List[Set[int]] = [set() for _ in range(n_clusters)]
    for index, label in enumerate(labels.tolist()):
        members[label].add(index)
    return members


def labels_from_members(memberships: Iterable[Set[int]], n_points: int) -> Tensor:
    """Convert member sets into (n,) labels.

    The first cluster (in scan order) containing a point owns it; points that
    no cluster contains get label -1. Indices outside ``[0, n_points)`` are
    ignored.
    """
    owners = [-1] * n_points
    for k, members in enumerate(memberships):
        for index in members:
            if 0 <= index < n_points and owners[index] < 0:
                owners[index] = k
    return torch.tensor(owners, dtype=torch.long)


@dataclass
class PrefetchReport:
    """Result of scoring prefetch predictions against a test set.

    Scalars are the averaged metrics; the per-client tensors keep the raw
    counts they were computed from (owner -1 means the client had no
    owning cluster).
    """

    hitrate: float
    accuracy: float
    prefetch_threshold: float
    n_clients: int

    hits: Tensor       # (m,) correctly predicted requests per client
    requests: Tensor   # (m,) requested resources per client
    predicted: Tensor  # (m,) resources predicted for the client's cluster
    owners: Tensor     # (m,) owning cluster per client, -1 if none

    @property
    def combined(self) -> float:
        """Hitrate plus accuracy, the single figure used to compare runs."""
        return self.hitrate + self.accuracy

    def to_dict(self) -> Dict[str, Any]:
        return {
            'prefetch_threshold': self.prefetch_threshold,
            'hitrate': self.hitrate,
            'accuracy': self.accuracy,
            'combined': self.combined,
            'n_clients': self.n_clients,
        }


@dataclass
class AlgorithmState:
    """State of a training run after one iteration (K-means) or epoch (SOM)."""

    iteration: int
    elapsed: float
    converged: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)
