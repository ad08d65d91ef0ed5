"""
Prefetch evaluation metrics.

Turns cluster prototypes into binary prefetch predictions and scores them
against the test clients' actual requests. Both engines score through
``evaluate_prefetch``; there is no engine-specific scoring code.

Hitrate is the fraction of requested resources that were prefetched,
accuracy the fraction of prefetched resources that were requested, each
averaged over all test clients.
"""

from typing import Iterable, List, Optional, Sequence, Set, Tuple
import torch
from torch import Tensor
import warnings

from ..base.data_structures import PrefetchReport, labels_from_members


def prefetch_predictions(prototypes: Tensor,
                         prefetch_threshold: float = 0.5) -> Tuple[Tensor, Tensor]:
    """Binary prefetch decisions per cluster.

    Args:
        prototypes: (K, d) cluster prototypes
        prefetch_threshold: Resource i is prefetched iff prototype[i] >= threshold

    Returns:
        predictions: (K, d) int64 tensor of 0/1 decisions
        totals: (K,) number of resources predicted per cluster
    """
    predictions = (prototypes >= prefetch_threshold).to(torch.int64)
    return predictions, predictions.sum(dim=1)


def owner_lookup(memberships: Iterable[Set[int]], n_clients: int,
                 device: Optional[torch.device] = None) -> Tensor:
    """Owning cluster of every test client (-1 if none).

    The first cluster in scan order containing a client index owns it.
    """
    owners = labels_from_members(memberships, n_clients)
    if device is not None:
        owners = owners.to(device)
    return owners


def _safe_ratio(numerator: Tensor, denominator: Tensor) -> Tensor:
    """Elementwise numerator / denominator, 0 where the denominator is 0."""
    numerator = numerator.to(torch.float64)
    denominator = denominator.to(torch.float64)
    ratio = numerator / denominator.clamp(min=1.0)
    return torch.where(denominator > 0, ratio, torch.zeros_like(ratio))


def evaluate_prefetch(prototypes: Tensor,
                      memberships: Sequence[Set[int]],
                      test_data: Tensor,
                      prefetch_threshold: float = 0.5) -> PrefetchReport:
    """Score prefetch predictions of a clustering on a test set.

    Test clients are index-aligned with the training set: client m of the
    test set is the client the membership sets refer to as m.

    Args:
        prototypes: (K, d) cluster prototypes (flattened for a map)
        memberships: K member sets of training indices, same order as prototypes
        test_data: (m, d) test vectors; 1.0 marks a requested resource
        prefetch_threshold: Prototype value at or above which a resource is prefetched

    Returns:
        PrefetchReport with averaged hitrate/accuracy and per-client counts
    """
    if prototypes.shape[0] != len(memberships):
        raise ValueError(f"Got {prototypes.shape[0]} prototypes but "
                         f"{len(memberships)} membership sets")

    n_clients = test_data.shape[0]
    device = test_data.device

    predictions, totals = prefetch_predictions(prototypes.to(device), prefetch_threshold)
    owners = owner_lookup(memberships, n_clients, device=device)

    # Clients without an owner are scored against the first cluster.
    unowned = owners < 0
    n_unowned = int(unowned.sum().item())
    if n_unowned:
        warnings.warn(f"{n_unowned} test client(s) have no owning cluster; "
                      f"scoring them against cluster 0")
    scoring_owners = torch.where(unowned, torch.zeros_like(owners), owners)

    if prototypes.shape[0] > 0:
        client_predictions = predictions[scoring_owners]
        predicted = totals[scoring_owners]
    else:
        client_predictions = torch.zeros(test_data.shape, dtype=torch.int64, device=device)
        predicted = torch.zeros(n_clients, dtype=torch.int64, device=device)

    requested = test_data == 1.0
    requests = requested.sum(dim=1)
    hits = (requested & (client_predictions.to(test_data.dtype) == test_data)).sum(dim=1)

    hitrate_terms = _safe_ratio(hits, requests)
    accuracy_terms = _safe_ratio(hits, predicted)

    if n_clients > 0:
        hitrate = hitrate_terms.sum().item() / n_clients
        accuracy = accuracy_terms.sum().item() / n_clients
    else:
        hitrate = 0.0
        accuracy = 0.0

    return PrefetchReport(
        hitrate=hitrate,
        accuracy=accuracy,
        prefetch_threshold=float(prefetch_threshold),
        n_clients=n_clients,
        hits=hits,
        requests=requests,
        predicted=predicted,
        owners=owners
    )


def threshold_sweep(prototypes: Tensor,
                    memberships: Sequence[Set[int]],
                    test_data: Tensor,
                    thresholds: Iterable[float]) -> List[PrefetchReport]:
    """Evaluate the same clustering at several prefetch thresholds.

    Returns:
        One report per threshold, in the order given
    """
    return [
        evaluate_prefetch(prototypes, memberships, test_data, threshold)
        for threshold in thresholds
    ]
