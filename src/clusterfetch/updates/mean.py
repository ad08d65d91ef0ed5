"""
Mean update strategy for centroid-based clustering.
"""

from typing import Iterable, Optional
import torch
from torch import Tensor

from ..base.interfaces import ParameterUpdater
from ..base.data_structures import Cluster


class MeanUpdater(ParameterUpdater):
    """Sets a cluster prototype to the mean of its member points.

    A cluster without members gets an all-zero prototype.
    """

    def update(self, cluster: Cluster,
               points: Tensor,
               members: Optional[Iterable[int]] = None,
               **kwargs) -> Tensor:
        """Update cluster prototype.

        Args:
            cluster: Cluster to update
            points: (n, d) all training points
            members: Indices averaged over (defaults to ``cluster.previous_members``)
            **kwargs: Ignored

        Returns:
            The new prototype
        """
        if members is None:
            members = cluster.previous_members

        # Sorted so the float sum is independent of set iteration order
        indices = sorted(members)

        if not indices:
            cluster.prototype = torch.zeros(points.shape[1], dtype=points.dtype,
                                            device=points.device)
        else:
            index = torch.tensor(indices, dtype=torch.long, device=points.device)
            cluster.prototype = points.index_select(0, index).mean(dim=0)

        return cluster.prototype
