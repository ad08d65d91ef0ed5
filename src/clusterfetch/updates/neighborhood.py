"""
Neighbourhood update for Kohonen maps.

Every cell inside a square window around the best matching unit moves the
same fraction of the way toward the input vector; there is no
distance-weighted falloff. The window is clipped at the map edges, never
wrapped.
"""

from typing import Tuple
import math
from torch import Tensor

from ..base.interfaces import ParameterUpdater


class LinearDecaySchedule:
    """Learning rate and neighbourhood radius shrinking linearly over epochs.

    learning_rate(e) = initial_learning_rate * (1 - e / epochs)
    radius(e)        = floor((map_size / 2) * (1 - e / epochs))
    """

    def __init__(self, initial_learning_rate: float, map_size: int, epochs: int):
        if epochs <= 0:
            raise ValueError(f"epochs must be positive, got {epochs}")
        self.initial_learning_rate = initial_learning_rate
        self.map_size = map_size
        self.epochs = epochs

    def _remaining(self, epoch: int) -> float:
        return 1.0 - epoch / self.epochs

    def learning_rate(self, epoch: int) -> float:
        return self.initial_learning_rate * self._remaining(epoch)

    def radius(self, epoch: int) -> int:
        return int(math.floor((self.map_size / 2) * self._remaining(epoch)))

    def __repr__(self) -> str:
        return (f"LinearDecaySchedule(initial_learning_rate={self.initial_learning_rate}, "
                f"map_size={self.map_size}, epochs={self.epochs})")


class NeighborhoodUpdater(ParameterUpdater):
    """Moves the BMU and its square neighbourhood toward an input vector.

    ``prototype <- (1 - learning_rate) * prototype + learning_rate * vector``
    """

    def update(self, grid: Tensor,
               vector: Tensor,
               bmu: Tuple[int, int] = (0, 0),
               radius: int = 0,
               learning_rate: float = 0.0,
               **kwargs) -> Tuple[int, int, int, int]:
        """Update the neighbourhood of ``bmu`` in place.

        Args:
            grid: (rows, cols, d) prototype grid, modified in place
            vector: (d,) input vector
            bmu: (row, col) of the best matching unit
            radius: Chebyshev radius of the neighbourhood
            learning_rate: Interpolation weight of the input vector

        Returns:
            Inclusive bounds (row_begin, row_end, col_begin, col_end) of the
            updated block
        """
        n_rows, n_cols = grid.shape[0], grid.shape[1]
        row, col = bmu

        row_begin = max(row - radius, 0)
        row_end = min(row + radius, n_rows - 1)
        col_begin = max(col - radius, 0)
        col_end = min(col + radius, n_cols - 1)

        block = grid[row_begin:row_end + 1, col_begin:col_end + 1]
        block.mul_(1.0 - learning_rate).add_(vector.to(block.dtype), alpha=learning_rate)

        return row_begin, row_end, col_begin, col_end
