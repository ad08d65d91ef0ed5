"""Prototype update strategies for clustering algorithms."""

from .mean import MeanUpdater
from .neighborhood import NeighborhoodUpdater, LinearDecaySchedule

__all__ = [
    'MeanUpdater',
    'NeighborhoodUpdater',
    'LinearDecaySchedule'
]
