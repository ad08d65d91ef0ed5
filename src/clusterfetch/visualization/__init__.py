"""Visualization utilities for clustering results."""

from .plot_clusters import (
    plot_prototypes,
    plot_map_membership,
    plot_threshold_sweep
)

__all__ = [
    'plot_prototypes',
    'plot_map_membership',
    'plot_threshold_sweep'
]
