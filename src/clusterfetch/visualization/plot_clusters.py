"""
Cluster visualization utilities.

Plots for inspecting what a trained clusterer would prefetch: prototype
heatmaps, Kohonen map occupancy, and hitrate/accuracy over a range of
prefetch thresholds.
"""

from typing import Optional, Sequence
from torch import Tensor
import matplotlib.pyplot as plt
import numpy as np

from ..base.data_structures import PrefetchReport


def plot_prototypes(prototypes: Tensor,
                    prefetch_threshold: Optional[float] = 0.5,
                    ax: Optional[plt.Axes] = None,
                    cmap: str = 'viridis',
                    show_colorbar: bool = True,
                    title: Optional[str] = None) -> plt.Axes:
    """Heatmap of cluster prototypes, one row per cluster.

    Args:
        prototypes: (K, d) cluster prototypes
        prefetch_threshold: Cells at or above it are marked as prefetched
            (None to skip the markers)
        ax: Matplotlib axes (created if None)
        cmap: Colormap name
        show_colorbar: Whether to add a colorbar
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 4))

    # Convert to numpy for matplotlib
    P = prototypes.detach().cpu().numpy()

    image = ax.imshow(P, aspect='auto', cmap=cmap, vmin=0.0, vmax=max(1.0, float(P.max(initial=0.0))))

    if prefetch_threshold is not None:
        rows, cols = np.nonzero(P >= prefetch_threshold)
        ax.scatter(cols, rows, marker='s', s=12, facecolors='none',
                   edgecolors='white', linewidth=0.8,
                   label=f'>= {prefetch_threshold}')
        if len(rows):
            ax.legend(loc='upper right')

    ax.set_xlabel('Resource')
    ax.set_ylabel('Cluster')

    if show_colorbar:
        ax.figure.colorbar(image, ax=ax)

    if title:
        ax.set_title(title)

    return ax


def plot_map_membership(member_counts: Tensor,
                        ax: Optional[plt.Axes] = None,
                        cmap: str = 'Blues',
                        annotate: bool = True,
                        title: Optional[str] = None) -> plt.Axes:
    """Kohonen map cells coloured by the number of member clients.

    Args:
        member_counts: (n, n) members per cell
        ax: Matplotlib axes (created if None)
        cmap: Colormap name
        annotate: Whether to write the count into every cell
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6))

    counts = member_counts.detach().cpu().numpy()
    ax.imshow(counts, cmap=cmap)

    if annotate:
        threshold = counts.max(initial=0) / 2.0
        for (row, col), value in np.ndenumerate(counts):
            ax.text(col, row, str(int(value)), ha='center', va='center',
                    color='white' if value > threshold else 'black')

    ax.set_xticks(range(counts.shape[1]))
    ax.set_yticks(range(counts.shape[0]))
    ax.set_xlabel('Column')
    ax.set_ylabel('Row')

    if title:
        ax.set_title(title)

    return ax


def plot_threshold_sweep(reports: Sequence[PrefetchReport],
                         ax: Optional[plt.Axes] = None,
                         show_combined: bool = True,
                         title: Optional[str] = None) -> plt.Axes:
    """Hitrate and accuracy as a function of the prefetch threshold.

    Args:
        reports: Reports from ``threshold_sweep``
        ax: Matplotlib axes (created if None)
        show_combined: Also plot hitrate + accuracy
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 5))

    ordered = sorted(reports, key=lambda r: r.prefetch_threshold)
    thresholds = [r.prefetch_threshold for r in ordered]

    ax.plot(thresholds, [r.hitrate for r in ordered], 'o-', label='Hitrate')
    ax.plot(thresholds, [r.accuracy for r in ordered], 's-', label='Accuracy')
    if show_combined:
        ax.plot(thresholds, [r.combined for r in ordered], '--', color='gray',
                label='Hitrate + Accuracy')

    ax.set_xlabel('Prefetch threshold')
    ax.set_ylabel('Score')
    ax.grid(True, alpha=0.3)
    ax.legend()

    if title:
        ax.set_title(title)

    return ax
