"""Base classes and interfaces for the clusterfetch engines."""

from .interfaces import (
    DistanceMetric,
    AssignmentStrategy,
    ParameterUpdater,
    InitializationStrategy,
    ConvergenceCriterion
)

from .data_structures import (
    Cluster,
    PrefetchReport,
    AlgorithmState,
    stack_prototypes,
    members_from_labels,
    labels_from_members
)

from .clustering_base import BaseClusteringAlgorithm

__all__ = [
    # Interfaces
    'DistanceMetric',
    'AssignmentStrategy',
    'ParameterUpdater',
    'InitializationStrategy',
    'ConvergenceCriterion',

    # Data structures
    'Cluster',
    'PrefetchReport',
    'AlgorithmState',
    'stack_prototypes',
    'members_from_labels',
    'labels_from_members',

    # Base algorithm
    'BaseClusteringAlgorithm'
]
