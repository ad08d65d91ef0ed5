"""Initialization strategies for clustering algorithms."""

from .random import RandomPartitionInit, RandomPrototypeInit

__all__ = [
    'RandomPartitionInit',
    'RandomPrototypeInit'
]
