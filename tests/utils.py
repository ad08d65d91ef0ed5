# tests/utils.py
"""
Small, reusable helpers used across the clusterfetch test suite.

Functions:
- as_partition(members): member sets as a set of frozensets (cluster order ignored).
- is_partition(members, n): every index in [0, n) in exactly one set.
- time_block(label, meta=None): context manager that prints wall-clock time with optional metadata.
- print_timing(label, seconds, **meta): convenience printer for timings (used by time_block).
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from typing import Any, Dict, FrozenSet, Iterable, Set



def as_partition(members: Iterable[Set[int]]) -> Set[FrozenSet[int]]:
    """
    Non-empty member sets as a set of frozensets.

    Two clusterings with the same groups compare equal regardless of which
    cluster index each group landed in.
    """
    return {frozenset(m) for m in members if m}


def is_partition(members: Iterable[Set[int]], n: int) -> bool:
    """Every index in [0, n) belongs to exactly one set, and nothing else does."""
    seen = []
    for m in members:
        seen.extend(m)
    return sorted(seen) == list(range(n))


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Example
    -------
    >>> with time_block("train", {"n": 400, "d": 30, "K": 5}):
    ...     model.train()

    Output
    ------
    [timing] train {"n":400,"d":30,"K":5} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        print_timing(label, dt, **(meta or {}))


def print_timing(label: str, seconds: float, **meta: Any) -> None:
    """
    Print timing in a compact, machine-readable single line.

    Example:
    [timing] train {"n":400,"d":30,"K":5} 0.123s
    """
    meta_str = ""
    if meta:
        meta_str = " " + json.dumps(meta, separators=(",", ":"), default=repr)
    print(f"[timing] {label}{meta_str} {seconds:.3f}s")
