"""
Heap checks for random-access sequences (max-heap under the comparator).
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from seqlib.functional import Comparator, Projection, identity, less


def is_heap_until(
    seq: Sequence[Any],
    comparator: Optional[Comparator] = None,
    projection: Optional[Projection] = None,
) -> int:
    """Index of the first element that breaks the heap property, or ``len(seq)``."""
    comp = comparator or less
    proj = projection or identity
    n = len(seq)
    for child in range(1, n):
        parent = (child - 1) // 2
        if comp(proj(seq[parent]), proj(seq[child])):
            return child
    return n


def is_heap(
    seq: Sequence[Any],
    comparator: Optional[Comparator] = None,
    projection: Optional[Projection] = None,
) -> bool:
    return is_heap_until(seq, comparator, projection) == len(seq)
