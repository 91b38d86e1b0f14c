"""
Merge Sort
==========
Stable merge sorts built on the adaptive in-place merge.

``merge_sort_in_place`` sorts a mutable sequence bottom-up: runs of width
1, 2, 4, ... are merged pairwise with ``merge_in_place``, so the sort needs
no memory beyond the merge's optional scratch buffer.  ``merge_sort`` keeps
the familiar ``sorted()``-like signature and returns a fresh list.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, TypeVar

from seqlib.algorithms.inplace_merge import merge_in_place
from seqlib.functional import Comparator, Projection
from seqlib.positions import distance, positions

T = TypeVar("T")


def merge_sort(
    seq: Sequence[T],
    *,
    key: Optional[Callable[[T], Any]] = None,
) -> List[T]:
    """
    Return a new list containing items from *seq* in ascending order.

    Parameters
    ----------
    seq : sequence
        Input items (list, tuple, set, dict_keys, …).
    key : callable, optional
        One-argument function used to extract a comparison key from each
        element, identical semantics to ``sorted(…, key=…)``.

    Returns
    -------
    list
        A fresh sorted list.  The original *seq* is never mutated.
    """
    items: List[T] = list(seq)
    merge_sort_in_place(items, projection=key)
    return items


def merge_sort_in_place(
    seq: Any,
    comparator: Optional[Comparator] = None,
    projection: Optional[Projection] = None,
    **merge_kwargs: Any,
) -> None:
    """
    Sort *seq* in place, stably.

    Works on anything ``positions()`` understands: lists, arrays, numpy
    arrays and ``LinkedSequence``.  Extra keyword arguments (``use_buffer``,
    ``buffer_threshold``, ...) are passed to every ``merge_in_place`` call.
    """
    begin, end = positions(seq)
    n = distance(begin, end)
    width = 1
    while width < n:
        lo = begin
        remaining = n
        while remaining > width:
            run = min(2 * width, remaining)
            mid = lo.advance(width)
            hi = mid.advance(run - width)
            merge_in_place(lo, mid, hi, comparator, projection, **merge_kwargs)
            lo = hi
            remaining -= run
        width *= 2
