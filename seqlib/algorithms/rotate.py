"""
Rotate and Swap Ranges
======================
Block exchange using nothing but element swaps and single steps, so it
works for any bidirectional (even forward-only) traversal.
"""

from __future__ import annotations

from typing import Optional, Tuple

from seqlib.merge_stats import MergeStats
from seqlib.positions import Position


def swap_ranges(
    first1: Position,
    last1: Position,
    first2: Position,
    last2: Optional[Position] = None,
) -> Tuple[Position, Position]:
    """
    Swap ``[first1, last1)`` element-wise with the span starting at *first2*.

    Stops at whichever span ends first when *last2* is given.  Returns the
    positions reached in both spans.
    """
    while first1 != last1 and (last2 is None or first2 != last2):
        first1.swap_with(first2)
        first1 = first1.next()
        first2 = first2.next()
    return first1, first2


def rotate(
    first: Position,
    middle: Position,
    last: Position,
    stats: Optional[MergeStats] = None,
) -> Position:
    """
    Exchange ``[first, middle)`` and ``[middle, last)`` in place.

    Returns the new position of the element that was at *first*, i.e. the
    boundary between the two blocks after the exchange.
    """
    if first == middle:
        return last
    if middle == last:
        return first

    swaps = 0
    i = middle
    while True:
        first.swap_with(i)
        swaps += 1
        first = first.next()
        i = i.next()
        if i == last:
            break
        if first == middle:
            middle = i
    result = first

    if first != middle:
        i = middle
        while True:
            first.swap_with(i)
            swaps += 1
            first = first.next()
            i = i.next()
            if i == last:
                if first == middle:
                    break
                i = middle
            elif first == middle:
                middle = i

    if stats is not None:
        stats.swaps += swaps
        stats.rotations += 1
    return result
