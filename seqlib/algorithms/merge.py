"""
Merge
=====
Stable two-way merge of sorted spans into an output position.
"""

from __future__ import annotations

from seqlib.functional import Comparator, Projection, identity, less
from seqlib.positions import Position


def merge(
    first1: Position,
    last1: Position,
    first2: Position,
    last2: Position,
    out: Position,
    comparator: Comparator = less,
    projection: Projection = identity,
) -> Position:
    """
    Merge ``[first1, last1)`` and ``[first2, last2)`` into *out*.

    An element of the second span is written first only when it compares
    strictly less than the current element of the first span, so equal
    elements keep first-span-first order.  Returns the position after the
    last element written.
    """
    while first1 != last1 and first2 != last2:
        a = first1.read()
        b = first2.read()
        if comparator(projection(b), projection(a)):
            out.write(b)
            first2 = first2.next()
        else:
            out.write(a)
            first1 = first1.next()
        out = out.next()

    # Copy whichever tail remains
    while first1 != last1:
        out.write(first1.read())
        first1 = first1.next()
        out = out.next()
    while first2 != last2:
        out.write(first2.read())
        first2 = first2.next()
        out = out.next()
    return out
