"""
Lexicographical comparison of two spans.
"""

from __future__ import annotations

from typing import Optional

from seqlib.functional import Comparator, Projection, identity, less
from seqlib.positions import Position


def lexicographical_compare(
    first1: Position,
    last1: Position,
    first2: Position,
    last2: Position,
    comparator: Optional[Comparator] = None,
    proj1: Optional[Projection] = None,
    proj2: Optional[Projection] = None,
) -> bool:
    """True when ``[first1, last1)`` orders strictly before ``[first2, last2)``."""
    comp = comparator or less
    proj1 = proj1 or identity
    proj2 = proj2 or identity
    while first1 != last1 and first2 != last2:
        a = proj1(first1.read())
        b = proj2(first2.read())
        if comp(a, b):
            return True
        if comp(b, a):
            return False
        first1 = first1.next()
        first2 = first2.next()
    # A proper prefix orders first
    return first1 == last1 and first2 != last2
