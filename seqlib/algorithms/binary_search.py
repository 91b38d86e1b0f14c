"""
Binary Search
=============
Monotonic searches over sorted spans.  ``value`` is compared in projected
space: ``comparator(projection(element), value)``.

The ``*_n`` variants take a length instead of an end position, which saves
a full walk on traversals without direct distances.
"""

from __future__ import annotations

from typing import Any

from seqlib.functional import Comparator, Projection, identity, less
from seqlib.positions import Position, distance


def lower_bound_n(
    first: Position,
    n: int,
    value: Any,
    comparator: Comparator = less,
    projection: Projection = identity,
) -> Position:
    """First position whose element is not less than *value*."""
    while n > 0:
        half = n // 2
        mid = first.advance(half)
        if comparator(projection(mid.read()), value):
            first = mid.next()
            n -= half + 1
        else:
            n = half
    return first


def upper_bound_n(
    first: Position,
    n: int,
    value: Any,
    comparator: Comparator = less,
    projection: Projection = identity,
) -> Position:
    """First position whose element is greater than *value*."""
    while n > 0:
        half = n // 2
        mid = first.advance(half)
        if not comparator(value, projection(mid.read())):
            first = mid.next()
            n -= half + 1
        else:
            n = half
    return first


def lower_bound(
    first: Position,
    last: Position,
    value: Any,
    comparator: Comparator = less,
    projection: Projection = identity,
) -> Position:
    return lower_bound_n(first, distance(first, last), value, comparator, projection)


def upper_bound(
    first: Position,
    last: Position,
    value: Any,
    comparator: Comparator = less,
    projection: Projection = identity,
) -> Position:
    return upper_bound_n(first, distance(first, last), value, comparator, projection)


def binary_search(
    first: Position,
    last: Position,
    value: Any,
    comparator: Comparator = less,
    projection: Projection = identity,
) -> bool:
    """Whether an element equivalent to *value* occurs in ``[first, last)``."""
    result = lower_bound(first, last, value, comparator, projection)
    return result != last and not comparator(value, projection(result.read()))
