"""
Partition Copy
==============
Split a span into two outputs by a unary predicate, preserving order
within each output.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Tuple

from seqlib.functional import Projection, identity
from seqlib.positions import Position


def partition_copy(
    first: Position,
    last: Position,
    out_true: Position,
    out_false: Position,
    predicate: Callable[[Any], bool],
    projection: Optional[Projection] = None,
) -> Tuple[Position, Position, Position]:
    """
    Copy each element of ``[first, last)`` to *out_true* or *out_false*.

    Returns ``(last, out_true_end, out_false_end)``.
    """
    proj = projection or identity
    while first != last:
        value = first.read()
        if predicate(proj(value)):
            out_true.write(value)
            out_true = out_true.next()
        else:
            out_false.write(value)
            out_false = out_false.next()
        first = first.next()
    return first, out_true, out_false
