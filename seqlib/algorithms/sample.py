"""
Sample
======
Random sampling without replacement.

Sized population (a pair of positions): selection sampling.  Walk the
population once and keep each element with probability
``needed / remaining``.  Every subset of size *n* is equally likely and the
chosen elements keep their relative order.

Unsized population (any iterable): reservoir sampling.  The first *n*
elements fill the output slots, and each later element replaces a random
slot with probability ``n / seen``.  Needs random access into the output;
the relative order of the sample is not preserved.
"""

from __future__ import annotations

import random
from typing import Any, Iterable, Iterator, Optional, Tuple, Union

from seqlib.positions import Position, distance


def sample(
    first: Union[Position, Iterable[Any]],
    last: Optional[Position],
    out: Position,
    n: int,
    rng: Optional[Any] = None,
) -> Tuple[Any, Position]:
    """
    Copy ``min(n, len)`` randomly chosen elements of the population to *out*.

    The population is ``[first, last)`` when *first* is a position, or the
    items of *first* when it is a plain iterable (*last* is then ignored and
    may be ``None``).  *rng* is any object with ``randrange``
    (``random.Random`` instance or the ``random`` module).

    Returns ``(population position reached, out_end)``; for an iterable the
    first item is the exhausted iterator.
    """
    if rng is None:
        rng = random
    if not isinstance(first, Position):
        return _reservoir(iter(first), out, n, rng)

    pop_size = distance(first, last)
    if n > pop_size:
        n = pop_size
    while n > 0 and first != last:
        if rng.randrange(pop_size) < n:
            out.write(first.read())
            out = out.next()
            n -= 1
        pop_size -= 1
        first = first.next()
    return first, out


def _reservoir(items: Iterator[Any], out: Position, n: int, rng: Any) -> Tuple[Iterator[Any], Position]:
    if n <= 0:
        return items, out
    seen = 0
    for item in items:
        slot = seen if seen < n else rng.randrange(seen + 1)
        if slot < n:
            out.advance(slot).write(item)
        seen += 1
    return items, out.advance(min(seen, n))
