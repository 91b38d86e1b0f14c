"""
Sequence Positions
==================
The minimal traversal contract every algorithm in the package is written
against, plus the index-based and reverse implementations of it.

A position names one slot of a mutable sequence (or the one-past-the-end
slot).  Positions are values: stepping returns a new position and never
mutates the receiver, so algorithms can keep several of them around while
moving elements between slots.

Primitives:
- read / write the element at the position
- step forward / backward by one
- forward distance to a reachable position
- swap the elements at two positions
- advance by n (native for random access, stepped otherwise)
"""

from __future__ import annotations

import array
from typing import Any, MutableSequence, Optional, Protocol, Tuple, runtime_checkable

import numpy as np

from seqlib.merge_errors import IncompatiblePositionsError


@runtime_checkable
class Position(Protocol):
    """Bidirectional position over a mutable sequence."""

    def read(self) -> Any: ...

    def write(self, value: Any) -> None: ...

    def next(self) -> "Position": ...

    def prev(self) -> "Position": ...

    def distance_to(self, other: "Position") -> int: ...

    def swap_with(self, other: "Position") -> None: ...

    def advance(self, n: int) -> "Position": ...


class IndexPosition:
    """Random-access position: an integer index into a mutable sequence."""

    __slots__ = ("seq", "index")

    def __init__(self, seq: MutableSequence[Any], index: int):
        self.seq = seq
        self.index = index

    def read(self) -> Any:
        return self.seq[self.index]

    def write(self, value: Any) -> None:
        self.seq[self.index] = value

    def next(self) -> "IndexPosition":
        return IndexPosition(self.seq, self.index + 1)

    def prev(self) -> "IndexPosition":
        return IndexPosition(self.seq, self.index - 1)

    def advance(self, n: int) -> "IndexPosition":
        return IndexPosition(self.seq, self.index + n)

    def distance_to(self, other: "IndexPosition") -> int:
        if other.seq is not self.seq:
            raise IncompatiblePositionsError(
                "positions refer to different sequences",
                context="IndexPosition.distance_to",
            )
        return other.index - self.index

    def swap_with(self, other: "IndexPosition") -> None:
        i, j = self.index, other.index
        held = self.seq[i]
        # Rows of a multi-dimensional array are views; hold a copy
        if isinstance(held, np.ndarray):
            held = held.copy()
        self.seq[i] = other.seq[j]
        other.seq[j] = held

    @property
    def trivially_movable(self) -> bool:
        seq = self.seq
        if isinstance(seq, np.ndarray):
            return seq.dtype != np.dtype(object)
        return isinstance(seq, (list, bytearray, array.array))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexPosition):
            return NotImplemented
        return self.seq is other.seq and self.index == other.index

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash((id(self.seq), self.index))

    def __repr__(self) -> str:
        return f"IndexPosition(<{type(self.seq).__name__}>, {self.index})"


class ReversePosition:
    """
    Reverse adaptor over a bidirectional position.

    ``ReversePosition(base)`` addresses the element just before ``base``;
    stepping forward moves ``base`` backward.
    """

    __slots__ = ("base",)

    def __init__(self, base: Position):
        self.base = base

    def read(self) -> Any:
        return self.base.prev().read()

    def write(self, value: Any) -> None:
        self.base.prev().write(value)

    def next(self) -> "ReversePosition":
        return ReversePosition(self.base.prev())

    def prev(self) -> "ReversePosition":
        return ReversePosition(self.base.next())

    def advance(self, n: int) -> "ReversePosition":
        return ReversePosition(self.base.advance(-n))

    def distance_to(self, other: "ReversePosition") -> int:
        return other.base.distance_to(self.base)

    def swap_with(self, other: "ReversePosition") -> None:
        self.base.prev().swap_with(other.base.prev())

    @property
    def trivially_movable(self) -> bool:
        return is_trivially_movable(self.base)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReversePosition):
            return NotImplemented
        return self.base == other.base

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash(("reverse", self.base))

    def __repr__(self) -> str:
        return f"ReversePosition({self.base!r})"


# ── Free functions ─────────────────────────────────────────────


def distance(first: Position, last: Position) -> int:
    """Number of forward steps from *first* to *last*."""
    return first.distance_to(last)


def next_position(pos: Position, n: int = 1) -> Position:
    if n == 1:
        return pos.next()
    return pos.advance(n)


def iter_swap(a: Position, b: Position) -> None:
    a.swap_with(b)


def positions(seq: Any) -> Tuple[Position, Position]:
    """Return the ``(begin, end)`` positions of a container."""
    begin = getattr(seq, "begin", None)
    if callable(begin):
        return seq.begin(), seq.end()
    return IndexPosition(seq, 0), IndexPosition(seq, len(seq))


def is_trivially_movable(pos: Optional[Position]) -> bool:
    """
    Whether elements behind *pos* are cheap to copy into a scratch buffer.

    Only steers the buffer-allocation heuristic; never affects results.
    """
    if pos is None:
        return False
    return bool(getattr(pos, "trivially_movable", False))
