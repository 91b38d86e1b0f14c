"""
Scratch Buffer
==============
Best-effort, fixed-capacity element storage owned by one top-level merge
call.

Storage is a numpy array of the sequence's dtype and row shape when the
sequence being merged is a numpy array, and a plain list otherwise.  A
capacity of zero is a valid, fully supported "absent" buffer.  Allocation
failures never propagate: the caller simply gets an empty buffer and the
merge takes the no-buffer path.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Tuple

import numpy as np

from seqlib.positions import IndexPosition, Position, ReversePosition

logger = logging.getLogger(__name__)


def _allocate_storage(capacity: int, dtype: Optional[np.dtype], item_shape: Tuple[int, ...] = ()) -> Any:
    if dtype is not None:
        return np.empty((capacity,) + tuple(item_shape), dtype=dtype)
    return [None] * capacity


def _layout_of(like: Optional[Position]) -> Tuple[Optional[np.dtype], Tuple[int, ...]]:
    """dtype and per-element shape of the numpy array behind *like*, if any."""
    while isinstance(like, ReversePosition):
        like = like.base
    if isinstance(like, IndexPosition) and isinstance(like.seq, np.ndarray):
        return like.seq.dtype, like.seq.shape[1:]
    return None, ()


class ScratchBuffer:
    """Holds a copy of at most ``capacity`` elements."""

    def __init__(
        self,
        capacity: int = 0,
        dtype: Optional[np.dtype] = None,
        storage: Any = None,
        item_shape: Tuple[int, ...] = (),
    ):
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self.capacity = capacity
        self.dtype = dtype
        self.item_shape = tuple(item_shape)
        if storage is None:
            storage = _allocate_storage(capacity, dtype, self.item_shape) if capacity else []
        self._storage = storage
        self.size = 0

    def fill_from(self, first: Position, count: int) -> Position:
        """Copy *count* elements starting at *first*; return the position after them."""
        if count > self.capacity:
            raise ValueError(f"cannot hold {count} elements in a buffer of capacity {self.capacity}")
        storage = self._storage
        for i in range(count):
            storage[i] = first.read()
            first = first.next()
        self.size = count
        return first

    def begin(self) -> IndexPosition:
        return IndexPosition(self._storage, 0)

    def end(self) -> IndexPosition:
        return IndexPosition(self._storage, self.size)

    def clear(self) -> None:
        """Drop held references; numpy storage just forgets its fill level."""
        if isinstance(self._storage, list):
            for i in range(self.size):
                self._storage[i] = None
        self.size = 0

    def release(self) -> None:
        self.clear()
        self._storage = []
        self.capacity = 0

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return f"ScratchBuffer(capacity={self.capacity}, size={self.size})"


def acquire_scratch_buffer(capacity: int, like: Optional[Position] = None) -> ScratchBuffer:
    """
    Try to allocate a buffer of *capacity* elements shaped like *like*.

    Returns an empty buffer when *capacity* is not positive or when the
    allocation fails.
    """
    dtype, item_shape = _layout_of(like)
    if capacity <= 0:
        return ScratchBuffer(0, dtype, item_shape=item_shape)
    try:
        storage = _allocate_storage(capacity, dtype, item_shape)
    except MemoryError:
        logger.debug("scratch buffer of %d elements unavailable, merging without one", capacity)
        return ScratchBuffer(0, dtype, item_shape=item_shape)
    logger.debug("acquired scratch buffer of %d elements (dtype=%s)", capacity, dtype)
    return ScratchBuffer(capacity, dtype, storage=storage, item_shape=item_shape)


@contextmanager
def scratch_buffer(capacity: int, like: Optional[Position] = None) -> Iterator[ScratchBuffer]:
    """Acquire a buffer for the duration of a ``with`` block; always released."""
    buf = acquire_scratch_buffer(capacity, like)
    try:
        yield buf
    finally:
        buf.release()
