"""
In-Place Merge
==============
Adaptive, stable merge of two adjacent sorted runs of one mutable sequence.

    [begin, middle)  Left run,  len1 elements
    [middle, end)    Right run, len2 elements

With a scratch buffer large enough to hold the smaller run the merge is
linear.  Without one (or with too small a one) the runs are split around a
median, the middle blocks rotated, and the two independent halves merged:
recursively for the smaller half, by looping for the larger one.  That keeps
the stack O(log min(len1, len2)) deep for any input size.

Core guarantees:
- Stable: equal elements keep Left-before-Right order
- No allocation beyond the optional buffer of min(len1, len2) elements
- Already-ordered spans are detected without moving any element
- Terminates for any comparator, even one that is not a strict weak order
"""

from __future__ import annotations

import logging
import time
import numbers
from typing import Any, Optional, Union

from seqlib.algorithms.binary_search import lower_bound_n, upper_bound_n
from seqlib.algorithms.merge import merge
from seqlib.algorithms.rotate import rotate
from seqlib.functional import Comparator, Projection, identity, less, not_fn
from seqlib.merge_errors import check_run_length, expensive_checks_enabled, resolve_buffer_threshold
from seqlib.merge_stats import MergeStats
from seqlib.positions import Position, ReversePosition, distance, is_trivially_movable, positions
from seqlib.scratch_buffer import ScratchBuffer, scratch_buffer

logger = logging.getLogger(__name__)


def merge_with_buffer(
    begin: Position,
    middle: Position,
    end: Position,
    len1: int,
    len2: int,
    buf: ScratchBuffer,
    comparator: Comparator,
    projection: Projection,
    stats: Optional[MergeStats] = None,
) -> None:
    """
    Linear merge using *buf* to hold the smaller run.

    Left smaller (or equal): copy Left out and merge forward into *begin*.
    Right smaller: copy Right out and merge backward into *end*, comparing
    with the negated predicate so reverse traversal keeps the same order of
    equal elements as a forward merge would.
    """
    if len1 <= len2:
        buf.fill_from(begin, len1)
        merge(buf.begin(), buf.end(), middle, end, begin, comparator, projection)
    else:
        buf.fill_from(middle, len2)
        merge(
            ReversePosition(middle), ReversePosition(begin),
            ReversePosition(buf.end()), ReversePosition(buf.begin()),
            ReversePosition(end),
            not_fn(comparator), projection,
        )
    buf.clear()
    if stats is not None:
        stats.buffer_merges += 1


class AdaptiveMerger:
    """
    Bounded merge engine.

    One instance serves one top-level merge: it holds the scratch buffer,
    the ordering and the statistics shared by every recursive step.
    """

    def __init__(
        self,
        buffer: ScratchBuffer,
        comparator: Comparator = less,
        projection: Projection = identity,
        stats: Optional[MergeStats] = None,
    ):
        self.buffer = buffer
        self.projection = projection
        self.stats = stats
        self.comparator = comparator if stats is None else self._counting(comparator, stats)
        self.depth = 0
        # Fixed for the lifetime of the merge
        self.check_lengths = expensive_checks_enabled()

    @staticmethod
    def _counting(comparator: Comparator, stats: MergeStats) -> Comparator:
        def counted(a: Any, b: Any) -> bool:
            stats.comparisons += 1
            return comparator(a, b)
        return counted

    def run(self, begin: Position, middle: Position, end: Position, len1: int, len2: int) -> None:
        """Merge ``[begin, middle)`` with ``[middle, end)``."""
        self.depth += 1
        if self.stats is not None and self.depth > self.stats.max_depth:
            self.stats.max_depth = self.depth
        try:
            self._merge(begin, middle, end, len1, len2)
        finally:
            self.depth -= 1

    def _merge(self, begin: Position, middle: Position, end: Position, len1: int, len2: int) -> None:
        comp = self.comparator
        proj = self.projection
        capacity = self.buffer.capacity

        while True:
            if self.check_lengths:
                check_run_length(begin, middle, len1, "left run")
                check_run_length(middle, end, len2, "right run")

            if len2 == 0:
                return

            # Skip the prefix of Left that is already in place
            first_right = proj(middle.read())
            while True:
                if len1 == 0:
                    return
                if comp(first_right, proj(begin.read())):
                    break
                begin = begin.next()
                len1 -= 1

            if len1 <= capacity or len2 <= capacity:
                merge_with_buffer(begin, middle, end, len1, len2, self.buffer, comp, proj, self.stats)
                return

            # begin < middle < end and *begin > *middle.
            # Split into [begin, m1) [m1, middle) [middle, m2) [m2, end) with
            #   [begin, m1)  <= [middle, m2)
            #   [middle, m2) <  [m1, middle)
            #   [m1, middle) <= [m2, end)
            if len1 < len2:
                len21 = len2 // 2
                m2 = middle.advance(len21)
                m1 = upper_bound_n(begin, len1, proj(m2.read()), comp, proj)
                len11 = distance(begin, m1)
            else:
                if len1 == 1:
                    # len2 == 1 as well, and the pair is out of order
                    begin.swap_with(middle)
                    if self.stats is not None:
                        self.stats.swaps += 1
                    return
                len11 = len1 // 2
                m1 = begin.advance(len11)
                m2 = lower_bound_n(middle, len2, proj(m1.read()), comp, proj)
                len21 = distance(middle, m2)
            len12 = len1 - len11
            len22 = len2 - len21

            middle = rotate(m1, middle, m2, self.stats)

            # Recurse into the smaller half, loop on the larger one
            if len11 + len21 < len12 + len22:
                self.run(begin, m1, middle, len11, len21)
                begin = middle
                middle = m2
                len1 = len12
                len2 = len22
            else:
                self.run(middle, m2, end, len12, len22)
                end = middle
                middle = m1
                len1 = len11
                len2 = len21


def merge_in_place_no_buffer(
    begin: Position,
    middle: Position,
    end: Position,
    len1: int,
    len2: int,
    comparator: Optional[Comparator] = None,
    projection: Optional[Projection] = None,
    stats: Optional[MergeStats] = None,
) -> None:
    """Run the engine with an absent buffer; lengths are supplied by the caller."""
    merger = AdaptiveMerger(ScratchBuffer(0), comparator or less, projection or identity, stats)
    merger.run(begin, middle, end, len1, len2)


def merge_in_place(
    left_start: Position,
    join_point: Position,
    right_end: Position,
    comparator: Optional[Comparator] = None,
    projection: Optional[Projection] = None,
    *,
    use_buffer: Optional[bool] = None,
    buffer_threshold: Optional[int] = None,
    options: Any = None,
    stats: Optional[MergeStats] = None,
) -> Position:
    """
    Merge the sorted runs ``[left_start, join_point)`` and
    ``[join_point, right_end)`` into one sorted run, in place.

    Parameters
    ----------
    comparator : callable, optional
        Strict weak ordering on projected values; defaults to ``<``.
    projection : callable, optional
        Key extraction applied before every comparison; defaults to identity.
    use_buffer : bool, optional
        ``None`` lets the heuristic decide: allocate ``min(len1, len2)``
        elements only when elements are cheap to copy and that size exceeds
        the buffer threshold.  ``True`` always allocates, ``False`` never does.
    buffer_threshold : int, optional
        Overrides ``options.buffer_threshold`` / ``SEQLIB_BUFFER_THRESHOLD``.
        Negative or non-integer values fall back to the default.
    stats : MergeStats, optional
        Filled with counters for this call.

    Returns
    -------
    Position
        The join position after merging: ``len1`` elements past *left_start*.

    Both runs must already be sorted under (comparator, projection).  If they
    are not, the call still terminates but the result is unspecified.
    """
    comparator = comparator or less
    projection = projection or identity
    started = time.perf_counter()

    len1 = distance(left_start, join_point)
    len2 = distance(join_point, right_end)
    buf_size = min(len1, len2)

    if use_buffer is None:
        buffer_threshold = resolve_buffer_threshold(options, explicit=buffer_threshold)
        allocate = is_trivially_movable(left_start) and buffer_threshold < buf_size
    else:
        allocate = use_buffer
    capacity = buf_size if allocate else 0
    logger.debug("merge_in_place: len1=%d len2=%d buffer=%d", len1, len2, capacity)

    with scratch_buffer(capacity, like=left_start) as buf:
        if stats is not None:
            stats.buffer_capacity = buf.capacity
        AdaptiveMerger(buf, comparator, projection, stats).run(
            left_start, join_point, right_end, len1, len2
        )

    if stats is not None:
        stats.elapsed_ms = (time.perf_counter() - started) * 1000.0
    return left_start.advance(len1)


def inplace_merge(
    seq: Any,
    middle: Union[int, Position],
    comparator: Optional[Comparator] = None,
    projection: Optional[Projection] = None,
    **kwargs: Any,
) -> int:
    """
    Container form of ``merge_in_place``.

    *seq* is a list, array, numpy array or ``LinkedSequence``; *middle* is the
    join index (or a position into *seq*).  Returns the join index.
    """
    begin, end = positions(seq)
    if isinstance(middle, numbers.Integral):
        if not 0 <= middle <= len(seq):
            raise IndexError(f"join index {middle} out of range for length {len(seq)}")
        join = begin.advance(int(middle))
    else:
        join = middle
    result = merge_in_place(begin, join, end, comparator, projection, **kwargs)
    return distance(begin, result)
