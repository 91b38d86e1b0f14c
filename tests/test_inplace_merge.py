import unittest
import sys
import os
import math
import random
from collections import Counter
from unittest import mock

import numpy as np

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from seqlib import merge_errors
from seqlib.algorithms.inplace_merge import (
    AdaptiveMerger,
    inplace_merge,
    merge_in_place,
    merge_in_place_no_buffer,
    merge_with_buffer,
)
from seqlib.linked_sequence import LinkedSequence
from seqlib.merge_errors import IncompatiblePositionsError, MergePreconditionError
from seqlib.merge_stats import MergeStats
from seqlib.positions import IndexPosition
from seqlib.scratch_buffer import ScratchBuffer


def first_item(pair):
    return pair[0]


def tagged(values, tag):
    return [(v, tag, i) for i, v in enumerate(values)]


class CountingList(list):
    """List that counts element assignments."""

    def __init__(self, *args):
        super().__init__(*args)
        self.writes = 0

    def __setitem__(self, index, value):
        self.writes += 1
        super().__setitem__(index, value)


class TestBoundaryScenarios(unittest.TestCase):

    def test_empty_left_run(self):
        data = [1, 2, 3]
        self.assertEqual(inplace_merge(data, 0), 0)
        self.assertEqual(data, [1, 2, 3])

    def test_empty_right_run(self):
        data = [4, 5, 6]
        self.assertEqual(inplace_merge(data, 3), 3)
        self.assertEqual(data, [4, 5, 6])

    def test_empty_sequence(self):
        data = []
        self.assertEqual(inplace_merge(data, 0), 0)
        self.assertEqual(data, [])

    def test_single_pair_out_of_order(self):
        data = [5, 3]
        stats = MergeStats()
        inplace_merge(data, 1, use_buffer=False, stats=stats)
        self.assertEqual(data, [3, 5])
        self.assertEqual(stats.swaps, 1)

    def test_single_pair_in_order(self):
        data = [3, 5]
        inplace_merge(data, 1)
        self.assertEqual(data, [3, 5])

    def test_duplicates_across_boundary_keep_origin_order(self):
        left = tagged([1, 3, 3], "L")
        right = tagged([3, 3, 5], "R")
        for use_buffer in (False, True):
            with self.subTest(use_buffer=use_buffer):
                data = left + right
                inplace_merge(data, len(left), projection=first_item, use_buffer=use_buffer)
                self.assertEqual([v for v, _, _ in data], [1, 3, 3, 3, 3, 5])
                threes = [tag for v, tag, _ in data if v == 3]
                self.assertEqual(threes, ["L", "L", "R", "R"])
                self.assertEqual(data, sorted(left + right, key=first_item))

    def test_already_sorted_span_moves_nothing(self):
        data = CountingList(range(40))
        stats = MergeStats()
        inplace_merge(data, 25, stats=stats)
        self.assertEqual(list(data), list(range(40)))
        self.assertEqual(data.writes, 0)
        self.assertEqual(stats.swaps, 0)
        self.assertEqual(stats.buffer_merges, 0)

    def test_large_left_tiny_right_without_buffer(self):
        left = list(range(0, 20000, 2))
        right = [3, 9999, 15001]
        data = left + right
        stats = MergeStats()
        inplace_merge(data, len(left), use_buffer=False, stats=stats)
        self.assertEqual(data, sorted(left + right))
        self.assertEqual(stats.buffer_capacity, 0)
        self.assertLessEqual(stats.max_depth, 4)

        buffered = left + right
        inplace_merge(buffered, len(left), use_buffer=True)
        self.assertEqual(data, buffered)


class TestMergeProperties(unittest.TestCase):

    def setUp(self):
        self.rng = random.Random(1234)

    def _runs(self, len1, len2, key_range=10):
        left = sorted(tagged([self.rng.randrange(key_range) for _ in range(len1)], "L"), key=first_item)
        right = sorted(tagged([self.rng.randrange(key_range) for _ in range(len2)], "R"), key=first_item)
        return left, right

    def test_random_runs_sorted_and_stable(self):
        shapes = [(1, 1), (1, 7), (7, 1), (2, 3), (13, 29), (29, 13), (50, 50), (64, 3), (3, 64)]
        for len1, len2 in shapes:
            for use_buffer in (None, False, True):
                with self.subTest(len1=len1, len2=len2, use_buffer=use_buffer):
                    left, right = self._runs(len1, len2)
                    data = left + right
                    inplace_merge(data, len1, projection=first_item, use_buffer=use_buffer)
                    # sorted() is stable, so Left items stay ahead of equal Right items
                    self.assertEqual(data, sorted(left + right, key=first_item))

    def test_permutation_preserved(self):
        left, right = self._runs(120, 80, key_range=5)
        data = left + right
        inplace_merge(data, len(left), projection=first_item, use_buffer=False)
        self.assertEqual(Counter(data), Counter(left + right))

    def test_buffer_presence_does_not_change_result(self):
        for len1, len2 in [(10, 300), (300, 10), (100, 100), (33, 34)]:
            with self.subTest(len1=len1, len2=len2):
                left, right = self._runs(len1, len2, key_range=20)
                without = left + right
                with_buf = left + right
                inplace_merge(without, len1, projection=first_item, use_buffer=False)
                inplace_merge(with_buf, len1, projection=first_item, use_buffer=True)
                self.assertEqual(without, with_buf)

    def test_recursion_depth_is_logarithmic(self):
        left, right = self._runs(500, 500, key_range=1000)
        data = left + right
        stats = MergeStats()
        inplace_merge(data, 500, projection=first_item, use_buffer=False, stats=stats)
        self.assertEqual(data, sorted(left + right, key=first_item))
        self.assertGreater(stats.rotations, 0)
        self.assertLessEqual(stats.max_depth, int(math.log2(1000)) + 1)

    def test_custom_comparator_descending(self):
        data = [9, 7, 4, 1, 8, 6, 5, 0]
        inplace_merge(data, 4, comparator=lambda a, b: a > b, use_buffer=False)
        self.assertEqual(data, [9, 8, 7, 6, 5, 4, 1, 0])

    def test_inconsistent_comparator_still_terminates(self):
        rng = random.Random(7)
        data = list(range(60)) + list(range(60))
        before = Counter(data)
        inplace_merge(data, 60, comparator=lambda a, b: rng.random() < 0.5, use_buffer=False)
        self.assertEqual(Counter(data), before)


class TestBufferAssistedMerge(unittest.TestCase):

    def _merge(self, left, right):
        data = left + right
        buf = ScratchBuffer(min(len(left), len(right)))
        begin = IndexPosition(data, 0)
        middle = IndexPosition(data, len(left))
        end = IndexPosition(data, len(data))
        stats = MergeStats()
        merge_with_buffer(begin, middle, end, len(left), len(right), buf,
                          lambda a, b: a < b, first_item, stats)
        self.assertEqual(stats.buffer_merges, 1)
        self.assertEqual(buf.size, 0)
        return data

    def test_forward_merge_when_left_is_smaller(self):
        left = tagged([2, 4], "L")
        right = tagged([1, 2, 3, 4, 5], "R")
        self.assertEqual(self._merge(left, right), sorted(left + right, key=first_item))

    def test_backward_merge_when_right_is_smaller(self):
        left = tagged([1, 3, 3, 3, 4], "L")
        right = tagged([3, 5], "R")
        result = self._merge(left, right)
        self.assertEqual(result, sorted(left + right, key=first_item))
        self.assertEqual([tag for v, tag, _ in result if v == 3], ["L", "L", "L", "R"])

    def test_buffer_capacity_recorded(self):
        data = list(range(1, 40, 2)) + list(range(0, 40, 2))
        stats = MergeStats()
        inplace_merge(data, 20, stats=stats)
        self.assertEqual(data, list(range(40)))
        self.assertEqual(stats.buffer_capacity, 20)
        self.assertEqual(stats.buffer_merges, 1)

    def test_small_merge_skips_buffer(self):
        data = [2, 4, 6, 1, 3, 5]
        stats = MergeStats()
        inplace_merge(data, 3, stats=stats)
        self.assertEqual(data, [1, 2, 3, 4, 5, 6])
        self.assertEqual(stats.buffer_capacity, 0)

    def test_threshold_override(self):
        data = list(range(1, 40, 2)) + list(range(0, 40, 2))
        stats = MergeStats()
        inplace_merge(data, 20, buffer_threshold=50, stats=stats)
        self.assertEqual(data, list(range(40)))
        self.assertEqual(stats.buffer_capacity, 0)

    def test_negative_threshold_keyword_uses_default(self):
        # min run length 5 is below the default threshold of 8
        data = list(range(1, 10, 2)) + list(range(0, 60, 2))
        stats = MergeStats()
        inplace_merge(data, 5, buffer_threshold=-1, stats=stats)
        self.assertEqual(data, sorted(data))
        self.assertEqual(stats.buffer_capacity, 0)

    def test_allocation_failure_falls_back(self):
        data = list(range(1, 60, 2)) + list(range(0, 60, 2))
        stats = MergeStats()
        with mock.patch("seqlib.scratch_buffer._allocate_storage", side_effect=MemoryError):
            inplace_merge(data, 30, use_buffer=True, stats=stats)
        self.assertEqual(data, list(range(60)))
        self.assertEqual(stats.buffer_capacity, 0)
        self.assertEqual(stats.buffer_merges, 0)


class TestOtherSequences(unittest.TestCase):

    def test_numpy_array_with_typed_buffer(self):
        rng = np.random.default_rng(0)
        left = np.sort(rng.integers(0, 100, size=40))
        right = np.sort(rng.integers(0, 100, size=25))
        data = np.concatenate([left, right])
        stats = MergeStats()
        inplace_merge(data, 40, stats=stats)
        self.assertTrue(np.array_equal(data, np.sort(np.concatenate([left, right]), kind="stable")))
        self.assertEqual(stats.buffer_capacity, 25)

    def test_numpy_rows_keep_their_contents(self):
        data = np.array([[5, 0], [3, 1]])
        inplace_merge(data, 1, projection=first_item, use_buffer=False)
        self.assertEqual(data.tolist(), [[3, 1], [5, 0]])

    def test_numpy_rows_on_both_paths(self):
        rng = np.random.default_rng(7)
        for len1, len2 in ((24, 17), (10, 30)):
            keys = np.concatenate([np.sort(rng.integers(0, 20, size=len1)),
                                   np.sort(rng.integers(0, 20, size=len2))])
            rows = np.column_stack([keys, np.arange(len1 + len2)])
            expected = sorted(rows.tolist(), key=first_item)
            for use_buffer in (False, True):
                with self.subTest(len1=len1, len2=len2, use_buffer=use_buffer):
                    data = rows.copy()
                    stats = MergeStats()
                    inplace_merge(data, len1, projection=first_item, use_buffer=use_buffer, stats=stats)
                    self.assertEqual(data.tolist(), expected)
                    self.assertEqual(stats.buffer_capacity, min(len1, len2) if use_buffer else 0)

    def test_numpy_object_array_skips_buffer(self):
        data = np.array([1, 3, 5, 7, 9, 11, 13, 15, 17, 19,
                         0, 2, 4, 6, 8, 10, 12, 14, 16, 18], dtype=object)
        stats = MergeStats()
        inplace_merge(data, 10, stats=stats)
        self.assertEqual(list(data), list(range(20)))
        self.assertEqual(stats.buffer_capacity, 0)

    def test_linked_sequence(self):
        left = tagged([0, 2, 2, 4, 6, 8, 10, 12, 14, 16, 18], "L")
        right = tagged([1, 2, 3, 5, 7, 9, 11, 13, 15, 17], "R")
        for use_buffer in (False, True):
            with self.subTest(use_buffer=use_buffer):
                seq = LinkedSequence(left + right)
                join = inplace_merge(seq, len(left), projection=first_item, use_buffer=use_buffer)
                self.assertEqual(join, len(left))
                self.assertEqual(seq.to_list(), sorted(left + right, key=first_item))

    def test_join_position_returned(self):
        data = [1, 4, 7, 2, 3, 9]
        begin = IndexPosition(data, 0)
        result = merge_in_place(begin, IndexPosition(data, 3), IndexPosition(data, 6))
        self.assertEqual(result, IndexPosition(data, 3))
        self.assertEqual(data, [1, 2, 3, 4, 7, 9])

    def test_join_index_out_of_range(self):
        with self.assertRaises(IndexError):
            inplace_merge([1, 2], 3)

    def test_positions_from_different_sequences(self):
        a = [1, 2, 3]
        b = [0, 4]
        with self.assertRaises(IncompatiblePositionsError):
            merge_in_place(IndexPosition(a, 0), IndexPosition(b, 1), IndexPosition(b, 2))


class TestPreconditionChecks(unittest.TestCase):

    def setUp(self):
        self._saved = merge_errors.EXPENSIVE_CHECKS
        merge_errors.EXPENSIVE_CHECKS = True

    def tearDown(self):
        merge_errors.EXPENSIVE_CHECKS = self._saved

    def test_length_mismatch_is_reported(self):
        data = [1, 3, 5, 2, 4]
        begin = IndexPosition(data, 0)
        with self.assertRaises(MergePreconditionError) as ctx:
            merge_in_place_no_buffer(begin, begin.advance(3), begin.advance(5), 2, 2)
        self.assertEqual(ctx.exception.expected, 2)
        self.assertEqual(ctx.exception.observed, 3)

    def test_checks_pass_through_every_step(self):
        data = list(range(1, 200, 2)) + list(range(0, 200, 2))
        begin = IndexPosition(data, 0)
        merge_in_place_no_buffer(begin, begin.advance(100), begin.advance(200), 100, 100)
        self.assertEqual(data, list(range(200)))

    def test_flag_read_once_per_merge(self):
        data = list(range(1, 200, 2)) + list(range(0, 200, 2))
        begin = IndexPosition(data, 0)
        target = "seqlib.algorithms.inplace_merge."
        with mock.patch(target + "expensive_checks_enabled", return_value=False) as enabled, \
                mock.patch(target + "check_run_length") as check:
            merge_in_place_no_buffer(begin, begin.advance(100), begin.advance(200), 100, 100)
        self.assertEqual(data, list(range(200)))
        self.assertEqual(enabled.call_count, 1)
        check.assert_not_called()

    def test_lengths_checked_on_every_iteration_when_enabled(self):
        data = list(range(1, 40, 2)) + list(range(0, 40, 2))
        begin = IndexPosition(data, 0)
        with mock.patch("seqlib.algorithms.inplace_merge.check_run_length") as check:
            merge_in_place_no_buffer(begin, begin.advance(20), begin.advance(40), 20, 20)
        self.assertEqual(data, list(range(40)))
        self.assertGreater(check.call_count, 2)

    def test_engine_depth_resets(self):
        data = [3, 4, 1, 2]
        merger = AdaptiveMerger(ScratchBuffer(0))
        begin = IndexPosition(data, 0)
        merger.run(begin, begin.advance(2), begin.advance(4), 2, 2)
        self.assertEqual(data, [1, 2, 3, 4])
        self.assertEqual(merger.depth, 0)


if __name__ == '__main__':
    unittest.main()
