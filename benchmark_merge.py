import sys
import os
import csv
import random
import argparse
from typing import Dict, Any, List, Tuple

# Add project root to path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from seqlib.algorithms.inplace_merge import inplace_merge
from seqlib.merge_stats import MergeStats

STRATEGIES = {
    "buffer": True,      # scratch buffer of min(len1, len2)
    "nobuf": False,      # rotation-based merge only
    "auto": None,        # allocation heuristic decides
}
SHAPES = ("balanced", "skewed")


def make_runs(len1: int, len2: int, rng: random.Random, key_range: int) -> Tuple[List[int], List[int]]:
    left = sorted(rng.randrange(key_range) for _ in range(len1))
    right = sorted(rng.randrange(key_range) for _ in range(len2))
    return left, right


def run_single_merge(trial_id: int, size: int, shape: str, rng: random.Random) -> Dict[str, Any]:
    """
    Merges one random pair of runs with every strategy on isolated copies.
    """
    len1 = size
    len2 = size if shape == "balanced" else 3
    left, right = make_runs(len1, len2, rng, key_range=size * 2)
    expected = sorted(left + right)

    result = {"trial_id": trial_id, "size": size, "shape": shape, "len1": len1, "len2": len2}
    for tag, use_buffer in STRATEGIES.items():
        data = left + right
        stats = MergeStats()
        inplace_merge(data, len1, use_buffer=use_buffer, stats=stats)
        if data != expected:
            print(f"Trial {trial_id} ({tag}, {shape}, n={size}) produced unsorted output")
        result[f"{tag}_ok"] = data == expected
        result[f"{tag}_time"] = stats.elapsed_ms
        result[f"{tag}_comparisons"] = stats.comparisons
        result[f"{tag}_swaps"] = stats.swaps
        result[f"{tag}_depth"] = stats.max_depth
    return result


def run_merge_benchmark(sizes: List[int], trials: int, seed: int = 0) -> List[Dict[str, Any]]:
    rng = random.Random(seed)
    results = []
    total = len(sizes) * len(SHAPES) * trials
    done = 0
    for size in sizes:
        for shape in SHAPES:
            for _ in range(trials):
                done += 1
                print(f"  [{done}/{total}] n={size} {shape} ...", end="\r")
                results.append(run_single_merge(done, size, shape, rng))
    print()
    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark in-place merge strategies")
    parser.add_argument("--sizes", type=int, nargs="+", default=[100, 1000, 5000], help="Left run lengths")
    parser.add_argument("--trials", type=int, default=3, help="Trials per size and shape")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--output", type=str, default="merge_benchmark.csv", help="Output CSV file")

    args = parser.parse_args()

    print(f"Starting Benchmark: sizes={args.sizes}, {args.trials} trials each")
    results = run_merge_benchmark(args.sizes, args.trials, args.seed)

    failures = sum(1 for r in results for tag in STRATEGIES if not r[f"{tag}_ok"])
    print(f"Benchmark Complete! Incorrect merges: {failures}")

    # Save to CSV
    keys = results[0].keys()
    with open(args.output, "w", newline="") as f:
        dict_writer = csv.DictWriter(f, fieldnames=keys)
        dict_writer.writeheader()
        dict_writer.writerows(results)

    print(f"Results saved to {args.output}")

    # Print Summary Table
    print("\nSummary Statistics:")
    print(f"{'Strategy':<8} | {'Shape':<9} | {'Avg Time (ms)':>13} | {'Avg Cmp':>10} | {'Avg Swaps':>10} | {'Max Depth':>9}")
    print("-" * 74)

    for tag in STRATEGIES:
        for shape in SHAPES:
            rows = [r for r in results if r["shape"] == shape]
            avg_time = sum(r[f"{tag}_time"] for r in rows) / len(rows)
            avg_cmp = sum(r[f"{tag}_comparisons"] for r in rows) / len(rows)
            avg_swaps = sum(r[f"{tag}_swaps"] for r in rows) / len(rows)
            depth = max(r[f"{tag}_depth"] for r in rows)
            print(f"{tag.upper():<8} | {shape:<9} | {avg_time:>13.3f} | {avg_cmp:>10.1f} | {avg_swaps:>10.1f} | {depth:>9}")


if __name__ == "__main__":
    main()
