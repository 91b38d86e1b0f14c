"""
Merge Chart Generator
=====================
Generates charts comparing the buffered, rotation-only and heuristic
in-place merge strategies.
Run:  python generate_merge_charts.py --trials 3
Output: merge_charts/ folder with 3 PNG files.
"""

import sys
import os
import argparse
import numpy as np
from typing import Dict, Any, List

# Ensure project root is on the path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for file output
import matplotlib.pyplot as plt

from benchmark_merge import SHAPES, STRATEGIES, run_merge_benchmark

# ─────────────────────────────────────────────────────────────
# Color Palette & Styling
# ─────────────────────────────────────────────────────────────
COLORS = {
    "buffer": "#339AF0",   # Sky Blue
    "nobuf":  "#FF6B6B",   # Coral Red
    "auto":   "#51CF66",   # Emerald Green
}
STRATEGY_LABELS = {"buffer": "Scratch buffer", "nobuf": "Rotation only", "auto": "Heuristic"}
BG_COLOR = "#1A1B26"
CARD_COLOR = "#24283B"
TEXT_COLOR = "#C0CAF5"
GRID_COLOR = "#414868"


def setup_style():
    """Apply a dark matplotlib style."""
    plt.rcParams.update({
        "figure.facecolor": BG_COLOR,
        "axes.facecolor": CARD_COLOR,
        "axes.edgecolor": GRID_COLOR,
        "axes.labelcolor": TEXT_COLOR,
        "axes.titleweight": "bold",
        "text.color": TEXT_COLOR,
        "xtick.color": TEXT_COLOR,
        "ytick.color": TEXT_COLOR,
        "grid.color": GRID_COLOR,
        "grid.alpha": 0.3,
        "font.size": 13,
        "legend.facecolor": CARD_COLOR,
        "legend.edgecolor": GRID_COLOR,
        "savefig.dpi": 150,
        "savefig.bbox": "tight",
        "savefig.facecolor": BG_COLOR,
    })


def _metric_by_size(results: List[Dict[str, Any]], shape: str, metric: str):
    sizes = sorted({r["size"] for r in results})
    series = {}
    for tag in STRATEGIES:
        series[tag] = [
            np.mean([r[f"{tag}_{metric}"] for r in results if r["size"] == s and r["shape"] == shape])
            for s in sizes
        ]
    return sizes, series


def chart_metric(results, out_dir, metric, ylabel, title, filename, log_y=False):
    """Line chart per shape: *metric* against left-run length for each strategy."""
    fig, axes = plt.subplots(1, len(SHAPES), figsize=(13, 5))
    for ax, shape in zip(np.atleast_1d(axes), SHAPES):
        sizes, series = _metric_by_size(results, shape, metric)
        for tag, values in series.items():
            ax.plot(sizes, values, "o-", label=STRATEGY_LABELS[tag], color=COLORS[tag],
                    linewidth=2.5, markersize=7, zorder=3)
        ax.set_xlabel("Left run length")
        ax.set_ylabel(ylabel)
        ax.set_title(f"{title} ({shape})", fontsize=15, pad=12)
        if log_y:
            ax.set_yscale("symlog")
        ax.grid(True, zorder=0)
        ax.legend(loc="upper left")
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)

    fig.savefig(os.path.join(out_dir, filename))
    plt.close(fig)
    print(f"  Chart saved: {filename}")


def print_summary(results):
    print("\n" + "=" * 60)
    print("  MERGE BENCHMARK SUMMARY")
    print("=" * 60)
    print(f"  {'Strategy':<16} {'Avg Time':>12} {'Avg Cmp':>12} {'Max Depth':>10}")
    print("-" * 60)
    for tag in STRATEGIES:
        avg_t = np.mean([r[f"{tag}_time"] for r in results])
        avg_c = np.mean([r[f"{tag}_comparisons"] for r in results])
        depth = max(r[f"{tag}_depth"] for r in results)
        print(f"  {STRATEGY_LABELS[tag]:<16} {avg_t:>10.3f}ms {avg_c:>12.1f} {depth:>10}")
    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(description="Generate merge strategy charts")
    parser.add_argument("--trials", type=int, default=3, help="Trials per size and shape (default: 3)")
    parser.add_argument("--sizes", type=int, nargs="+", default=[64, 256, 1024, 4096],
                        help="Left run lengths")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    args = parser.parse_args()

    out_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "merge_charts")
    os.makedirs(out_dir, exist_ok=True)

    setup_style()

    print("Phase 1/2: Running Benchmarks...")
    results = run_merge_benchmark(args.sizes, args.trials, args.seed)

    print("\nPhase 2/2: Generating Charts...")
    chart_metric(results, out_dir, "time", "Average time (ms)", "Merge time", "1_time.png")
    chart_metric(results, out_dir, "comparisons", "Comparisons", "Comparisons", "2_comparisons.png", log_y=True)
    chart_metric(results, out_dir, "depth", "Max engine depth", "Recursion depth", "3_depth.png")

    print_summary(results)
    print(f"All charts saved to: {out_dir}")


if __name__ == "__main__":
    main()
