#!/usr/bin/env python3
"""Benchmark tavern generation across plot sizes.

Reports average generation time, room count and how much of the plot's
usable area ends up covered by rooms.

Usage:
    python scripts/benchmark_tavern.py --iterations 20 --save bench.json
"""

# ruff: noqa: E402  # Allow path setup before importing project modules

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

import numpy as np

# Add the project root to Python path so running as a script works.
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from taverngen import config
from taverngen.environment.generators import Tavern
from taverngen.environment.generators.tavern import RoomKind
from taverngen.environment.site import SiteGrid
from taverngen.environment.terrain import HeightField
from taverngen.util import rng
from taverngen.util.geometry import Aabr, Dir, Vec2

# Plot sizes in tiles.
PLOT_SIZES: tuple[tuple[int, int], ...] = (
    (4, 4),
    (6, 6),
    (8, 8),
    (10, 10),
    (14, 10),
)


def _footprint_coverage(tavern: Tavern) -> float:
    """Fraction of the plot's usable area covered by ground-level rooms."""
    inner = Aabr(
        tavern.bounds.min + config.PLOT_MARGIN_MIN,
        tavern.bounds.max - config.PLOT_MARGIN_MAX,
    )
    size = inner.size()
    mask = np.zeros((size.x + 1, size.y + 1), dtype=np.bool_)
    for room in tavern.rooms:
        if room.kind is RoomKind.CELLAR:
            continue
        lo = room.footprint.min - inner.min
        hi = room.footprint.max - inner.min
        mask[lo.x : hi.x + 1, lo.y : hi.y + 1] = True
    return float(mask.mean())


class TavernBenchmark:
    """Benchmark runner for tavern generation."""

    def __init__(self, iterations: int) -> None:
        self.iterations = iterations
        self.site = SiteGrid()
        self.terrain = HeightField.sloped(
            128, 128, base_alt=20.0, slope=(0.05, 0.08), temperature=0.6
        )
        self.results: dict[str, dict[str, float]] = {}

    def _run_case(self, width: int, height: int) -> dict[str, float]:
        """Generate ``iterations`` taverns on one plot size."""
        rng.init(config.RANDOM_SEED)
        tile_aabr = Aabr(Vec2(0, 0), Vec2(width - 1, height - 1))
        door_tile = Vec2(width // 2, 0)

        elapsed_total = 0.0
        rooms_total = 0
        coverage_total = 0.0
        for _ in range(self.iterations):
            start = time.perf_counter()
            tavern = Tavern.generate(
                self.terrain, self.site, None, door_tile, Dir.NEG_Y, tile_aabr
            )
            elapsed_total += time.perf_counter() - start
            rooms_total += len(tavern.rooms)
            coverage_total += _footprint_coverage(tavern)

        return {
            "ms": (elapsed_total / self.iterations) * 1000.0,
            "rooms": rooms_total / self.iterations,
            "coverage": coverage_total / self.iterations,
        }

    def run(self) -> None:
        """Run all configured plot sizes."""
        print("Tavern Generation Benchmark")
        print("=" * 48)
        print(f"Iterations per size: {self.iterations}")
        print()
        print(f"{'Plot':>10} {'Time (ms)':>12} {'Rooms':>8} {'Coverage':>10}")
        print("-" * 48)

        for width, height in PLOT_SIZES:
            result = self._run_case(width, height)
            size_key = f"{width}x{height}"
            self.results[size_key] = result
            print(
                f"{size_key:>10} {result['ms']:12.2f} {result['rooms']:8.1f} "
                f"{result['coverage']:10.1%}"
            )

    def save_results(self, filename: str) -> None:
        """Save benchmark output to a JSON file."""
        with Path(filename).open("w") as f:
            json.dump(self.results, f, indent=2)
        print(f"\nSaved benchmark results to {filename}")

    def compare_with_baseline(self, baseline_file: str) -> None:
        """Compare current run with a saved baseline JSON file."""
        try:
            with Path(baseline_file).open() as f:
                baseline: dict[str, dict[str, float]] = json.load(f)
        except FileNotFoundError:
            print(f"\nBaseline file not found: {baseline_file}")
            return

        print(f"\nComparison vs baseline: {baseline_file}")
        print("=" * 64)

        for size_key, current in self.results.items():
            if size_key not in baseline:
                continue

            old_ms = baseline[size_key].get("ms", 0.0)
            new_ms = current["ms"]
            if old_ms <= 0:
                continue

            delta_pct = ((new_ms - old_ms) / old_ms) * 100.0
            speed_ratio = old_ms / new_ms if new_ms > 0 else 0.0
            trend = "faster" if speed_ratio > 1.0 else "slower"

            print(
                f"{size_key:>10}: {new_ms:8.2f}ms "
                f"vs {old_ms:8.2f}ms | {speed_ratio:5.2f}x {trend} "
                f"({delta_pct:+6.1f}%)"
            )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark tavern generation")
    parser.add_argument(
        "--iterations",
        type=int,
        default=10,
        help="Number of taverns per plot size (default: 10)",
    )
    parser.add_argument("--save", type=str, help="Save current results to JSON")
    parser.add_argument(
        "--compare",
        type=str,
        help="Compare current results against baseline JSON",
    )
    args = parser.parse_args(argv)

    benchmark = TavernBenchmark(iterations=args.iterations)
    benchmark.run()

    if args.save:
        benchmark.save_results(args.save)

    if args.compare:
        benchmark.compare_with_baseline(args.compare)


if __name__ == "__main__":
    main()
