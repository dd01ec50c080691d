#!/usr/bin/env python3
"""Benchmark Runner for commitment combinators.

Times ``Commitment.all`` fan-in and ``then`` chains against their native
asyncio counterparts (``asyncio.gather`` and chained awaits) and writes the
results in JSON format for easy processing.

Usage:
    python -m benchmarks.runner [--fanout N] [--depth N] [--runs N] [--output FILE]

Options:
    --fanout N      Inputs combined per fan-in run (default: 1000)
    --depth N       Links per chain run (default: 1000)
    --runs N        Iterations per scenario (default: 5)
    --output FILE   Output JSON file (default: benchmark_output.json)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time
from collections.abc import Awaitable, Callable, Coroutine
from datetime import UTC, datetime
from pathlib import Path
from statistics import mean, stdev
from typing import Any

from commitment import Commitment

# uvloop gives a faster event loop on Linux/macOS; Windows keeps the default loop
_run: Callable[[Coroutine[Any, Any, Any]], Any] = asyncio.run
if sys.platform != "win32":
    try:
        import uvloop

        _run = uvloop.run
    except ImportError:
        # Install with: pip install commitment[performance]
        pass


async def commitment_fanout(size: int) -> None:
    """Combine ``size`` already-fulfilled commitments with ``Commitment.all``."""
    values = await Commitment.all([Commitment.resolve(i) for i in range(size)])
    assert len(values) == size


async def gather_fanout(size: int) -> None:
    """Combine ``size`` completed futures with ``asyncio.gather``."""
    loop = asyncio.get_running_loop()
    futures = []
    for i in range(size):
        future = loop.create_future()
        future.set_result(i)
        futures.append(future)
    values = await asyncio.gather(*futures)
    assert len(values) == size


async def commitment_chain(depth: int) -> None:
    """Build a ``then`` chain of ``depth`` increments."""
    link: Commitment[int] = Commitment.resolve(0)
    for _ in range(depth):
        link = link.then(lambda value: value + 1)
    assert await link == depth


async def task_chain(depth: int) -> None:
    """Await ``depth`` increment coroutines in sequence."""

    async def increment(value: int) -> int:
        return value + 1

    value = 0
    for _ in range(depth):
        value = await increment(value)
    assert value == depth


SCENARIOS: dict[str, Callable[[int], Awaitable[None]]] = {
    "commitment_fanout": commitment_fanout,
    "gather_fanout": gather_fanout,
    "commitment_chain": commitment_chain,
    "task_chain": task_chain,
}


def calculate_stats(samples: list[float]) -> dict:
    """Calculate aggregate statistics from timing samples.

    Args:
        samples: Elapsed times in seconds.

    Returns:
        Dictionary with aggregate statistics in milliseconds.
    """
    samples_ms = [s * 1000 for s in samples]
    return {
        "runs": len(samples_ms),
        "min_ms": min(samples_ms) if samples_ms else 0,
        "max_ms": max(samples_ms) if samples_ms else 0,
        "mean_ms": mean(samples_ms) if samples_ms else 0,
        "std_dev_ms": stdev(samples_ms) if len(samples_ms) > 1 else 0,
    }


async def run_benchmark(name: str, size: int, runs: int = 5) -> dict:
    """Run one scenario ``runs`` times.

    Args:
        name: Key into ``SCENARIOS``.
        size: Fan-out width or chain depth.
        runs: Number of benchmark runs.

    Returns:
        Dictionary with benchmark results.
    """
    scenario = SCENARIOS[name]
    print(f"Running {name} benchmark ({runs} runs, size {size})...")
    samples: list[float] = []

    for i in range(runs):
        print(f"  Run {i + 1}/{runs}...", end=" ", flush=True)
        start = time.perf_counter()
        await scenario(size)
        elapsed = time.perf_counter() - start
        samples.append(elapsed)
        print(f"{elapsed * 1000:.3f}ms")

    stats = calculate_stats(samples)
    return {
        "scenario": name,
        "size": size,
        "ops_per_sec": size / mean(samples) if samples and mean(samples) > 0 else 0,
        **stats,
    }


def format_results(results: dict[str, dict]) -> dict:
    """Format benchmark results with commitment/asyncio ratios.

    Args:
        results: Scenario results keyed by scenario name.

    Returns:
        Formatted comparison results.
    """

    def ratio(ours: str, native: str) -> float:
        native_mean = results[native]["mean_ms"]
        return results[ours]["mean_ms"] / native_mean if native_mean > 0 else 0

    return {
        "timestamp": datetime.now(UTC).isoformat(),
        "scenarios": results,
        "comparison": {
            "fanout_overhead_factor": ratio("commitment_fanout", "gather_fanout"),
            "chain_overhead_factor": ratio("commitment_chain", "task_chain"),
        },
    }


async def run_all(fanout: int, depth: int, runs: int) -> dict:
    results = {}
    for name in SCENARIOS:
        size = fanout if name.endswith("fanout") else depth
        results[name] = await run_benchmark(name, size, runs=runs)
        print()
    return format_results(results)


def main() -> int:
    """Main entry point for benchmark runner.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    parser = argparse.ArgumentParser(description="Benchmark runner for commitment combinators")
    parser.add_argument(
        "--fanout",
        type=int,
        default=1000,
        help="Inputs combined per fan-in run (default: 1000)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=1000,
        help="Links per chain run (default: 1000)",
    )
    parser.add_argument(
        "--runs",
        type=int,
        default=5,
        help="Number of benchmark runs per scenario (default: 5)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="benchmark_output.json",
        help="Output JSON file (default: benchmark_output.json)",
    )

    args = parser.parse_args()

    try:
        results = _run(run_all(args.fanout, args.depth, args.runs))

        output_path = Path(args.output)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(results, f, indent=2)

        print("=" * 50)
        print("BENCHMARK RESULTS")
        print("=" * 50)
        for name, result in results["scenarios"].items():
            print(f"{name:<20} {result['mean_ms']:.3f}ms ({result['ops_per_sec']:.0f} ops/s)")
        print(f"Fan-out overhead: {results['comparison']['fanout_overhead_factor']:.2f}x")
        print(f"Chain overhead:   {results['comparison']['chain_overhead_factor']:.2f}x")
        print(f"Results saved to: {output_path}")
        print("=" * 50)

        return 0

    except Exception as e:
        print(f"Error running benchmark: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
