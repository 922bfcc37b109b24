"""Benchmark habitat generation speed.

Fixture generators are cached, so the first build is the cold one and is
reported separately.

Usage:
    uv run python -m habitat_gen.bench_gen                 # 20 builds, default config
    uv run python -m habitat_gen.bench_gen --count 100     # more builds
    uv run python -m habitat_gen.bench_gen --preview       # coarse tessellation
    uv run python -m habitat_gen.bench_gen --no-compile    # generation only
"""

from __future__ import annotations

import argparse
import time

import numpy as np

from habitat_gen.builder import build_habitat
from habitat_gen.config import HabitatConfig
from habitat_gen.mj_scene import build_spec


def bench(n_builds: int, config: HabitatConfig, compile_model: bool) -> dict:
    """Run the benchmark. Returns timing stats."""
    gen_times: list[float] = []
    compile_times: list[float] = []
    part_counts: list[int] = []

    for _ in range(n_builds):
        t0 = time.perf_counter()
        habitat = build_habitat(config)
        t1 = time.perf_counter()
        gen_times.append(t1 - t0)
        part_counts.append(len(habitat.root.parts()))

        if compile_model:
            t2 = time.perf_counter()
            build_spec(habitat).compile()
            t3 = time.perf_counter()
            compile_times.append(t3 - t2)

    gen_arr = np.array(gen_times) * 1000  # ms
    warm = gen_arr[1:] if len(gen_arr) > 1 else gen_arr

    stats = {
        "n_builds": n_builds,
        "parts": int(part_counts[0]),
        "gen_cold_ms": float(gen_arr[0]),
        "gen_mean_ms": float(np.mean(warm)),
        "gen_median_ms": float(np.median(warm)),
        "gen_p95_ms": float(np.percentile(warm, 95)),
        "gen_total_s": float(np.sum(gen_arr) / 1000),
        "builds_per_sec": n_builds / (np.sum(gen_arr) / 1000),
    }

    if compile_times:
        comp_arr = np.array(compile_times) * 1000
        stats["compile_mean_ms"] = float(np.mean(comp_arr))
        stats["compile_median_ms"] = float(np.median(comp_arr))
        stats["total_mean_ms"] = stats["gen_mean_ms"] + stats["compile_mean_ms"]

    return stats


def main():
    parser = argparse.ArgumentParser(description="Benchmark habitat generation")
    parser.add_argument("--count", type=int, default=20, help="Number of builds")
    parser.add_argument(
        "--preview", action="store_true", help="Coarser tessellation"
    )
    parser.add_argument(
        "--no-compile", action="store_true", help="Skip MjSpec compile (gen only)"
    )
    args = parser.parse_args()

    config = HabitatConfig.for_preview() if args.preview else HabitatConfig()

    print(f"Benchmarking {args.count} builds...")
    stats = bench(max(args.count, 1), config, compile_model=not args.no_compile)

    print(f"\n  builds:          {stats['n_builds']}")
    print(f"  parts/build:     {stats['parts']}")
    print(f"  gen cold:        {stats['gen_cold_ms']:.1f} ms")
    print(f"  gen mean:        {stats['gen_mean_ms']:.1f} ms")
    print(f"  gen median:      {stats['gen_median_ms']:.1f} ms")
    print(f"  gen p95:         {stats['gen_p95_ms']:.1f} ms")
    print(f"  gen total:       {stats['gen_total_s']:.2f} s")
    print(f"  builds/sec:      {stats['builds_per_sec']:.1f}")

    if "compile_mean_ms" in stats:
        print(f"  compile mean:    {stats['compile_mean_ms']:.1f} ms")
        print(f"  total mean:      {stats['total_mean_ms']:.1f} ms  (gen + compile)")


if __name__ == "__main__":
    main()
