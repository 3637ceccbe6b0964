#!/usr/bin/env python3
"""Benchmark compute_visibility for both cast paths.

Usage (from the repo root):
    python scripts/bench_visibility.py                 # demo scene, 200 iterations
    python scripts/bench_visibility.py -n 1000
    python scripts/bench_visibility.py --scene my_scene.json --fov 6.2832
"""

import argparse
import statistics
import sys
import time
from pathlib import Path

# Add the repo root to path
SCRIPT_DIR = Path(__file__).resolve().parent
ROOT_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(ROOT_DIR))

from fovcast.scene_io import demo_scene_path, load_scene  # noqa: E402


def _time_path(scene, obstacles, vectorized, iterations, fov):
    light = scene.light.make_light(vectorized=vectorized)
    if fov is not None:
        light.set_fov(fov)

    # Warmup
    points = light.update(obstacles)

    times_ms = []
    for _ in range(iterations):
        start = time.perf_counter()
        light.update(obstacles)
        times_ms.append((time.perf_counter() - start) * 1000)
    return times_ms, len(points)


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark the visibility caster"
    )
    parser.add_argument(
        "-n",
        "--iterations",
        type=int,
        default=200,
        help="Number of timed calls per path (default: 200)",
    )
    parser.add_argument(
        "--scene",
        type=Path,
        default=demo_scene_path(),
        help="Scene JSON file (default: bundled demo)",
    )
    parser.add_argument("--fov", type=float, help="Override cone angle")
    args = parser.parse_args()

    scene = load_scene(args.scene)
    obstacles = scene.build_obstacles()
    print(f"Benchmark: {args.scene.name}, {len(obstacles)} obstacles")
    print(f"Iterations: {args.iterations}")

    for label, vectorized in (("python", False), ("numpy", True)):
        times_ms, n_points = _time_path(
            scene, obstacles, vectorized, args.iterations, args.fov
        )
        print()
        print(f"[{label}] {n_points} boundary points")
        print(f"  Median: {statistics.median(times_ms):.3f} ms")
        print(f"  Mean:   {statistics.mean(times_ms):.3f} ms")
        if len(times_ms) > 1:
            print(f"  Stdev:  {statistics.stdev(times_ms):.3f} ms")


if __name__ == "__main__":
    main()
