"""
Performance Benchmark
=====================

Measures session tick and environment step throughput.

Usage:
    python -m tools.benchmark_speed [--steps S] [--quick]
"""

from __future__ import annotations

import argparse
import sys
import time
import numpy as np

from stacker.stack_core.config_loader import load_config
from stacker.stack_core.session import GameSession
from stacker.stack_core.env_gym import StackerEnv


def benchmark_session(
    num_steps: int = 10000,
    drop_probability: float = 0.01,
    seed: int = 42
) -> dict:
    """
    Benchmark raw GameSession without Gym overhead.

    Args:
        num_steps: Number of ticks.
        drop_probability: Chance of a drop on each tick.
        seed: Random seed for the drop pattern.

    Returns:
        Dict with timing results.
    """
    session = GameSession(config=load_config())
    rng = np.random.default_rng(seed)

    session.reset()
    start = time.perf_counter()

    for _ in range(num_steps):
        if rng.random() < drop_probability:
            session.drop()
        if session.is_over:
            session.reset()
        session.tick()

    elapsed = time.perf_counter() - start

    return {
        "mode": "session",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_env(
    num_steps: int = 10000,
    drop_probability: float = 0.01,
    seed: int = 42,
    image_obs: bool = False
) -> dict:
    """
    Benchmark StackerEnv steps.

    Args:
        num_steps: Number of steps to run.
        drop_probability: Chance of a drop action on each step.
        seed: Random seed for the drop pattern.
        image_obs: Include rendered frames in observations.

    Returns:
        Dict with timing results.
    """
    env = StackerEnv(image_obs=image_obs)
    rng = np.random.default_rng(seed)

    env.reset()
    start = time.perf_counter()

    for _ in range(num_steps):
        action = int(rng.random() < drop_probability)
        _, _, terminated, truncated, _ = env.step(action)
        if terminated or truncated:
            env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "env_image" if image_obs else "env",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def run_all_benchmarks(steps: int = 10000) -> list:
    """Run comprehensive benchmarks."""
    print("=" * 60)
    print("STACKER PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    results = [
        benchmark_session(num_steps=steps),
        benchmark_env(num_steps=steps),
        benchmark_env(num_steps=max(1, steps // 10), image_obs=True),
    ]

    print(f"{'Mode':<20} {'Steps':>8} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 52)
    for r in results:
        print(f"{r['mode']:<20} {r['num_steps']:>8} "
              f"{r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.4f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Stacker performance")
    parser.add_argument("--steps", type=int, default=10000, help="Steps per benchmark")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")

    args = parser.parse_args()

    run_all_benchmarks(steps=1000 if args.quick else args.steps)
    return 0


if __name__ == "__main__":
    sys.exit(main())
