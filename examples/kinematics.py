# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "odejax"]
#
# [tool.uv.sources]
# odejax = { path = ".." }
# ///
"""Recover constant-acceleration motion from two nested ODE solves.

Velocity is obtained by integrating a constant acceleration, and position
by integrating that velocity, whose value at each time is itself an ODE
solve.  Both solvers share one step cache, so repeated evaluations of the
inner solution reuse steps already taken.

Requires odejax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/kinematics.py [OPTIONS]

Examples:
    # Default motion, cached
    uv run examples/kinematics.py

    # Disable the step cache to compare derivative evaluation counts
    uv run examples/kinematics.py --no-cache
"""

import time
from typing import Annotated

import typer

from odejax.integrators import AdaptiveConfig, AdaptiveRK4Solver, StepResultCache


def main(
    acceleration: Annotated[float, typer.Option(help="Constant acceleration")] = -9.81,
    velocity: Annotated[float, typer.Option(help="Initial velocity")] = 20.0,
    position: Annotated[float, typer.Option(help="Initial position")] = 0.0,
    t_start: Annotated[float, typer.Option(help="Initial time")] = 0.0,
    t_end: Annotated[float, typer.Option(help="Final time")] = 4.0,
    samples: Annotated[int, typer.Option(help="Number of sample times")] = 9,
    cache: Annotated[bool, typer.Option(help="Share a step cache between the solvers")] = True,
):
    step_cache = StepResultCache() if cache else None
    config = AdaptiveConfig(initial_step_size=0.1)
    evaluations = 0

    def accel(v, t):
        nonlocal evaluations
        evaluations += 1
        return acceleration

    v = AdaptiveRK4Solver(config, step_cache).solution(accel, velocity, t_start)
    x = AdaptiveRK4Solver(config, step_cache).solution(lambda pos, t: v(t), position, t_start)

    print(f"{'t':>8} {'x(t)':>14} {'exact':>14} {'error':>12}")
    t0 = time.perf_counter()
    for k in range(samples):
        t = t_start + (t_end - t_start) * k / max(samples - 1, 1)
        dt = t - t_start
        exact = position + velocity * dt + 0.5 * acceleration * dt * dt
        value = x(t)
        print(f"{t:>8.3f} {value:>14.8f} {exact:>14.8f} {abs(value - exact):>12.3e}")
    elapsed = time.perf_counter() - t0

    print(f"\nAcceleration evaluations: {evaluations}")
    if step_cache is not None:
        print(f"Cache: {step_cache!r}")
    print(f"Elapsed: {elapsed:.2f}s")


if __name__ == "__main__":
    typer.run(main)
