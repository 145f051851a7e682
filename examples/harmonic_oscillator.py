# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "odejax"]
#
# [tool.uv.sources]
# odejax = { path = ".." }
# ///
"""Integrate a harmonic oscillator and compare against the exact solution.

The state is the vector ``[v, x]`` with ``v' = -w^2 x`` and ``x' = v``.
Starting from rest at amplitude ``A``, the exact position is
``A cos(w t)``.  The oscillator is integrated over several periods with
either the fixed-step or the adaptive RK4 solver, and the position error
is reported at every quarter period.

Requires odejax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/harmonic_oscillator.py [OPTIONS]

Examples:
    # Fixed step of 0.01 over three periods
    uv run examples/harmonic_oscillator.py --solver fixed --step 0.01 --periods 3

    # Adaptive solver with a looser error target
    uv run examples/harmonic_oscillator.py --solver adaptive --tolerance 1e-9
"""

import enum
import math
import time
from typing import Annotated

import jax.numpy as jnp
import typer

from odejax import NumericVector
from odejax.integrators import AdaptiveConfig, FixedStepConfig, create_solver


class Solver(enum.StrEnum):
    fixed = "fixed"
    adaptive = "adaptive"


def main(
    solver: Annotated[Solver, typer.Option(help="Integration scheme")] = Solver.fixed,
    period: Annotated[float, typer.Option(help="Oscillation period")] = 2.0,
    periods: Annotated[int, typer.Option(help="Number of periods to integrate")] = 2,
    amplitude: Annotated[float, typer.Option(help="Initial displacement")] = 1.5,
    step: Annotated[float, typer.Option(help="Step size (initial step when adaptive)")] = 0.01,
    tolerance: Annotated[
        float, typer.Option(help="Local truncation error target (adaptive only)")
    ] = 1e-12,
):
    omega = 2.0 * math.pi / period
    w2 = omega * omega

    def derivative(state, t):
        s = state.to_array()
        return jnp.stack([-w2 * s[1], s[0]])

    if solver is Solver.fixed:
        config = FixedStepConfig(step_size=step)
    else:
        config = AdaptiveConfig(local_truncation_error=tolerance, initial_step_size=step)

    ode = create_solver(config)
    x = ode.solution(derivative, NumericVector.immutable(0.0, amplitude), 0.0)
    print(f"Solver: {ode!r}")
    print(f"  omega = {omega:.6f} rad/s, period = {period}, amplitude = {amplitude}")

    print(f"\n{'t':>10} {'x(t)':>16} {'exact':>16} {'error':>12}")
    t0 = time.perf_counter()
    max_error = 0.0
    for k in range(4 * periods + 1):
        t = k * period / 4.0
        position = x(t).get(1)
        exact = amplitude * math.cos(omega * t)
        error = abs(position - exact)
        max_error = max(max_error, error)
        print(f"{t:>10.4f} {position:>16.10f} {exact:>16.10f} {error:>12.3e}")
    elapsed = time.perf_counter() - t0

    print(f"\nMax position error: {max_error:.3e}")
    print(f"Elapsed: {elapsed:.2f}s")


if __name__ == "__main__":
    typer.run(main)
