"""Runge-Kutta solvers for first-order ODEs ``dx/dt = f(x, t)``.

Provides a fixed-step and an adaptive solver sharing one RK4 stepper.
States may be real scalars or :class:`~odejax.vector.NumericVector`
instances.

Available solvers:

- :class:`RK4Solver` -- Classic 4th-order Runge-Kutta (fixed step)
- :class:`AdaptiveRK4Solver` -- RK4 with step-doubling error control

Both solvers share a common interface::

    x_t = solver.solve(derivative, xi, ti, t)
    x = solver.solution(derivative, xi, ti)   # x(t) re-solves on each call

where ``derivative(x, t) -> dx/dt`` defines the ODE right-hand side.
"""

from odejax.integrators._adaptive import (
    AdaptiveStepController,
    compute_error_ratio,
    compute_next_step_size,
)
from odejax.integrators._types import AdaptiveConfig, AdaptiveStepResult, FixedStepConfig
from odejax.integrators.adaptive import AdaptiveRK4Solver
from odejax.integrators.base import ODESolver
from odejax.integrators.cache import StepResultCache, memoize, step_key
from odejax.integrators.factory import create_solver
from odejax.integrators.rk4 import RK4Solver, bind_stepper, rk4_step

__all__ = [
    "AdaptiveConfig",
    "AdaptiveRK4Solver",
    "AdaptiveStepController",
    "AdaptiveStepResult",
    "FixedStepConfig",
    "ODESolver",
    "RK4Solver",
    "StepResultCache",
    "bind_stepper",
    "compute_error_ratio",
    "compute_next_step_size",
    "create_solver",
    "memoize",
    "rk4_step",
    "step_key",
]
