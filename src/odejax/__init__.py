"""
odejax is a small library of Runge-Kutta solvers for first-order ODEs, with scalar and JAX-backed vector states.
"""

from .config import set_dtype, get_dtype, get_machine_epsilon
from .errors import ConvergenceError, ImmutableVectorError

from .vector import NumericVector, VectorType

from .integrators import (
    AdaptiveConfig,
    AdaptiveRK4Solver,
    FixedStepConfig,
    RK4Solver,
    StepResultCache,
    create_solver,
    rk4_step,
)
