"""Classic 4th-order Runge-Kutta integrator (RK4).

Implements the standard four-stage, 4th-order explicit Runge-Kutta method
and the fixed-step solver built on it.

The Butcher tableau for RK4 is:

.. math::

    \\begin{array}{c|cccc}
    0   &     &     &     &   \\\\
    1/2 & 1/2 &     &     &   \\\\
    1/2 &  0  & 1/2 &     &   \\\\
    1   &  0  &  0  &  1  &   \\\\
    \\hline
        & 1/6 & 1/3 & 1/3 & 1/6
    \\end{array}

The method achieves 4th-order accuracy, meaning the local truncation error
is :math:`O(h^5)` and the global error is :math:`O(h^4)`.  It is exact for
derivatives that are polynomials of degree <= 3 in ``t``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from functools import partial
from typing import Any

from odejax.integrators._state import StateAlgebra, algebra_for
from odejax.integrators._types import FixedStepConfig
from odejax.integrators.base import DerivativeFunction, ODESolver
from odejax.integrators.cache import StepResultCache, memoize

logger = logging.getLogger(__name__)

Stepper = Callable[[DerivativeFunction, Any, float, float], Any]
"""Single-step update ``(f, x, t, h) -> x(t + h)``."""


def rk4_step(
    derivative: DerivativeFunction,
    x: Any,
    t: float,
    h: float,
    algebra: StateAlgebra | None = None,
) -> Any:
    """Perform a single RK4 integration step.

    Advances the state from time ``t`` to ``t + h``.  The input state is
    never modified.  For vector states each stage derivative is frozen
    into an ``IMMUTABLE`` snapshot before it is combined.

    Args:
        derivative: ODE right-hand side ``f(x, t) -> dx/dt``.
        x: Current state, a real scalar or a
            :class:`~odejax.vector.NumericVector`.
        t: Current time.
        h: Step to take. May be negative for backward integration.
        algebra: State arithmetic to use. Inferred from *x* when ``None``.

    Returns:
        The state at ``t + h``: a ``float`` for scalar states, a new
        ``MUTABLE`` vector for vector states.

    Examples:
        ```python
        from odejax.integrators import rk4_step
        rk4_step(lambda x, t: -x, 1.0, 0.0, 0.01)  # ~exp(-0.01)
        ```
    """
    if algebra is None:
        algebra = algebra_for(x)

    half = 0.5 * h
    t_half = t + half

    k1 = algebra.freeze(derivative(x, t))
    k2 = algebra.freeze(derivative(algebra.shift(x, k1, half), t_half))
    k3 = algebra.freeze(derivative(algebra.shift(x, k2, half), t_half))
    k4 = algebra.freeze(derivative(algebra.shift(x, k3, h), t + h))

    return algebra.combine(x, k1, k2, k3, k4, h)


def bind_stepper(algebra: StateAlgebra, cache: StepResultCache | None = None) -> Stepper:
    """Return the RK4 stepper for one kind of state.

    Args:
        algebra: State arithmetic the stepper is bound to.
        cache: Optional step cache. Only scalar states can be cached.

    Returns:
        Stepper: ``(f, x, t, h) -> x(t + h)``, memoized when *cache* is set.

    Raises:
        TypeError: If a cache is given for a state kind that cannot be
            used as a cache key.
    """
    stepper = partial(rk4_step, algebra=algebra)
    if cache is None:
        return stepper
    if not algebra.hashable:
        raise TypeError("StepResultCache only supports scalar states")
    return memoize(stepper, cache)


class RK4Solver(ODESolver):
    """Fixed-step RK4 solver.

    Marches whole steps of the configured size toward the target time,
    then takes one final partial step that lands exactly on it.

    Args:
        config: Step size configuration. Defaults to
            :class:`FixedStepConfig` with step size 0.1.
        cache: Optional step cache for scalar solves.

    Examples:
        ```python
        from odejax.integrators import FixedStepConfig, RK4Solver
        solver = RK4Solver(FixedStepConfig(step_size=0.01))
        solver.solve(lambda x, t: 2.0 * t, 0.0, 0.0, 3.0)  # 9.0
        ```
    """

    def __init__(
        self,
        config: FixedStepConfig | None = None,
        cache: StepResultCache | None = None,
    ) -> None:
        super().__init__(config if config is not None else FixedStepConfig(), cache)

    def solve(self, derivative: DerivativeFunction, xi: Any, ti: float, t: float) -> Any:
        algebra = algebra_for(xi)
        xi = algebra.prepare(xi)
        ti = float(ti)
        t = float(t)
        if t == ti:
            logger.debug("Zero-width interval at t = %r; returning initial state", t)
            return algebra.release(xi)

        step = bind_stepper(algebra, self._cache)
        dt = -self.config.step_size if t < ti else self.config.step_size

        for _ in range(math.floor((t - ti) / dt)):
            xi = step(derivative, xi, ti, dt)
            ti += dt

        if t != ti:
            xi = step(derivative, xi, ti, t - ti)
        return algebra.release(xi)
