"""Adaptive RK4 solver.

Drives :class:`~odejax.integrators._adaptive.AdaptiveStepController`
from the initial time toward the requested time, then closes the
remaining gap with one plain RK4 step so the result lands exactly on the
requested time.
"""

from __future__ import annotations

import logging
from typing import Any

from odejax.integrators._adaptive import AdaptiveStepController
from odejax.integrators._state import algebra_for
from odejax.integrators._types import AdaptiveConfig
from odejax.integrators.base import DerivativeFunction, ODESolver
from odejax.integrators.cache import StepResultCache
from odejax.integrators.rk4 import bind_stepper

logger = logging.getLogger(__name__)


class AdaptiveRK4Solver(ODESolver):
    """Step-doubling adaptive RK4 solver.

    Args:
        config: Error target and step-size control constants. Defaults to
            :class:`AdaptiveConfig`.
        cache: Optional step cache for scalar solves. Every RK4 step of the
            solve, including the final partial step, goes through it.

    Raises:
        ConvergenceError: From :meth:`solve`, when no acceptable step can
            be found within ``config.max_tries`` trials.

    Examples:
        ```python
        from odejax.integrators import AdaptiveConfig, AdaptiveRK4Solver
        config = AdaptiveConfig(initial_step_size=0.03)
        AdaptiveRK4Solver(config).solve(lambda x, t: t, 8.0, -4.0, 6.0)  # 18.0
        ```
    """

    def __init__(
        self,
        config: AdaptiveConfig | None = None,
        cache: StepResultCache | None = None,
    ) -> None:
        super().__init__(config if config is not None else AdaptiveConfig(), cache)
        self._controller = AdaptiveStepController(self.config)

    @property
    def controller(self) -> AdaptiveStepController:
        return self._controller

    def solve(self, derivative: DerivativeFunction, xi: Any, ti: float, t: float) -> Any:
        algebra = algebra_for(xi)
        xi = algebra.prepare(xi)
        ti = float(ti)
        t = float(t)
        if t == ti:
            logger.debug("Zero-width interval at t = %r; returning initial state", t)
            return algebra.release(xi)

        step = bind_stepper(algebra, self._cache)
        result = self._controller.advance(derivative, xi, ti, t, step, algebra)
        xi, ti = result.state, result.t

        if t != ti:
            xi = step(derivative, xi, ti, t - ti)
        return algebra.release(xi)
