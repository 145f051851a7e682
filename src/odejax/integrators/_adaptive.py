"""Adaptive step-size control by step doubling.

Each trial compares two RK4 half steps against one full RK4 step from the
same state.  Their difference estimates the local truncation error:

.. math::

    r = \\frac{|x_{small} - x_{big}|}
             {\\epsilon_{lte} \\, (|x_{small}| + |x_{big}|) / 2 + \\text{EPS}}

For vector states the ratio is taken per component and reduced with the
maximum.  A trial is accepted when :math:`r < 1`.  After every trial,
accepted or not, the next step is predicted as

.. math::

    \\tau_{next} = S_1 \\, \\tau \\, r^{-1/5}

and clamped so that its magnitude stays within a factor :math:`S_2` of
the step just tried.
"""

from __future__ import annotations

import logging
from typing import Any

from odejax.errors import ConvergenceError
from odejax.integrators._state import StateAlgebra
from odejax.integrators._types import AdaptiveConfig, AdaptiveStepResult
from odejax.integrators.base import DerivativeFunction
from odejax.integrators.rk4 import Stepper

logger = logging.getLogger(__name__)


def compute_error_ratio(
    algebra: StateAlgebra,
    x_small: Any,
    x_big: Any,
    local_truncation_error: float,
) -> float:
    """Compute the step-doubling error ratio of two trial states.

    Args:
        algebra: State arithmetic of the trial states.
        x_small: Result of two half steps.
        x_big: Result of one full step.
        local_truncation_error: Target fractional error.

    Returns:
        float: Error ratio; the trial is acceptable when it is < 1.0.
    """
    return algebra.error_ratio(x_small, x_big, local_truncation_error)


def compute_next_step_size(
    tau: float,
    error_ratio: float,
    sign: float,
    safety_factor1: float,
    safety_factor2: float,
) -> float:
    """Predict the step to try after a trial of step *tau*.

    The prediction ``safety_factor1 * tau * error_ratio**-0.2`` is clamped
    to ``[tau / safety_factor2, safety_factor2 * tau]``.  For backward
    integration (``sign < 0``) *tau* is negative, so the two bounds swap
    roles: the lower bound becomes the most negative admissible step.

    A zero error ratio predicts unbounded growth, so the step grows by the
    full factor *safety_factor2*.

    Args:
        tau: Signed step size of the trial just evaluated.
        error_ratio: Error ratio of that trial.
        sign: Direction of integration, +1.0 or -1.0.
        safety_factor1: Multiplier of the predicted step, in ``[0, 1)``.
        safety_factor2: Maximum ratio between successive steps, > 1.

    Returns:
        float: Signed next step size.
    """
    if error_ratio == 0.0:
        candidate = safety_factor2 * tau
    else:
        candidate = safety_factor1 * tau * error_ratio ** -0.2
    if sign >= 0.0:
        return min(max(candidate, tau / safety_factor2), safety_factor2 * tau)
    return max(min(candidate, tau / safety_factor2), safety_factor2 * tau)


class AdaptiveStepController:
    """Step-doubling RK4 controller with bounded retries.

    One call to :meth:`advance` marches from ``(x, t_start)`` toward
    ``t_target`` with steps chosen to meet the configured error target.
    It stops when a step lands exactly on ``t_target`` or when the next
    accepted step would overshoot it; the remaining partial step is left
    to the caller.

    Args:
        config: Error target and step-size control constants.
    """

    def __init__(self, config: AdaptiveConfig) -> None:
        self.config = config

    def advance(
        self,
        derivative: DerivativeFunction,
        x: Any,
        t_start: float,
        t_target: float,
        step: Stepper,
        algebra: StateAlgebra,
    ) -> AdaptiveStepResult:
        """March toward *t_target* with error-controlled steps.

        Args:
            derivative: ODE right-hand side ``f(x, t) -> dx/dt``.
            x: State at *t_start*, in the working form of *algebra*.
            t_start: Initial time.
            t_target: Target time.
            step: RK4 stepper ``(f, x, t, h) -> x(t + h)``.
            algebra: State arithmetic matching *x*.

        Returns:
            AdaptiveStepResult: Last committed state and time.

        Raises:
            ConvergenceError: If ``max_tries`` consecutive trials at one
                point all have an error ratio >= 1.0.
        """
        config = self.config
        sign = -1.0 if t_target < t_start else 1.0
        tau = sign * config.initial_step_size
        ti = t_start
        steps = 0
        done = False

        while not done:
            for tries in range(1, config.max_tries + 1):
                half = 0.5 * tau
                x_small = algebra.freeze(step(derivative, step(derivative, x, ti, half), ti + half, half))
                x_big = algebra.freeze(step(derivative, x, ti, tau))
                ratio = compute_error_ratio(algebra, x_small, x_big, config.local_truncation_error)

                tau_old = tau
                tau = compute_next_step_size(
                    tau_old, ratio, sign, config.safety_factor1, config.safety_factor2
                )

                if ratio < 1.0:
                    t_diff = sign * (t_target - (ti + tau_old))
                    if t_diff < 0.0:
                        logger.debug(
                            "Step %r from t = %r overshoots t = %r; stopping", tau_old, ti, t_target
                        )
                        done = True
                    else:
                        x = x_small
                        ti = ti + tau_old
                        steps += 1
                        done = t_diff == 0.0
                    break

                logger.debug(
                    "Rejected step %r at t = %r (try %d, error ratio %r)", tau_old, ti, tries, ratio
                )
            else:
                logger.warning(
                    "No acceptable step after %d tries at t = %r", config.max_tries, ti
                )
                raise ConvergenceError(ti, config.max_tries)

        logger.debug("Advanced %d steps to t = %r (target %r)", steps, ti, t_target)
        return AdaptiveStepResult(state=x, t=ti, steps=steps, done=t_target == ti)
