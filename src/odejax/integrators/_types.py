"""Type definitions for numerical integrators.

Provides the configuration records consumed by the solvers and the result
type of one adaptive advance:

- :class:`FixedStepConfig`: Step size of the fixed-step RK4 solver.
- :class:`AdaptiveConfig`: Error target and step-size control constants of
  the adaptive RK4 solver.
- :class:`AdaptiveStepResult`: Outcome of one
  :meth:`~odejax.integrators._adaptive.AdaptiveStepController.advance` call.

Configurations are frozen dataclasses validated on construction, so an
invalid value is reported before any integration starts.  Step sizes are
stored as magnitudes; the direction of integration is taken from the
requested interval at solve time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple


@dataclass(frozen=True)
class FixedStepConfig:
    """Configuration of the fixed-step RK4 solver.

    Args:
        step_size: Step size. Must be nonzero; a negative value is stored
            as its magnitude.

    Raises:
        ValueError: If *step_size* is zero.

    Examples:
        ```python
        from odejax.integrators import FixedStepConfig
        FixedStepConfig(step_size=-0.01).step_size  # 0.01
        ```
    """

    step_size: float = 0.1

    def __post_init__(self) -> None:
        if self.step_size == 0.0:
            raise ValueError("Step size cannot be zero.")
        object.__setattr__(self, "step_size", abs(float(self.step_size)))


@dataclass(frozen=True)
class AdaptiveConfig:
    """Configuration of the adaptive (step-doubling) RK4 solver.

    Defaults are tuned for tight double-precision work: a fractional error
    target of 1e-12, an initial step of 0.1, up to 100 trials per step,
    and step changes bounded to a factor of 4 in either direction.

    Args:
        local_truncation_error: Target fractional error per accepted step.
            Must be non-negative.
        initial_step_size: Step size of the first trial. Must be nonzero;
            a negative value is stored as its magnitude.
        max_tries: Number of trials allowed at a single point before the
            integration fails. Must be non-negative.
        safety_factor1: Multiplier applied to the predicted step size.
            Must lie in ``[0, 1)``.
        safety_factor2: Bound on the ratio between successive step sizes.
            Must be greater than 1.

    Raises:
        ValueError: If any value is outside its valid range.
    """

    local_truncation_error: float = 1e-12
    initial_step_size: float = 0.1
    max_tries: int = 100
    safety_factor1: float = 0.9
    safety_factor2: float = 4.0

    def __post_init__(self) -> None:
        if self.local_truncation_error < 0.0:
            raise ValueError(
                f"Local truncation error must be non-negative, got {self.local_truncation_error}"
            )
        if self.initial_step_size == 0.0:
            raise ValueError("Initial step size cannot be zero.")
        if self.max_tries < 0:
            raise ValueError(f"Maximum tries must be non-negative, got {self.max_tries}")
        if not 0.0 <= self.safety_factor1 < 1.0:
            raise ValueError(
                f"Safety factor 1 must be in [0, 1), got {self.safety_factor1}"
            )
        if self.safety_factor2 <= 1.0:
            raise ValueError(
                f"Safety factor 2 must be greater than 1.0, got {self.safety_factor2}"
            )
        object.__setattr__(self, "initial_step_size", abs(float(self.initial_step_size)))


class AdaptiveStepResult(NamedTuple):
    """Outcome of one adaptive advance toward a target time.

    Attributes:
        state: Last committed state.
        t: Time of ``state``.
        steps: Number of steps committed during the advance.
        done: ``True`` when ``t`` equals the target time exactly. When
            ``False`` the remaining interval is shorter than the next viable
            step and the caller finishes it with one plain RK4 step.
    """

    state: Any
    t: float
    steps: int
    done: bool
