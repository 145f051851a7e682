"""Factory for building a solver from its configuration record."""

from __future__ import annotations

from odejax.integrators._types import AdaptiveConfig, FixedStepConfig
from odejax.integrators.adaptive import AdaptiveRK4Solver
from odejax.integrators.base import ODESolver
from odejax.integrators.cache import StepResultCache
from odejax.integrators.rk4 import RK4Solver


def create_solver(
    config: FixedStepConfig | AdaptiveConfig,
    cache: StepResultCache | None = None,
) -> ODESolver:
    """Create the solver matching a configuration record.

    Args:
        config: :class:`FixedStepConfig` selects :class:`RK4Solver`;
            :class:`AdaptiveConfig` selects :class:`AdaptiveRK4Solver`.
        cache: Optional step cache passed to the solver.

    Returns:
        ODESolver: Configured solver.

    Raises:
        TypeError: If *config* is not a recognized configuration type.

    Examples:
        ```python
        from odejax.integrators import FixedStepConfig, create_solver
        solver = create_solver(FixedStepConfig(step_size=0.01))
        ```
    """
    if isinstance(config, FixedStepConfig):
        return RK4Solver(config, cache)
    if isinstance(config, AdaptiveConfig):
        return AdaptiveRK4Solver(config, cache)
    raise TypeError(
        f"config must be a FixedStepConfig or AdaptiveConfig, got {type(config).__name__}"
    )
