"""Common interface of the odejax solvers.

Every solver advances a first-order ODE ``dx/dt = f(x, t)`` from a known
state ``(xi, ti)`` to a requested time ``t``.  The state may be a real
scalar or a :class:`~odejax.vector.NumericVector`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from odejax.integrators.cache import StepResultCache
from odejax.vector import NumericVector

DerivativeFunction = Callable[[Any, float], Any]
"""Right-hand side ``f(x, t) -> dx/dt``."""


class ODESolver(ABC):
    """Base class of the first-order ODE solvers.

    Subclasses implement :meth:`solve`; :meth:`solution` is shared.

    Args:
        config: Solver configuration record.
        cache: Optional :class:`~odejax.integrators.cache.StepResultCache`
            memoizing RK4 steps of scalar solves.
    """

    def __init__(self, config: Any, cache: StepResultCache | None = None) -> None:
        self.config = config
        self._cache = cache

    @property
    def cache(self) -> StepResultCache | None:
        """Step cache used by scalar solves, or ``None``."""
        return self._cache

    @abstractmethod
    def solve(self, derivative: DerivativeFunction, xi: Any, ti: float, t: float) -> Any:
        """Return the state at time *t*.

        Args:
            derivative: Right-hand side ``f(x, t) -> dx/dt``.
            xi: State at time *ti*.
            ti: Initial time.
            t: Requested time; may precede *ti*.

        Returns:
            The state at *t*: a ``float`` for scalar states, a new
            ``MUTABLE`` vector for vector states, on every path including
            a zero-width interval.
        """
        ...

    def solution(self, derivative: DerivativeFunction, xi: Any, ti: float) -> Callable[[float], Any]:
        """Return the solution function ``t -> x(t)``.

        Each call of the returned function performs a fresh :meth:`solve`
        from ``(xi, ti)``; no progress is kept between calls.  A vector
        *xi* is snapshotted here, so later writes to it do not change the
        solution.

        Examples:
            ```python
            from odejax.integrators import AdaptiveRK4Solver
            x = AdaptiveRK4Solver().solution(lambda x, t: t, 8.0, -4.0)
            x(2.0)  # 2.0 == 2.0**2 / 2
            ```
        """
        if isinstance(xi, NumericVector):
            xi = xi.to_immutable()

        def x_of_t(t: float) -> Any:
            return self.solve(derivative, xi, ti, t)

        return x_of_t

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(config={self.config!r}, cache={self._cache!r})"
