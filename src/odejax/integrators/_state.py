"""State arithmetic shared by the RK4 stepper and the adaptive controller.

The stepper and controller are written once against the small
:class:`StateAlgebra` interface.  Two implementations are provided:

- :class:`ScalarAlgebra` for states that are real scalars, computed in
  Python ``float`` (IEEE double).
- :class:`VectorAlgebra` for :class:`~odejax.vector.NumericVector`
  states.  Every intermediate derivative is frozen into an ``IMMUTABLE``
  snapshot, and every combination starts from an ``IMMUTABLE`` operand so
  that the result lands in a fresh buffer and never in the caller's state.

:func:`algebra_for` selects the implementation from the initial state.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, Protocol

from odejax.config import get_machine_epsilon
from odejax.vector import NumericVector, VectorType


class StateAlgebra(Protocol):
    """Arithmetic needed to advance and compare states of one kind."""

    hashable: bool

    def prepare(self, x: Any) -> Any:
        """Convert a caller-supplied initial state to the working form."""

    def freeze(self, k: Any) -> Any:
        """Snapshot a derivative value so later arithmetic cannot alter it."""

    def release(self, x: Any) -> Any:
        """Convert a final state to the form handed back to the caller."""

    def shift(self, x: Any, k: Any, h: float) -> Any:
        """Return ``x + h * k`` without modifying ``x``."""

    def combine(self, x: Any, k1: Any, k2: Any, k3: Any, k4: Any, h: float) -> Any:
        """Return ``x + h / 6 * (k1 + 2 k2 + 2 k3 + k4)`` without modifying ``x``."""

    def error_ratio(self, x_small: Any, x_big: Any, err: float) -> float:
        """Return the step-doubling error ratio of two trial states."""


class ScalarAlgebra:
    """Arithmetic on real scalar states."""

    hashable = True

    # Smallest increment above 1.0; keeps the error ratio finite at x == 0.
    eps = math.ulp(1.0)

    def prepare(self, x: Any) -> float:
        return float(x)

    def freeze(self, k: Any) -> float:
        return float(k)

    def release(self, x: Any) -> float:
        return float(x)

    def shift(self, x: float, k: float, h: float) -> float:
        return x + h * k

    def combine(self, x: float, k1: float, k2: float, k3: float, k4: float, h: float) -> float:
        return x + h / 6.0 * (k1 + k4 + 2.0 * (k2 + k3))

    def error_ratio(self, x_small: float, x_big: float, err: float) -> float:
        return abs(x_small - x_big) / (err * (abs(x_small) + abs(x_big)) / 2.0 + self.eps)


class VectorAlgebra:
    """Arithmetic on :class:`~odejax.vector.NumericVector` states.

    The error ratio is computed per component and reduced with the
    maximum, so a step is accepted only when every component meets the
    error target.
    """

    hashable = False

    def prepare(self, x: NumericVector) -> NumericVector:
        return x.to_immutable()

    def freeze(self, k: Any) -> NumericVector:
        if isinstance(k, NumericVector):
            return k.to_immutable()
        return NumericVector.from_array(k, VectorType.IMMUTABLE)

    def release(self, x: NumericVector) -> NumericVector:
        # Accepted trial states are IMMUTABLE snapshots; tail steps are not.
        return x.to_mutable()

    def shift(self, x: NumericVector, k: NumericVector, h: float) -> NumericVector:
        # k is IMMUTABLE: mult allocates, add then writes into that buffer.
        return k.mult(h).add(x)

    def combine(
        self,
        x: NumericVector,
        k1: NumericVector,
        k2: NumericVector,
        k3: NumericVector,
        k4: NumericVector,
        h: float,
    ) -> NumericVector:
        return k2.add(k3).mult(2.0).add(k1).add(k4).mult(h / 6.0).add(x)

    def error_ratio(self, x_small: NumericVector, x_big: NumericVector, err: float) -> float:
        x_small = x_small.to_immutable()
        x_big = x_big.to_immutable()
        scale = x_small.abs().add(x_big.abs()).mult(err / 2.0).add(get_machine_epsilon())
        return x_small.sub(x_big).abs().div(scale).max()


SCALAR = ScalarAlgebra()
VECTOR = VectorAlgebra()


def algebra_for(x: Any) -> StateAlgebra:
    """Return the state algebra matching the type of *x*.

    Args:
        x: Initial state: a real scalar (including zero-dimensional
            arrays) or a :class:`~odejax.vector.NumericVector`.

    Returns:
        StateAlgebra: :data:`SCALAR` or :data:`VECTOR`.

    Raises:
        TypeError: If *x* is neither a real scalar nor a vector.
    """
    if isinstance(x, NumericVector):
        return VECTOR
    if isinstance(x, Real) or (hasattr(x, "ndim") and x.ndim == 0):
        return SCALAR
    raise TypeError(
        f"State must be a real scalar or a NumericVector, got {type(x).__name__}"
    )
