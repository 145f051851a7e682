"""Exceptions raised by odejax.

Configuration problems, dimension mismatches and bad indices use the
built-in ``ValueError`` and ``IndexError``.  The two failures that need
their own type are defined here.
"""

from __future__ import annotations


class ImmutableVectorError(TypeError):
    """Raised when an element of an IMMUTABLE vector is assigned."""


class ConvergenceError(RuntimeError):
    """Raised when the adaptive controller exhausts its retry budget.

    Args:
        t: Time at which no acceptable step could be found.
        tries: Number of trials attempted at that time.
    """

    def __init__(self, t: float, tries: int) -> None:
        self.t = t
        self.tries = tries
        super().__init__(f"Adaptive Runge-Kutta failed at ti = {t:f}.")
