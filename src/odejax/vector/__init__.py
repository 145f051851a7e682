"""Numeric vector value type used as the state of vector ODE solvers.

- :class:`NumericVector` -- fixed-length JAX-backed array with
  copy-on-write aliasing semantics
- :class:`VectorType` -- ``MUTABLE`` / ``IMMUTABLE`` tag
"""

from odejax.vector._types import VectorType
from odejax.vector.numeric_vector import NumericVector

__all__ = [
    "NumericVector",
    "VectorType",
]
