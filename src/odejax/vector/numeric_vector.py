"""Fixed-length numeric vector with mutable and immutable aliasing modes.

Provides the :class:`NumericVector` class used as the state type of the
vector solvers.  The backing buffer is a one-dimensional ``jax.Array`` of
the module-wide dtype (see :mod:`odejax.config`).

Every transforming operation follows one output-target rule:

1. If an explicit output type ``out`` is given, a new vector of that type
   is returned.
2. Otherwise, a ``MUTABLE`` receiver is updated and returned itself.
3. Otherwise (``IMMUTABLE`` receiver), a new ``MUTABLE`` vector is returned.

The adaptive controller relies on this rule to keep trial states from
aliasing the caller's state, so it must not be relaxed.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable, Iterator
from numbers import Real

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from odejax.config import get_dtype
from odejax.errors import ImmutableVectorError
from odejax.vector._types import VectorType


class NumericVector:
    """Fixed-length array of floats tagged ``MUTABLE`` or ``IMMUTABLE``.

    Binary operations (:meth:`add`, :meth:`sub`, :meth:`mult`,
    :meth:`div`) accept either another vector of the same length or a
    real scalar, which is broadcast.  Unary operations transform each
    element independently.  All of them take an optional ``out`` argument
    selecting the output type, as described in the module docstring.

    The vector is registered as a JAX pytree with the buffer as its only
    leaf and the :class:`VectorType` as auxiliary data.

    Args:
        values: One-dimensional array-like of element values.
        vector_type: Aliasing mode of the new vector.

    Raises:
        ValueError: If *values* is not one-dimensional.

    Examples:
        ```python
        from odejax.vector import NumericVector, VectorType
        v = NumericVector([1.0, 2.0, 3.0], VectorType.IMMUTABLE)
        w = v.mult(2.0)          # new MUTABLE vector [2, 4, 6]
        w.add(1.0) is w          # True: MUTABLE receivers are reused
        ```
    """

    __slots__ = ('_data', '_type')

    def __init__(self, values: ArrayLike, vector_type: VectorType = VectorType.MUTABLE) -> None:
        data = jnp.asarray(values, dtype=get_dtype())
        if data.ndim != 1:
            raise ValueError(f"NumericVector requires one-dimensional values, got shape {data.shape}")
        self._data = data
        self._type = vector_type

    @classmethod
    def _from_internal(cls, data: Array, vector_type: VectorType) -> NumericVector:
        """Wrap an existing buffer without conversion or copy."""
        obj = object.__new__(cls)
        obj._data = data
        obj._type = vector_type
        return obj

    # Factory methods

    @classmethod
    def zeros(cls, size: int, vector_type: VectorType = VectorType.MUTABLE) -> NumericVector:
        """Create a zero-filled vector of length *size*."""
        return cls.full(size, 0.0, vector_type)

    @classmethod
    def full(cls, size: int, fill: float, vector_type: VectorType = VectorType.MUTABLE) -> NumericVector:
        """Create a vector of length *size* with every element set to *fill*.

        Raises:
            ValueError: If *size* is negative.
        """
        _check_size(size)
        return cls._from_internal(jnp.full((size,), fill, dtype=get_dtype()), vector_type)

    @classmethod
    def random(
        cls,
        size: int,
        vector_type: VectorType = VectorType.MUTABLE,
        key: Array | None = None,
    ) -> NumericVector:
        """Create a vector of uniform samples from ``[0, 1)``.

        Args:
            size: Length of the vector.
            vector_type: Aliasing mode of the new vector.
            key: ``jax.random`` key.  When ``None`` a fresh key is seeded
                from the operating system's entropy source, so repeated
                calls give different vectors.

        Returns:
            NumericVector: Vector of length *size*.

        Raises:
            ValueError: If *size* is negative.
        """
        _check_size(size)
        if key is None:
            key = jax.random.PRNGKey(secrets.randbits(32))
        data = jax.random.uniform(key, (size,), dtype=get_dtype())
        return cls._from_internal(data, vector_type)

    @classmethod
    def from_array(cls, array: ArrayLike, vector_type: VectorType = VectorType.MUTABLE) -> NumericVector:
        """Create a vector holding a copy of a one-dimensional array."""
        return cls(jnp.array(array, dtype=get_dtype(), copy=True), vector_type)

    @classmethod
    def mutable(cls, *values: float) -> NumericVector:
        """Create a ``MUTABLE`` vector from explicit element values."""
        return cls(list(values), VectorType.MUTABLE)

    @classmethod
    def immutable(cls, *values: float) -> NumericVector:
        """Create an ``IMMUTABLE`` vector from explicit element values."""
        return cls(list(values), VectorType.IMMUTABLE)

    # Properties

    @property
    def vector_type(self) -> VectorType:
        """Aliasing mode of this vector."""
        return self._type

    @property
    def is_mutable(self) -> bool:
        return self._type is VectorType.MUTABLE

    def __len__(self) -> int:
        return self._data.shape[0]

    # Mode conversion

    def to_immutable(self) -> NumericVector:
        """Return an ``IMMUTABLE`` vector with the same values.

        Returns ``self`` when the vector is already ``IMMUTABLE``; otherwise
        the buffer is copied so that later writes to this vector cannot be
        observed through the result.
        """
        if self._type is VectorType.IMMUTABLE:
            return self
        return NumericVector._from_internal(jnp.array(self._data, copy=True), VectorType.IMMUTABLE)

    def to_mutable(self) -> NumericVector:
        """Return a ``MUTABLE`` vector with the same values.

        Returns ``self`` when the vector is already ``MUTABLE``; otherwise
        the buffer is copied.
        """
        if self._type is VectorType.MUTABLE:
            return self
        return NumericVector._from_internal(jnp.array(self._data, copy=True), VectorType.MUTABLE)

    def to_array(self) -> Array:
        """Return the current values as a ``jax.Array``.

        JAX arrays are immutable, so the returned array is a snapshot:
        later writes to a ``MUTABLE`` vector do not change it.
        """
        return self._data

    # Element access

    def get(self, index: int) -> float:
        """Return the element at *index*.

        Raises:
            IndexError: If *index* is outside ``[-len(self), len(self))``.
        """
        return float(self._data[self._normalize_index(index)])

    def set(self, index: int, value: float) -> None:
        """Assign *value* to the element at *index*.

        Raises:
            ImmutableVectorError: If the vector is ``IMMUTABLE``.
            IndexError: If *index* is outside ``[-len(self), len(self))``.
        """
        if self._type is VectorType.IMMUTABLE:
            raise ImmutableVectorError("The vector is immutable and cannot be modified.")
        self._data = self._data.at[self._normalize_index(index)].set(value)

    def __getitem__(self, index: int) -> float:
        return self.get(index)

    def __setitem__(self, index: int, value: float) -> None:
        self.set(index, value)

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.tolist())

    # Binary operations

    def add(self, other: NumericVector | float, out: VectorType | None = None) -> NumericVector:
        """Elementwise sum with a vector or a broadcast scalar.

        Args:
            other: Vector of the same length, or a real scalar.
            out: Output type override.  ``None`` applies the default
                output-target rule.

        Returns:
            NumericVector: The result vector (possibly ``self``).

        Raises:
            ValueError: If *other* is a vector of a different length.
        """
        return self._emit(self._data + self._operand(other), out)

    def sub(self, other: NumericVector | float, out: VectorType | None = None) -> NumericVector:
        """Elementwise difference ``self - other``.  See :meth:`add`."""
        return self._emit(self._data - self._operand(other), out)

    def mult(self, other: NumericVector | float, out: VectorType | None = None) -> NumericVector:
        """Elementwise product.  See :meth:`add`."""
        return self._emit(self._data * self._operand(other), out)

    def div(self, other: NumericVector | float, out: VectorType | None = None) -> NumericVector:
        """Elementwise quotient ``self / other``.  See :meth:`add`.

        Division by zero follows IEEE 754 and yields ``inf`` or ``nan``.
        """
        return self._emit(self._data / self._operand(other), out)

    # Unary operations

    def negate(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.negative(self._data), out)

    def inverse(self, out: VectorType | None = None) -> NumericVector:
        """Elementwise reciprocal ``1 / x``."""
        return self._emit(1.0 / self._data, out)

    def abs(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.abs(self._data), out)

    def signum(self, out: VectorType | None = None) -> NumericVector:
        """Elementwise sign: -1, 0 or +1 (``nan`` stays ``nan``)."""
        return self._emit(jnp.sign(self._data), out)

    def sqrt(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.sqrt(self._data), out)

    def cbrt(self, out: VectorType | None = None) -> NumericVector:
        """Elementwise real cube root (defined for negative values)."""
        return self._emit(jnp.cbrt(self._data), out)

    def exp(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.exp(self._data), out)

    def expm1(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.expm1(self._data), out)

    def log(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.log(self._data), out)

    def log1p(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.log1p(self._data), out)

    def log10(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.log10(self._data), out)

    def sin(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.sin(self._data), out)

    def cos(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.cos(self._data), out)

    def tan(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.tan(self._data), out)

    def asin(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.arcsin(self._data), out)

    def acos(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.arccos(self._data), out)

    def atan(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.arctan(self._data), out)

    def sinh(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.sinh(self._data), out)

    def cosh(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.cosh(self._data), out)

    def tanh(self, out: VectorType | None = None) -> NumericVector:
        return self._emit(jnp.tanh(self._data), out)

    def pow(self, exponent: float, out: VectorType | None = None) -> NumericVector:
        """Raise every element to the real power *exponent*."""
        return self._emit(jnp.power(self._data, exponent), out)

    def scalb(self, scale: int, out: VectorType | None = None) -> NumericVector:
        """Multiply every element by ``2 ** scale``.

        Raises:
            TypeError: If *scale* is not an integer.
        """
        if isinstance(scale, bool) or not isinstance(scale, int):
            raise TypeError(f"scalb requires an integer exponent, got {type(scale).__name__}")
        return self._emit(jnp.ldexp(self._data, scale), out)

    def apply(self, function: Callable[[float], float], out: VectorType | None = None) -> NumericVector:
        """Apply a scalar function to every element.

        *function* is called once per element with a Python ``float`` and
        must return a real number.
        """
        data = jnp.asarray([function(value) for value in self._data.tolist()], dtype=self._data.dtype)
        return self._emit(data, out)

    # Reductions

    def dot_product(self, other: NumericVector) -> float:
        """Return the inner product with a vector of the same length.

        Raises:
            TypeError: If *other* is not a :class:`NumericVector`.
            ValueError: If the lengths differ or the vectors are empty.
        """
        if not isinstance(other, NumericVector):
            raise TypeError(f"dot_product requires a NumericVector, got {type(other).__name__}")
        self._check_nonempty("dot_product")
        return float(jnp.dot(self._data, self._operand(other)))

    def max(self) -> float:
        """Return the largest element.

        Raises:
            ValueError: If the vector is empty.
        """
        self._check_nonempty("max")
        return float(jnp.max(self._data))

    def min(self) -> float:
        """Return the smallest element.

        Raises:
            ValueError: If the vector is empty.
        """
        self._check_nonempty("min")
        return float(jnp.min(self._data))

    # Internal helpers

    def _emit(self, data: Array, out: VectorType | None) -> NumericVector:
        if out is None:
            if self._type is VectorType.MUTABLE:
                self._data = data
                return self
            out = VectorType.MUTABLE
        return NumericVector._from_internal(data, out)

    def _operand(self, other: NumericVector | float) -> Array | float:
        if isinstance(other, NumericVector):
            if len(other) != len(self):
                raise ValueError(f"Vector length mismatch: {len(self)} != {len(other)}")
            return other._data
        if isinstance(other, Real) or (hasattr(other, "ndim") and other.ndim == 0):
            return other
        raise TypeError(
            f"Operand must be a NumericVector or a real scalar, got {type(other).__name__}"
        )

    def _normalize_index(self, index: int) -> int:
        n = len(self)
        if not -n <= index < n:
            raise IndexError(f"Index {index} out of range for vector of length {n}")
        return index + n if index < 0 else index

    def _check_nonempty(self, operation: str) -> None:
        if len(self) == 0:
            raise ValueError(f"{operation} is undefined for an empty vector")

    # String representations

    def __str__(self) -> str:
        values = ", ".join(f"{v:.6f}" for v in self._data.tolist())
        return f"NumericVector([{values}], {self._type.name})"

    def __repr__(self) -> str:
        return f"NumericVector({self._data.tolist()}, VectorType.{self._type.name})"


def _check_size(size: int) -> None:
    if size < 0:
        raise ValueError(f"Vector size must be non-negative, got {size}")


# Register as JAX pytree
jax.tree_util.register_pytree_node(
    NumericVector,
    lambda v: ((v._data,), v._type),
    lambda vector_type, children: NumericVector._from_internal(children[0], vector_type),
)
