"""Module-wide floating-point precision configuration.

Provides ``set_dtype`` and ``get_dtype`` to control the float dtype used
for :class:`~odejax.vector.NumericVector` buffers.  The default is
``jnp.float64`` so that vector integrations carry the same precision as
the scalar solvers, which always compute in Python ``float``.  Selecting
``jnp.float64`` enables JAX's 64-bit mode (``jax_enable_x64``); this
happens once at import for the default.

Vectors capture the dtype when they are created.  Changing the dtype does
not convert vectors that already exist.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

_VALID_DTYPES = (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64)

_dtype = jnp.float64
jax.config.update("jax_enable_x64", True)


def set_dtype(dtype) -> None:
    """Set the module-wide float dtype for odejax.

    If *dtype* is ``jnp.float64``, JAX's 64-bit mode is automatically
    enabled via ``jax.config.update("jax_enable_x64", True)``.

    Args:
        dtype: One of ``jnp.float16``, ``jnp.bfloat16``, ``jnp.float32``,
            or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float64``).
    """
    return _dtype


def get_machine_epsilon() -> float:
    """Return the spacing between 1.0 and the next representable value.

    Used by the adaptive controller to keep its error ratio finite when
    both trial states are zero.  The value follows the configured dtype:

    - ``float64``:  ~2.2e-16
    - ``float32``:  ~1.2e-7
    - ``bfloat16``: ~7.8e-3
    - ``float16``:  ~9.8e-4

    Returns:
        float: Machine epsilon of the active dtype.
    """
    return float(jnp.finfo(_dtype).eps)
