"""Memoization of scalar RK4 steps.

A solver may be given a :class:`StepResultCache` so that an RK4 step it
has already computed with bit-identical inputs is looked up instead of
recomputed.  Keys are ``(derivative, x, t, h)``:

- The derivative function is compared by identity, as Python compares
  function objects.  Two separately constructed but identical lambdas are
  different keys.
- Floats are compared bit-for-bit, so ``0.0`` and ``-0.0`` are different
  keys and identical ``nan`` values are the same key.

The cache never evicts on its own; entries accumulate until :meth:`clear`
is called.  All operations are atomic with respect to each other, so one
cache may be shared by solvers running on several threads.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable
from typing import Any

logger = logging.getLogger(__name__)

_MISSING = object()


def step_key(derivative: Callable, x: float, t: float, h: float) -> tuple:
    """Build the cache key of one RK4 step.

    Args:
        derivative: Right-hand side function, keyed by identity.
        x: Scalar state.
        t: Time.
        h: Step size.

    Returns:
        tuple: Hashable key.
    """
    return (derivative, float(x).hex(), float(t).hex(), float(h).hex())


class StepResultCache:
    """Thread-safe, unbounded map from step keys to step results.

    Uses a re-entrant lock: a derivative function may itself run a solver
    that shares this cache without deadlocking the calling thread.

    Examples:
        ```python
        from odejax.integrators import AdaptiveRK4Solver, StepResultCache
        cache = StepResultCache()
        solver = AdaptiveRK4Solver(cache=cache)
        solver.solve(lambda x, t: t, 0.0, 0.0, 1.0)
        len(cache) > 0  # True
        cache.clear()
        ```
    """

    def __init__(self) -> None:
        self._entries: dict[Hashable, Any] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def try_get(self, key: Hashable) -> Any | None:
        """Return the value stored under *key*, or ``None``."""
        with self._lock:
            return self._entries.get(key)

    def put(self, key: Hashable, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value."""
        with self._lock:
            self._entries[key] = value

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        """Return the value under *key*, computing and storing it if absent.

        The lookup, the computation and the store happen under the cache
        lock, so concurrent callers never compute the same key twice.

        Args:
            key: Entry key.
            compute: Zero-argument function producing the value.

        Returns:
            The cached or newly computed value.
        """
        with self._lock:
            value = self._entries.get(key, _MISSING)
            if value is not _MISSING:
                self._hits += 1
                return value
            self._misses += 1
            value = compute()
            self._entries[key] = value
            return value

    def clear(self) -> None:
        """Drop every entry and reset the hit/miss counters."""
        with self._lock:
            n_entries = len(self._entries)
            self._entries.clear()
            self._hits = 0
            self._misses = 0
        logger.debug("Cleared %d cached steps", n_entries)

    @property
    def hits(self) -> int:
        """Number of :meth:`get_or_compute` calls answered from the cache."""
        with self._lock:
            return self._hits

    @property
    def misses(self) -> int:
        """Number of :meth:`get_or_compute` calls that computed a value."""
        with self._lock:
            return self._misses

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __repr__(self) -> str:
        return f"StepResultCache(entries={len(self)}, hits={self.hits}, misses={self.misses})"


def memoize(
    stepper: Callable[[Callable, float, float, float], float],
    cache: StepResultCache,
) -> Callable[[Callable, float, float, float], float]:
    """Wrap a scalar stepper so that its results are stored in *cache*.

    Args:
        stepper: Function ``(f, x, t, h) -> x(t + h)``.
        cache: Cache receiving the results.

    Returns:
        A function with the same signature as *stepper*.
    """

    def memoized(derivative: Callable, x: float, t: float, h: float) -> float:
        return cache.get_or_compute(
            step_key(derivative, x, t, h),
            lambda: stepper(derivative, x, t, h),
        )

    return memoized
