"""Tests for the odejax.config module."""

import jax
import jax.numpy as jnp
import pytest

from odejax.config import get_dtype, get_machine_epsilon, set_dtype
from odejax.vector import NumericVector


@pytest.fixture(autouse=True)
def reset_dtype():
    """Restore float64 after each test."""
    yield
    set_dtype(jnp.float64)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float64

    def test_x64_enabled(self):
        assert jax.config.jax_enable_x64 is True

    def test_set_float32(self):
        set_dtype(jnp.float32)
        assert get_dtype() == jnp.float32

    def test_roundtrip(self):
        for dtype in (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float64")


class TestMachineEpsilon:
    def test_float64_epsilon(self):
        assert get_machine_epsilon() == pytest.approx(2.220446049250313e-16, rel=1e-12)

    def test_float32_epsilon(self):
        set_dtype(jnp.float32)
        assert get_machine_epsilon() == pytest.approx(1.1920929e-07, rel=1e-6)

    def test_epsilon_is_gap_above_one(self):
        eps = get_machine_epsilon()
        assert 1.0 + eps > 1.0
        assert 1.0 + eps / 4.0 == 1.0


class TestVectorDtype:
    def test_vector_uses_configured_dtype(self):
        set_dtype(jnp.float32)
        v = NumericVector.zeros(3)
        assert v.to_array().dtype == jnp.float32

    def test_existing_vector_keeps_dtype(self):
        v = NumericVector.zeros(3)
        set_dtype(jnp.float32)
        assert v.to_array().dtype == jnp.float64
