"""
Unit tests for the numeric tolerance kernel.
"""

from fractions import Fraction

import numpy as np
import pytest

from convexsets.core.tolerance import (
    EPS,
    Tolerance,
    get_tolerance,
    set_tolerance,
    reset_tolerance,
    isapproxzero,
    _isapprox,
    _leq,
    _geq,
)


class TestDefaults:
    """Tests for the per-type default tolerances."""

    def test_float_defaults(self):
        """Float tolerances are the documented defaults."""
        t = get_tolerance(float)
        assert t.ztol == EPS
        assert t.atol == EPS
        assert t.rtol == pytest.approx(1.5e-8)

    def test_exact_rationals(self):
        """Rationals compare exactly."""
        t = get_tolerance(Fraction)
        assert t == Tolerance(0, 0, 0)
        assert not _isapprox(Fraction(1, 3), Fraction(1, 3) + Fraction(1, 10**12))
        assert _isapprox(Fraction(1, 3), Fraction(2, 6))

    def test_set_and_reset(self):
        """Overrides are global until reset."""
        set_tolerance(float, ztol=1e-3)
        assert isapproxzero(1e-4)
        reset_tolerance()
        assert not isapproxzero(1e-4)

    def test_unknown_kind_rejected(self):
        """Only registered numeric types can be configured."""
        with pytest.raises(ValueError):
            set_tolerance(int, ztol=1.0)


class TestComparisons:
    """Tests for isapproxzero(), _isapprox(), _leq() and _geq()."""

    def test_isapproxzero(self):
        """Values below ztol are zero."""
        assert isapproxzero(0.0)
        assert isapproxzero(1e-12)
        assert not isapproxzero(1e-6)
        assert isapproxzero(np.array([1e-12, -1e-11]))

    def test_isapprox_relative(self):
        """Large numbers are compared relatively."""
        assert _isapprox(1e9, 1e9 + 1.0)
        assert not _isapprox(1.0, 1.001)

    def test_isapprox_both_tiny(self):
        """Two values below ztol are equal regardless of ratio."""
        assert _isapprox(1e-13, -1e-12)

    def test_isapprox_arrays(self):
        """Arrays are compared element-wise."""
        assert _isapprox(np.array([1.0, 2.0]), np.array([1.0, 2.0 + 1e-12]))
        assert not _isapprox(np.array([1.0, 2.0]), np.array([1.0, 2.1]))

    def test_leq_geq(self):
        """Ordering accepts approximately equal values."""
        assert _leq(1.0, 2.0)
        assert _leq(1.0 + 1e-12, 1.0)
        assert not _leq(1.1, 1.0)
        assert _geq(1.0, 1.0 + 1e-12)
        assert _leq(np.array([0.0, 1.0]), np.array([0.0, 2.0]))

    def test_per_call_override(self):
        """A tolerance passed explicitly wins over the default."""
        loose = Tolerance(rtol=1e-2, ztol=1e-2, atol=1e-2)
        assert _isapprox(1.0, 1.005, tol=loose)
        assert not _isapprox(1.0, 1.005)
        assert isapproxzero(5e-3, tol=loose)

    def test_float32_kind(self):
        """Single precision arrays use the looser float32 tolerances."""
        x = np.array([1.0], dtype=np.float32)
        y = np.array([1.0001], dtype=np.float32)
        assert _isapprox(x, y)
        assert not _isapprox(np.array([1.0]), np.array([1.0001]))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
