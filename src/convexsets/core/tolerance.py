"""
Numeric tolerance kernel.

Approximate comparison primitives used by every geometric algorithm:
- isapproxzero : |x| below the zero tolerance
- _isapprox    : relative/absolute closeness
- _leq, _geq   : ordering up to approximate equality

Tolerances are configured once per numeric type (float, float32, exact
rationals) and can be overridden per call with ``tol=``.
"""

from dataclasses import dataclass, replace
from fractions import Fraction
from typing import Optional

import numpy as np


# Numerical tolerance for floating point comparisons
EPS = 1e-10


@dataclass(frozen=True)
class Tolerance:
    """
    Tolerance triple for one numeric type.

    Attributes
    ----------
    rtol : float
        Relative tolerance used by approximate equality.
    ztol : float
        Threshold below which a value counts as zero.
    atol : float
        Absolute tolerance used by approximate equality.
    """
    rtol: float
    ztol: float
    atol: float


_DEFAULTS = {
    float: Tolerance(rtol=1.5e-8, ztol=EPS, atol=EPS),
    np.float32: Tolerance(rtol=3.5e-4, ztol=1e-6, atol=1e-6),
    Fraction: Tolerance(rtol=0, ztol=0, atol=0),
}

_tolerances = dict(_DEFAULTS)


def _numeric_kind(x) -> type:
    """Map a scalar or array to the key of its tolerance entry."""
    if isinstance(x, np.ndarray):
        if x.dtype == np.float32:
            return np.float32
        if x.dtype == object:
            flat = x.ravel()
            if len(flat) > 0 and isinstance(flat[0], Fraction):
                return Fraction
        return float
    if isinstance(x, np.float32):
        return np.float32
    if isinstance(x, Fraction):
        return Fraction
    return float


def get_tolerance(kind=float) -> Tolerance:
    """Return the global default tolerance for ``kind``."""
    return _tolerances.get(kind, _tolerances[float])


def set_tolerance(kind=float, **fields) -> Tolerance:
    """
    Override the global default tolerance for ``kind``.

    Parameters
    ----------
    kind : type
        One of ``float``, ``numpy.float32`` or ``fractions.Fraction``.
    **fields
        Any of ``rtol``, ``ztol``, ``atol``.

    Returns
    -------
    Tolerance
        The new default.
    """
    if kind not in _tolerances:
        raise ValueError(f"no tolerance registered for {kind!r}")
    _tolerances[kind] = replace(_tolerances[kind], **fields)
    return _tolerances[kind]


def reset_tolerance() -> None:
    """Restore the built-in defaults for every numeric type."""
    _tolerances.clear()
    _tolerances.update(_DEFAULTS)


def _resolve(x, tol: Optional[Tolerance]) -> Tolerance:
    if tol is not None:
        return tol
    return get_tolerance(_numeric_kind(x))


def _as_array(x):
    if isinstance(x, np.ndarray):
        return x
    if isinstance(x, (list, tuple)):
        return np.asarray(x)
    return x


def isapproxzero(x, tol: Optional[Tolerance] = None) -> bool:
    """Check whether ``x`` (scalar or array) is zero up to ``ztol``."""
    x = _as_array(x)
    t = _resolve(x, tol)
    return bool(np.all(np.abs(x) <= t.ztol))


def _isapprox_scalar(x, y, t: Tolerance) -> bool:
    if x == y:
        return True
    if abs(x) <= t.ztol and abs(y) <= t.ztol:
        return True
    return abs(x - y) <= max(t.atol, t.rtol * max(abs(x), abs(y)))


def _isapprox(x, y, tol: Optional[Tolerance] = None) -> bool:
    """
    Approximate equality of two scalars or two arrays (element-wise).

    Two values are close if both are approximately zero or their distance
    is within ``max(atol, rtol * max(|x|, |y|))``.
    """
    x = _as_array(x)
    y = _as_array(y)
    t = _resolve(x, tol)
    if isinstance(x, np.ndarray) or isinstance(y, np.ndarray):
        x, y = np.broadcast_arrays(np.asarray(x), np.asarray(y))
        return all(_isapprox_scalar(xi, yi, t) for xi, yi in zip(x.ravel(), y.ravel()))
    return _isapprox_scalar(x, y, t)


def _leq(x, y, tol: Optional[Tolerance] = None) -> bool:
    """``x <= y`` up to approximate equality."""
    x = _as_array(x)
    y = _as_array(y)
    if isinstance(x, np.ndarray) or isinstance(y, np.ndarray):
        x, y = np.broadcast_arrays(np.asarray(x), np.asarray(y))
        return all(_leq(xi, yi, tol) for xi, yi in zip(x.ravel(), y.ravel()))
    return bool(x <= y) or _isapprox(x, y, tol)


def _geq(x, y, tol: Optional[Tolerance] = None) -> bool:
    """``x >= y`` up to approximate equality."""
    return _leq(y, x, tol)
